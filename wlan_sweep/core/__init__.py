"""Sweep core: adapter protocol, controller, aggregator and value types."""

from .result import (
    LinkRate,
    RunResult,
    SeriesPoint,
    DataSeries,
)
from .adapter import (
    SimulationAdapter,
)
from .aggregator import (
    ResultAggregator,
    validate_run_result,
)
from .sweep import (
    SweepController,
)

__all__ = [
    # Value types
    "LinkRate",
    "RunResult",
    "SeriesPoint",
    "DataSeries",
    # Adapter boundary
    "SimulationAdapter",
    # Aggregation
    "ResultAggregator",
    "validate_run_result",
    # Sweep control
    "SweepController",
]

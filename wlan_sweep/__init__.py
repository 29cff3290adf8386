"""
Throughput sweep for a wired link feeding a three-station wireless cell.

Runs the fixed topology once per wired-link capacity, measures the
throughput of its three flows and assembles the results into plot-ready
series.
"""

from .errors import (
    ConfigurationError,
    SimulationFailure,
    MalformedResult,
)
from .config import (
    FlowId,
    FLOW_ORDER,
    NodeRole,
    SweepSpec,
    TrafficFlow,
    DEFAULT_FLOWS,
    TopologyConfig,
    PlotConfig,
    EngineKind,
    EngineConfig,
    ExperimentConfig,
    load_experiment_config,
)
from .core import (
    LinkRate,
    RunResult,
    SeriesPoint,
    DataSeries,
    SimulationAdapter,
    ResultAggregator,
    SweepController,
)
from .export import (
    PlotManifest,
    DatasetExporter,
)
from .experiment import run_experiment

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ConfigurationError",
    "SimulationFailure",
    "MalformedResult",
    # Config
    "FlowId",
    "FLOW_ORDER",
    "NodeRole",
    "SweepSpec",
    "TrafficFlow",
    "DEFAULT_FLOWS",
    "TopologyConfig",
    "PlotConfig",
    "EngineKind",
    "EngineConfig",
    "ExperimentConfig",
    "load_experiment_config",
    # Core
    "LinkRate",
    "RunResult",
    "SeriesPoint",
    "DataSeries",
    "SimulationAdapter",
    "ResultAggregator",
    "SweepController",
    # Export
    "PlotManifest",
    "DatasetExporter",
    "run_experiment",
]

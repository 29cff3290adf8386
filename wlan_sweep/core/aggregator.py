"""
Result Aggregator.

Accumulates per-flow (sweep value, throughput) points across a sweep.
One aggregator is created per experiment and only ever appended to.
"""

from __future__ import annotations

import math
import numbers
from typing import Dict, List, Sequence, Tuple

from ..config import FLOW_ORDER, FlowId
from ..errors import ConfigurationError, MalformedResult
from .result import DataSeries, RunResult, SeriesPoint


def validate_run_result(
    result: RunResult,
    flow_order: Sequence[FlowId] = FLOW_ORDER,
) -> Tuple[float, ...]:
    """
    Check that a run result holds one finite, non-negative number per flow.

    Errors name the offending flow by its position in flow_order.

    Returns:
        The throughputs as floats.

    Raises:
        MalformedResult: If any check fails. Values are never clamped.
    """
    if not isinstance(result, RunResult):
        raise MalformedResult(f"expected RunResult, got {type(result).__name__}")

    expected = len(flow_order)
    values = result.throughputs
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise MalformedResult(f"throughputs must be a sequence, got {type(values).__name__}")
    if len(values) != expected:
        raise MalformedResult(f"expected {expected} throughputs, got {len(values)}")

    checked = []
    for flow_id, value in zip(flow_order, values):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise MalformedResult(f"{flow_id.name} throughput is not a number: {value!r}")
        if not math.isfinite(value):
            raise MalformedResult(f"{flow_id.name} throughput is not finite: {value!r}")
        if value < 0:
            raise MalformedResult(f"{flow_id.name} throughput is negative: {value!r}")
        checked.append(float(value))
    return tuple(checked)


class ResultAggregator:
    """
    Collect one point per flow for every recorded sweep step.

    Points keep record order. The same sweep value recorded twice is
    kept twice; ordering by value is the caller's responsibility.

    Usage:
        aggregator = ResultAggregator()
        aggregator.record(1, RunResult((0.5, 0.001, 1.0)))
        up_heavy, up_light, down = aggregator.snapshot()
    """

    def __init__(self, flow_order: Sequence[FlowId] = FLOW_ORDER):
        """
        Initialize aggregator.

        Raises:
            ConfigurationError: If flow_order is empty, repeats a flow or
                holds something other than FlowId members.
        """
        flow_order = tuple(flow_order)
        if not flow_order:
            raise ConfigurationError("flow_order must not be empty")
        for flow_id in flow_order:
            if not isinstance(flow_id, FlowId):
                raise ConfigurationError(f"flow_order entries must be FlowId, got {flow_id!r}")
        if len(set(flow_order)) != len(flow_order):
            names = ", ".join(f.name for f in flow_order)
            raise ConfigurationError(f"flow_order repeats a flow: [{names}]")

        self.flow_order: Tuple[FlowId, ...] = flow_order
        self._points: Dict[FlowId, List[SeriesPoint]] = {
            flow_id: [] for flow_id in self.flow_order
        }

    def record(self, value: float, result: RunResult) -> None:
        """
        Append one point per flow for a sweep step.

        Args:
            value: Sweep value (x) of the step.
            result: Throughputs (y) of the step, in flow order.

        Raises:
            MalformedResult: If the result fails validation. Nothing is
                appended in that case.
        """
        throughputs = validate_run_result(result, self.flow_order)
        for flow_id, throughput in zip(self.flow_order, throughputs):
            self._points[flow_id].append(SeriesPoint(x=value, y=throughput))

    def snapshot(self) -> Tuple[DataSeries, ...]:
        """
        Current series, one per flow in flow order.

        Series are labeled with the flow name; DatasetExporter replaces
        the labels with the caller's legend text.
        """
        return tuple(
            DataSeries(label=flow_id.name, points=tuple(self._points[flow_id]))
            for flow_id in self.flow_order
        )

    def series(self, flow_id: FlowId) -> DataSeries:
        """Current series of a single flow."""
        return DataSeries(label=flow_id.name, points=tuple(self._points[flow_id]))

    def __len__(self) -> int:
        """Number of recorded sweep steps."""
        return len(self._points[self.flow_order[0]])

    def __repr__(self) -> str:
        flows = ", ".join(f.name for f in self.flow_order)
        return f"ResultAggregator({len(self)} steps, flows=[{flows}])"

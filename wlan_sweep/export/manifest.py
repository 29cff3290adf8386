"""
Dataset Exporter.

Turns the aggregated per-flow series into a PlotManifest: three labeled
series plus axis labels, title and x-range, ready for a plotting tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from ..config import FLOW_ORDER, SweepSpec
from ..core.result import DataSeries, SeriesPoint
from ..errors import ConfigurationError


@dataclass(frozen=True)
class PlotManifest:
    """Read-only description of the finished plot."""
    series: Tuple[DataSeries, ...]
    x_axis_label: str
    y_axis_label: str
    x_range: Tuple[float, float]
    title: str

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(s.label for s in self.series)

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Series as arrays for numeric work.

        Returns:
            (x, y) where x has shape (n,) taken from the first series and
            y has shape (len(series), n).
        """
        if not self.series or not self.series[0].points:
            return np.array([], dtype=float), np.zeros((len(self.series), 0))
        x = np.array(self.series[0].xs, dtype=float)
        y = np.array([s.ys for s in self.series], dtype=float)
        return x, y

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "x_axis_label": self.x_axis_label,
            "y_axis_label": self.y_axis_label,
            "x_range": list(self.x_range),
            "series": [
                {"label": s.label, "points": [[p.x, p.y] for p in s.points]}
                for s in self.series
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlotManifest":
        return cls(
            series=tuple(
                DataSeries(
                    label=s["label"],
                    points=tuple(SeriesPoint(x=x, y=y) for x, y in s["points"]),
                )
                for s in data["series"]
            ),
            x_axis_label=data["x_axis_label"],
            y_axis_label=data["y_axis_label"],
            x_range=tuple(data["x_range"]),
            title=data["title"],
        )


class DatasetExporter:
    """
    Build the PlotManifest at the end of a sweep.

    The x-range always spans the nominal sweep domain
    (start, start + step*count), whatever the recorded points are.
    """

    def __init__(self, spec: SweepSpec):
        self.spec = spec

    def build(
        self,
        series: Sequence[DataSeries],
        labels: Sequence[str],
        x_axis_label: str,
        y_axis_label: str,
        title: str,
    ) -> PlotManifest:
        """
        Args:
            series: One series per flow, in flow order.
            labels: Legend text for each series, same order.
            x_axis_label: X axis title.
            y_axis_label: Y axis title.
            title: Plot title.

        Raises:
            ConfigurationError: Series or label count is not three.
        """
        expected = len(FLOW_ORDER)
        if len(series) != expected:
            raise ConfigurationError(f"expected {expected} series, got {len(series)}")
        if len(labels) != expected:
            raise ConfigurationError(f"expected {expected} labels, got {len(labels)}")

        return PlotManifest(
            series=tuple(s.relabel(label) for s, label in zip(series, labels)),
            x_axis_label=x_axis_label,
            y_axis_label=y_axis_label,
            x_range=self.spec.x_range,
            title=title,
        )

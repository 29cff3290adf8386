"""
Value types exchanged between the sweep components.

LinkRate is what the controller hands to an adapter, RunResult is what
an adapter hands back, and SeriesPoint/DataSeries is what the
aggregator accumulates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class LinkRate:
    """Wired-link capacity formatted for the simulation engine."""
    value: float
    unit: str = "kbps"

    def __str__(self) -> str:
        if float(self.value).is_integer():
            return f"{int(self.value)}{self.unit}"
        return f"{self.value!r}{self.unit}"


@dataclass(frozen=True)
class RunResult:
    """
    Throughputs of one simulated run, in Mbps.

    Ordered like FLOW_ORDER: (UP_HEAVY, UP_LIGHT, DOWN).
    """
    throughputs: Tuple[float, ...]


@dataclass(frozen=True)
class SeriesPoint:
    x: float
    y: float


@dataclass(frozen=True)
class DataSeries:
    """Labeled point series for one flow."""
    label: str
    points: Tuple[SeriesPoint, ...] = ()

    @property
    def xs(self) -> Tuple[float, ...]:
        return tuple(p.x for p in self.points)

    @property
    def ys(self) -> Tuple[float, ...]:
        return tuple(p.y for p in self.points)

    def relabel(self, label: str) -> "DataSeries":
        """Same points under a different label."""
        return DataSeries(label=label, points=self.points)

    def __len__(self) -> int:
        return len(self.points)

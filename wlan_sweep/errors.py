"""
Error types for the throughput sweep.

ConfigurationError is raised before any simulated run starts.
SimulationFailure (and its MalformedResult variant) aborts a sweep
that is already under way.
"""

from __future__ import annotations

from typing import Any, Optional


class ConfigurationError(ValueError):
    """Invalid sweep, experiment or export configuration."""


class SimulationFailure(RuntimeError):
    """
    A simulated run could not be completed.

    Attributes:
        reason: Human-readable cause.
        index: Sweep index of the failing step (None if not yet known).
        value: Sweep value of the failing step.
        rate: Formatted link rate handed to the adapter.
    """

    def __init__(
        self,
        reason: str,
        index: Optional[int] = None,
        value: Optional[float] = None,
        rate: Any = None,
    ):
        self.reason = reason
        self.index = index
        self.value = value
        self.rate = rate
        super().__init__(self._format())

    def _format(self) -> str:
        if self.index is None:
            return self.reason
        where = f"sweep index {self.index} (value={self.value}"
        if self.rate is not None:
            where += f", rate={self.rate}"
        return f"{where}): {self.reason}"

    def at_step(self, index: int, value: float, rate: Any = None) -> "SimulationFailure":
        """Return a copy of this failure bound to a sweep step."""
        return type(self)(self.reason, index=index, value=value, rate=rate)


class MalformedResult(SimulationFailure):
    """A run result that is not exactly three finite, non-negative values."""

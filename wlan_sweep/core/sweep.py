"""
Sweep Controller.

Runs the simulation once per sweep value, strictly in sweep order, and
forwards every result to the aggregator.
"""

from __future__ import annotations

from typing import Optional, Callable

from ..config import SweepSpec
from ..errors import MalformedResult, SimulationFailure
from .adapter import SimulationAdapter
from .aggregator import ResultAggregator
from .result import LinkRate, RunResult


class SweepController:
    """
    Owns the sweep schedule and drives one experiment.

    Each step formats the sweep value as a LinkRate, blocks on the
    adapter, and records the result before the next step begins. The
    first failing step aborts the sweep; steps recorded before it stay
    in the aggregator.
    """

    def __init__(
        self,
        spec: SweepSpec,
        unit: str = "kbps",
        verbose: bool = False,
    ):
        """
        Initialize sweep controller.

        Args:
            spec: Sweep schedule (start, step, count).
            unit: Rate unit suffix handed to the adapter.
            verbose: Print progress during sweep.
        """
        self.spec = spec
        self.unit = unit
        self.verbose = verbose

    def run(
        self,
        adapter: SimulationAdapter,
        aggregator: ResultAggregator,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> None:
        """
        Execute the sweep.

        Args:
            adapter: Simulation adapter, called once per step.
            aggregator: Receives (value, RunResult) for every step.
            progress_callback: Called with (completed, total) after each step.

        Raises:
            SimulationFailure: A run failed; carries the failing index and value.
            MalformedResult: A run returned an invalid result.
        """
        total = self.spec.count

        if self.verbose:
            print(f"\n{'=' * 60}")
            print(f"Link Capacity Sweep: {self.rate(0)} .. {self.rate(total - 1)}")
            print(f"Total steps: {total}")
            print(f"{'=' * 60}")

        for index in range(total):
            value = self.spec.value_at(index)
            rate = self.rate(index)

            if self.verbose:
                print(f"\n[{index + 1}/{total}] Datarate: {rate}")

            result = self._execute(adapter, index, value, rate)

            try:
                aggregator.record(value, result)
            except MalformedResult as e:
                raise e.at_step(index, value, rate) from e

            if self.verbose:
                for flow_id, throughput in zip(aggregator.flow_order, result.throughputs):
                    print(f"  {flow_id.name:<9} {throughput:.6f} Mbps")

            if progress_callback:
                progress_callback(index + 1, total)

        if self.verbose:
            print(f"\n{'=' * 60}")
            print(f"Sweep complete: {len(aggregator)} steps recorded")
            print(f"{'=' * 60}\n")

    def rate(self, index: int) -> LinkRate:
        """Link rate handed to the adapter at a step."""
        return LinkRate(self.spec.value_at(index), self.unit)

    def _execute(
        self,
        adapter: SimulationAdapter,
        index: int,
        value: float,
        rate: LinkRate,
    ) -> RunResult:
        try:
            return adapter.execute(rate)
        except SimulationFailure as e:
            raise e.at_step(index, value, rate) from e
        except Exception as e:
            raise SimulationFailure(
                f"{type(e).__name__}: {e}", index=index, value=value, rate=rate
            ) from e

"""
Simulation Adapter Protocol.

Defines the interface through which the sweep reaches the external
simulation engine. This decouples sweep control from how (and where)
the topology is actually simulated.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .result import LinkRate, RunResult


@runtime_checkable
class SimulationAdapter(Protocol):
    """
    Protocol for objects that run one simulated experiment per call.

    Implementations build the fixed topology with the given wired-link
    capacity, run the three traffic flows to completion and return one
    throughput per flow. Calls are blocking and must not depend on
    state left behind by a previous call.
    """

    def execute(self, link_rate: LinkRate) -> RunResult:
        """
        Run one simulation.

        Args:
            link_rate: Capacity of the wired link, e.g. LinkRate(251, "kbps").

        Returns:
            RunResult with exactly three throughputs (Mbps) in flow order.
            Flows without any received traffic report 0.0.
        """
        ...

"""
External ns-3 program adapter.

Runs a compiled ns-3 scenario once per sweep step and reads back the
FlowMonitor XML it writes.

The program must build the topology and flows that TopologyConfig and
DEFAULT_FLOWS describe, take the wired-link rate where the command
template puts {rate}, serialize FlowMonitor (with the Ipv4FlowClassifier
section) to the path substituted for {flowmon}, and exit 0. See
examples/configs/ns3_program.yaml for the flags the default template uses.
"""

from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import DEFAULT_FLOWS, EngineConfig, TopologyConfig, TrafficFlow
from ..core.result import LinkRate, RunResult
from .flow_stats import extract_run_result, load_flowmon_xml


class Ns3ProgramAdapter:
    """
    SimulationAdapter that shells out to an ns-3 program.

    Usage:
        engine = EngineConfig(
            kind=EngineKind.PROGRAM,
            command=["./ns3", "run", "scratch/up2down1 --dataRate={rate} --flowmonFile={flowmon}"],
            cwd="/opt/ns-3",
        )
        adapter = Ns3ProgramAdapter(engine, TopologyConfig())
    """

    def __init__(
        self,
        engine: EngineConfig,
        topology: Optional[TopologyConfig] = None,
        flows: Sequence[TrafficFlow] = DEFAULT_FLOWS,
    ):
        self.engine = engine
        self.topology = topology or TopologyConfig()
        self.flows = tuple(flows)

    def build_command(self, link_rate: LinkRate, flowmon_path: Path) -> List[str]:
        """Substitute {rate} and {flowmon} into the command template."""
        return [
            part.replace("{rate}", str(link_rate)).replace("{flowmon}", str(flowmon_path))
            for part in self.engine.command
        ]

    def execute(self, link_rate: LinkRate) -> RunResult:
        """
        Run the program for one link rate.

        Raises:
            subprocess.CalledProcessError: Program exited non-zero.
            subprocess.TimeoutExpired: Program exceeded engine.timeout.
            FileNotFoundError: Program did not write the FlowMonitor file.
        """
        with tempfile.TemporaryDirectory() as tmp:
            flowmon_path = Path(tmp) / "flowmon.xml"
            subprocess.run(
                self.build_command(link_rate, flowmon_path),
                cwd=self.engine.cwd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.engine.timeout,
            )
            records = load_flowmon_xml(flowmon_path)

        return extract_run_result(records, self.topology, self.flows)

"""Simulation engine adapters and FlowMonitor statistics extraction."""

from __future__ import annotations

from typing import Optional
from pathlib import Path

from ..config import EngineKind, ExperimentConfig
from ..core.adapter import SimulationAdapter
from .flow_stats import (
    FlowRecord,
    load_flowmon_xml,
    parse_flowmon_element,
    throughput_mbps,
    extract_run_result,
)
from .ns3_program import Ns3ProgramAdapter


def create_adapter(
    config: ExperimentConfig,
    flowmon_dir: Optional[Path] = None,
) -> SimulationAdapter:
    """
    Create the simulation adapter selected by config.engine.kind.

    Raises:
        ImportError: NS3 kind selected but ns-3 bindings are missing.
    """
    if config.engine.kind is EngineKind.PROGRAM:
        return Ns3ProgramAdapter(config.engine, config.topology)

    from .ns3_bindings import Ns3BindingsAdapter
    return Ns3BindingsAdapter(config.topology, flowmon_dir=flowmon_dir)


__all__ = [
    "FlowRecord",
    "load_flowmon_xml",
    "parse_flowmon_element",
    "throughput_mbps",
    "extract_run_result",
    "Ns3ProgramAdapter",
    "create_adapter",
]

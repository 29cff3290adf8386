"""
Flow statistics extraction.

Reads the per-flow counters that ns-3's FlowMonitor dumps as XML and
turns them into a RunResult, one throughput per traffic flow.

Throughput uses a fixed observation window from the topology:

    throughput_mbps = rx_bytes * 8 / measurement_window / 1000 / 1000

The window is not derived from the first/last packet timestamps, so
results stay comparable with earlier runs of the experiment.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from ..config import DEFAULT_FLOWS, TopologyConfig, TrafficFlow
from ..core.result import RunResult


@dataclass(frozen=True)
class FlowRecord:
    """Counters of one classified flow, as reported by FlowMonitor."""
    flow_id: int
    source_address: str
    destination_address: str
    protocol: int = 17
    source_port: int = 0
    destination_port: int = 0
    tx_bytes: int = 0
    rx_bytes: int = 0
    tx_packets: int = 0
    rx_packets: int = 0
    lost_packets: int = 0

    @property
    def endpoint(self) -> Tuple[str, str, int]:
        """(source address, destination address, destination port)."""
        return (self.source_address, self.destination_address, self.destination_port)


def load_flowmon_xml(path: str | Path) -> List[FlowRecord]:
    """
    Parse a FlowMonitor XML dump.

    Joins the FlowStats and Ipv4FlowClassifier sections on flowId.
    Flows that only appear in FlowStats are skipped, since they cannot
    be attributed to an endpoint.

    Args:
        path: XML file written by FlowMonitor::SerializeToXmlFile.

    Returns:
        FlowRecords sorted by flow id.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a FlowMonitor dump.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"FlowMonitor file not found: {path}")

    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ValueError(f"Invalid FlowMonitor XML {path}: {e}") from e

    return parse_flowmon_element(root)


def parse_flowmon_element(root: ET.Element) -> List[FlowRecord]:
    """Parse an already loaded <FlowMonitor> element."""
    if root.tag != "FlowMonitor":
        raise ValueError(f"Expected <FlowMonitor> root, got <{root.tag}>")

    stats: Dict[int, ET.Element] = {}
    for flow in root.iterfind("FlowStats/Flow"):
        stats[int(flow.get("flowId"))] = flow

    records = []
    for flow in root.iterfind("Ipv4FlowClassifier/Flow"):
        flow_id = int(flow.get("flowId"))
        counters = stats.get(flow_id)
        if counters is None:
            continue
        records.append(FlowRecord(
            flow_id=flow_id,
            source_address=flow.get("sourceAddress"),
            destination_address=flow.get("destinationAddress"),
            protocol=int(flow.get("protocol", 17)),
            source_port=int(flow.get("sourcePort", 0)),
            destination_port=int(flow.get("destinationPort", 0)),
            tx_bytes=int(counters.get("txBytes", 0)),
            rx_bytes=int(counters.get("rxBytes", 0)),
            tx_packets=int(counters.get("txPackets", 0)),
            rx_packets=int(counters.get("rxPackets", 0)),
            lost_packets=int(counters.get("lostPackets", 0)),
        ))

    records.sort(key=lambda r: r.flow_id)
    return records


def throughput_mbps(rx_bytes: int, window: float) -> float:
    """Received bytes over a fixed window, in Mbps."""
    return rx_bytes * 8.0 / window / 1000 / 1000


def extract_run_result(
    records: Sequence[FlowRecord],
    topology: TopologyConfig,
    flows: Sequence[TrafficFlow] = DEFAULT_FLOWS,
) -> RunResult:
    """
    Map classified flow counters onto the traffic flows.

    Each traffic flow is matched by (source address, destination address,
    destination port). A flow with no matching record reports 0.0; if
    the classifier split a flow into several records their bytes are
    added up.

    Args:
        records: Parsed FlowMonitor records of one run.
        topology: Topology the run used (addresses, port, window).
        flows: Traffic flows in result order.

    Returns:
        RunResult with one throughput per flow.
    """
    rx_by_endpoint: Dict[Tuple[str, str, int], int] = {}
    for record in records:
        rx_by_endpoint[record.endpoint] = rx_by_endpoint.get(record.endpoint, 0) + record.rx_bytes

    throughputs = []
    for flow in flows:
        endpoint = (
            topology.address_of(flow.source),
            topology.address_of(flow.destination),
            topology.port,
        )
        rx_bytes = rx_by_endpoint.get(endpoint, 0)
        throughputs.append(throughput_mbps(rx_bytes, topology.measurement_window))

    return RunResult(tuple(throughputs))

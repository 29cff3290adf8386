"""
In-process ns-3 adapter.

Builds the fixed topology through the ns-3 Python bindings:

    STA0 ┐
    STA1 ┼~~ wifi ~~ AP_ROUTER ====== REMOTE_ROUTER
    STA2 ┘           10.1.1.1  p2p   10.1.1.2
    10.1.3.1-3       10.1.3.4  (swept DataRate)

Each call to execute() creates a fresh simulation, runs it to the
topology's stop time, and destroys it again.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Dict, Optional, Sequence

from ..config import DEFAULT_FLOWS, NodeRole, TopologyConfig, TrafficFlow
from ..core.result import LinkRate, RunResult
from .flow_stats import extract_run_result, load_flowmon_xml


class Ns3BindingsAdapter:
    """
    SimulationAdapter backed by the ns-3 Python bindings (``pip install ns3``).

    Usage:
        adapter = Ns3BindingsAdapter(TopologyConfig())
        result = adapter.execute(LinkRate(251, "kbps"))
    """

    def __init__(
        self,
        topology: Optional[TopologyConfig] = None,
        flows: Sequence[TrafficFlow] = DEFAULT_FLOWS,
        flowmon_dir: Optional[Path] = None,
    ):
        """
        Initialize adapter.

        Args:
            topology: Fixed topology parameters.
            flows: Traffic flows, in result order.
            flowmon_dir: Keep FlowMonitor XML dumps here (default: discard).

        Raises:
            ImportError: If the ns-3 bindings are not installed.
        """
        from ns import ns

        self._ns = ns
        self.topology = topology or TopologyConfig()
        self.flows = tuple(flows)
        self.flowmon_dir = Path(flowmon_dir) if flowmon_dir else None

    def execute(self, link_rate: LinkRate) -> RunResult:
        """Build, run and tear down one simulation."""
        if self.flowmon_dir is not None:
            self.flowmon_dir.mkdir(parents=True, exist_ok=True)
            xml_path = self.flowmon_dir / f"flowmon-{link_rate}.xml"
            self._simulate(link_rate, xml_path)
            return extract_run_result(load_flowmon_xml(xml_path), self.topology, self.flows)

        with tempfile.TemporaryDirectory() as tmp:
            xml_path = Path(tmp) / "flowmon.xml"
            self._simulate(link_rate, xml_path)
            return extract_run_result(load_flowmon_xml(xml_path), self.topology, self.flows)

    def _simulate(self, link_rate: LinkRate, xml_path: Path) -> None:
        ns = self._ns
        topo = self.topology

        # Wired link between the two routers
        p2p_nodes = ns.NodeContainer()
        p2p_nodes.Create(2)

        p2p = ns.PointToPointHelper()
        p2p.SetDeviceAttribute("DataRate", ns.StringValue(str(link_rate)))
        p2p.SetChannelAttribute("Delay", ns.StringValue(topo.link_delay))
        p2p_devices = p2p.Install(p2p_nodes)

        # Wireless cell, AP on the first router
        sta_nodes = ns.NodeContainer()
        sta_nodes.Create(topo.stations)
        ap_node = p2p_nodes.Get(0)

        channel = ns.YansWifiChannelHelper.Default()
        phy = ns.YansWifiPhyHelper()
        phy.SetChannel(channel.Create())

        wifi = ns.WifiHelper()
        wifi.SetRemoteStationManager(topo.remote_station_manager)

        mac = ns.WifiMacHelper()
        ssid = ns.Ssid(topo.ssid)
        mac.SetType("ns3::StaWifiMac",
                    "Ssid", ns.SsidValue(ssid),
                    "ActiveProbing", ns.BooleanValue(False))
        sta_devices = wifi.Install(phy, mac, sta_nodes)

        mac.SetType("ns3::ApWifiMac", "Ssid", ns.SsidValue(ssid))
        ap_devices = wifi.Install(phy, mac, ap_node)

        mobility = ns.MobilityHelper()
        mobility.SetMobilityModel("ns3::ConstantPositionMobilityModel")
        mobility.Install(sta_nodes)
        mobility.Install(p2p_nodes)

        stack = ns.InternetStackHelper()
        stack.Install(sta_nodes)
        stack.Install(p2p_nodes)

        # Assignment order must match TopologyConfig.address_of
        mask = ns.Ipv4Mask(topo.netmask)
        address = ns.Ipv4AddressHelper()
        address.SetBase(ns.Ipv4Address(topo.wired_network), mask)
        address.Assign(p2p_devices)
        address.SetBase(ns.Ipv4Address(topo.wireless_network), mask)
        address.Assign(sta_devices)
        address.Assign(ap_devices)

        ns.Ipv4GlobalRoutingHelper.PopulateRoutingTables()

        nodes: Dict[NodeRole, object] = {
            NodeRole.AP_ROUTER: p2p_nodes.Get(0),
            NodeRole.REMOTE_ROUTER: p2p_nodes.Get(1),
        }
        for i in range(topo.stations):
            nodes[NodeRole(f"station_{i}")] = sta_nodes.Get(i)

        for flow in self.flows:
            remote = ns.InetSocketAddress(
                ns.Ipv4Address(topo.address_of(flow.destination)), topo.port
            )
            onoff = ns.OnOffHelper("ns3::UdpSocketFactory", remote.ConvertTo())
            onoff.SetConstantRate(ns.DataRate(flow.rate))
            apps = onoff.Install(nodes[flow.source])
            apps.Start(ns.Seconds(flow.start_time))
            apps.Stop(ns.Seconds(flow.stop_time))

        ns.Simulator.Stop(ns.Seconds(topo.stop_time))

        flowmon = ns.FlowMonitorHelper()
        monitor = flowmon.InstallAll()

        try:
            ns.Simulator.Run()
            monitor.CheckForLostPackets()
            monitor.SerializeToXmlFile(str(xml_path), False, False)
        finally:
            ns.Simulator.Destroy()

"""
Shared pytest fixtures for the throughput sweep tests.

Provides stub simulation adapters (so no test needs ns-3), sweep
specs and FlowMonitor XML samples used across unit and integration tests.
"""

import pytest
from typing import List, Optional

from wlan_sweep.config import SweepSpec, TopologyConfig, ExperimentConfig
from wlan_sweep.core.result import LinkRate, RunResult


# ==============================================================================
# Stub Adapters
# ==============================================================================

class LinearStubAdapter:
    """Returns (0.5, value/1000, 1.0) for link rate `value` and logs every call."""

    def __init__(self):
        self.calls: List[LinkRate] = []

    def execute(self, link_rate: LinkRate) -> RunResult:
        self.calls.append(link_rate)
        return RunResult((0.5, link_rate.value / 1000, 1.0))


class FailingStubAdapter(LinearStubAdapter):
    """Behaves like LinearStubAdapter until call `fail_at`, then raises."""

    def __init__(self, fail_at: int, error: Optional[Exception] = None):
        super().__init__()
        self.fail_at = fail_at
        self.error = error or RuntimeError("engine crashed")

    def execute(self, link_rate: LinkRate) -> RunResult:
        if len(self.calls) == self.fail_at:
            self.calls.append(link_rate)
            raise self.error
        return super().execute(link_rate)


class FixedStubAdapter:
    """Returns the same raw throughputs for every call."""

    def __init__(self, throughputs):
        self.throughputs = throughputs
        self.calls: List[LinkRate] = []

    def execute(self, link_rate: LinkRate) -> RunResult:
        self.calls.append(link_rate)
        return RunResult(self.throughputs)


@pytest.fixture
def stub_adapter() -> LinearStubAdapter:
    """Deterministic adapter: (0.5, value/1000, 1.0)."""
    return LinearStubAdapter()


@pytest.fixture
def stub_adapter_factory():
    """Factory for independent LinearStubAdapter instances."""
    return LinearStubAdapter


@pytest.fixture
def failing_adapter_factory():
    """Factory for adapters that fail on a given sweep index."""
    def _create(fail_at: int, error: Optional[Exception] = None) -> FailingStubAdapter:
        return FailingStubAdapter(fail_at, error)
    return _create


@pytest.fixture
def fixed_adapter_factory():
    """Factory for adapters that always return the given throughputs."""
    def _create(throughputs) -> FixedStubAdapter:
        return FixedStubAdapter(throughputs)
    return _create


# ==============================================================================
# Configuration Fixtures
# ==============================================================================

@pytest.fixture
def default_spec() -> SweepSpec:
    """The up2down1 sweep: 1kbps + 250kbps steps, 9 steps."""
    return SweepSpec(start=1, step=250, count=9)


@pytest.fixture
def topology() -> TopologyConfig:
    return TopologyConfig()


@pytest.fixture
def experiment_config(tmp_path) -> ExperimentConfig:
    """Default experiment writing into a temporary directory."""
    return ExperimentConfig(output_dir=tmp_path / "out")


# ==============================================================================
# FlowMonitor XML
# ==============================================================================

FLOWMON_XML = """<?xml version="1.0" ?>
<FlowMonitor>
  <FlowStats>
    <Flow flowId="1" timeFirstTxPacket="+1e+09ns" timeFirstRxPacket="+1.00237e+09ns"
          timeLastTxPacket="+9.99e+09ns" timeLastRxPacket="+9.99e+09ns"
          delaySum="+2.4e+09ns" jitterSum="+1e+07ns" lastDelay="+2.3e+06ns"
          txBytes="1162800" rxBytes="1125000" txPackets="2175" rxPackets="2100"
          lostPackets="75" timesForwarded="2100">
    </Flow>
    <Flow flowId="2" txBytes="562500" rxBytes="562500" txPackets="1080"
          rxPackets="1080" lostPackets="0" timesForwarded="1080">
    </Flow>
    <Flow flowId="3" txBytes="1125000" rxBytes="1012500" txPackets="2160"
          rxPackets="1950" lostPackets="210" timesForwarded="1950">
    </Flow>
  </FlowStats>
  <Ipv4FlowClassifier>
    <Flow flowId="1" sourceAddress="10.1.3.1" destinationAddress="10.1.1.2"
          protocol="17" sourcePort="49153" destinationPort="9">
      <Dscp value="0x0" packets="2175" />
    </Flow>
    <Flow flowId="2" sourceAddress="10.1.3.2" destinationAddress="10.1.1.2"
          protocol="17" sourcePort="49153" destinationPort="9">
      <Dscp value="0x0" packets="1080" />
    </Flow>
    <Flow flowId="3" sourceAddress="10.1.1.2" destinationAddress="10.1.3.3"
          protocol="17" sourcePort="49153" destinationPort="9">
      <Dscp value="0x0" packets="2160" />
    </Flow>
  </Ipv4FlowClassifier>
  <FlowProbes>
  </FlowProbes>
</FlowMonitor>
"""


@pytest.fixture
def flowmon_xml_text() -> str:
    """FlowMonitor dump of one run with all three flows present."""
    return FLOWMON_XML


@pytest.fixture
def flowmon_xml_file(tmp_path, flowmon_xml_text):
    """FlowMonitor dump written to disk."""
    path = tmp_path / "flowmon.xml"
    path.write_text(flowmon_xml_text, encoding="utf-8")
    return path

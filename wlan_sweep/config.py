"""
Configuration for the wired/wireless throughput sweep.

Defines the fixed topology, the three traffic flows and the sweep
schedule, and loads experiment settings from YAML files.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Sequence, Tuple
from pathlib import Path
from enum import Enum
import ipaddress
import math
import numbers
import yaml

from .errors import ConfigurationError


class FlowId(Enum):
    """Flow identities, in the fixed order used by every RunResult."""
    UP_HEAVY = "up_heavy"
    UP_LIGHT = "up_light"
    DOWN = "down"


# Order of throughputs in RunResult and of series in PlotManifest
FLOW_ORDER: Tuple[FlowId, ...] = (FlowId.UP_HEAVY, FlowId.UP_LIGHT, FlowId.DOWN)


class NodeRole(Enum):
    """
    Nodes of the fixed topology.

    AP_ROUTER terminates the wired link and serves as access point for
    the stations; REMOTE_ROUTER is the far end of the wired link.
    """
    AP_ROUTER = "ap_router"
    REMOTE_ROUTER = "remote_router"
    STATION_0 = "station_0"
    STATION_1 = "station_1"
    STATION_2 = "station_2"

    @property
    def is_station(self) -> bool:
        """Check if this role is a wireless station."""
        return self.value.startswith("station_")

    @property
    def station_index(self) -> int:
        """Index of the station within the wireless cell."""
        if not self.is_station:
            raise ValueError(f"{self.name} is not a station")
        return int(self.value.rsplit("_", 1)[1])


@dataclass(frozen=True)
class SweepSpec:
    """
    Sweep schedule over the wired-link capacity.

    The i-th sweep value is start + i*step for i in [0, count).
    """
    start: float = 1
    step: float = 250
    count: int = 9

    def __post_init__(self):
        """Validate schedule."""
        for name in ("start", "step"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value!r}")
        if isinstance(self.count, bool) or not isinstance(self.count, numbers.Integral):
            raise ConfigurationError(f"count must be an integer, got {self.count!r}")
        if self.count < 1:
            raise ConfigurationError(f"count must be at least 1, got {self.count}")

    def value_at(self, index: int) -> float:
        """Sweep value for step index."""
        return self.start + index * self.step

    def values(self) -> List[float]:
        """All sweep values in sweep order."""
        return [self.value_at(i) for i in range(self.count)]

    @property
    def x_range(self) -> Tuple[float, float]:
        """Axis range (start, start + step*count); upper bound is exclusive."""
        return (self.start, self.start + self.step * self.count)

    def to_dict(self) -> Dict[str, Any]:
        return {"start": self.start, "step": self.step, "count": self.count}


@dataclass(frozen=True)
class TrafficFlow:
    """Constant-rate UDP flow between two nodes of the topology."""
    id: FlowId
    source: NodeRole
    destination: NodeRole
    rate: str              # ns-3 DataRate string, e.g. "500kb/s"
    start_time: float = 1.0  # seconds
    stop_time: float = 10.0  # seconds


DEFAULT_FLOWS: Tuple[TrafficFlow, ...] = (
    TrafficFlow(FlowId.UP_HEAVY, NodeRole.STATION_0, NodeRole.REMOTE_ROUTER, "1000kb/s"),
    TrafficFlow(FlowId.UP_LIGHT, NodeRole.STATION_1, NodeRole.REMOTE_ROUTER, "500kb/s"),
    TrafficFlow(FlowId.DOWN, NodeRole.REMOTE_ROUTER, NodeRole.STATION_2, "1000kb/s"),
)


@dataclass
class TopologyConfig:
    """
    Fixed topology parameters.

    measurement_window is the divisor used to turn received bytes into
    throughput. It is a constant of the topology and is not derived from
    the flows' start/stop times.
    """
    link_delay: str = "2ms"
    stations: int = 3
    ssid: str = "ns-3-ssid"
    remote_station_manager: str = "ns3::AarfWifiManager"
    wired_network: str = "10.1.1.0"
    wireless_network: str = "10.1.3.0"
    netmask: str = "255.255.255.0"
    port: int = 9              # Discard port (RFC 863)
    stop_time: float = 10.0    # seconds
    measurement_window: float = 9.0  # seconds

    def validate(self) -> None:
        """Validate configuration values."""
        if self.stations != 3:
            raise ConfigurationError("topology has exactly 3 stations")
        if self.measurement_window <= 0:
            raise ConfigurationError("measurement_window must be positive")
        if self.stop_time <= 0:
            raise ConfigurationError("stop_time must be positive")
        if not 0 < self.port < 65536:
            raise ConfigurationError("port must be 1-65535")
        for name in ("wired_network", "wireless_network"):
            try:
                ipaddress.IPv4Network(f"{getattr(self, name)}/{self.netmask}")
            except ValueError as e:
                raise ConfigurationError(f"{name}: {e}") from e

    def address_of(self, role: NodeRole) -> str:
        """
        IPv4 address the engine assigns to a role.

        Addresses are handed out in installation order: the wired link
        gets AP router then remote router, the wireless cell gets the
        stations first and the access point last.
        """
        if role is NodeRole.REMOTE_ROUTER:
            return self._host(self.wired_network, 2)
        if role is NodeRole.AP_ROUTER:
            return self._host(self.wired_network, 1)
        return self._host(self.wireless_network, role.station_index + 1)

    def _host(self, network: str, offset: int) -> str:
        base = ipaddress.IPv4Network(f"{network}/{self.netmask}")
        return str(base.network_address + offset)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "link_delay": self.link_delay,
            "stations": self.stations,
            "ssid": self.ssid,
            "remote_station_manager": self.remote_station_manager,
            "wired_network": self.wired_network,
            "wireless_network": self.wireless_network,
            "netmask": self.netmask,
            "port": self.port,
            "stop_time": self.stop_time,
            "measurement_window": self.measurement_window,
        }


@dataclass
class PlotConfig:
    """Labels and output naming for the assembled plot."""
    name: str = "up2down1"
    title: str = "Throughput vs. datarate"
    x_axis_label: str = "Datarate (kbps)"
    y_axis_label: str = "Throughput (Mbps)"
    labels: Tuple[str, str, str] = ("1000kb/s up", "500kb/s up", "1000kb/s down")
    terminal: str = "png"

    def validate(self) -> None:
        """Validate configuration values."""
        if len(self.labels) != len(FLOW_ORDER):
            raise ConfigurationError(
                f"expected {len(FLOW_ORDER)} series labels, got {len(self.labels)}"
            )
        if not self.name:
            raise ConfigurationError("plot name must not be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "x_axis_label": self.x_axis_label,
            "y_axis_label": self.y_axis_label,
            "labels": list(self.labels),
            "terminal": self.terminal,
        }


class EngineKind(Enum):
    """How the simulation engine is reached."""
    NS3 = "ns3"          # In-process ns-3 Python bindings
    PROGRAM = "program"  # External ns-3 program writing FlowMonitor XML


@dataclass
class EngineConfig:
    """
    Simulation engine settings.

    For PROGRAM, command is a template: "{rate}" is replaced by the link
    rate (e.g. "251kbps") and "{flowmon}" by the XML path the program
    must write.
    """
    kind: EngineKind = EngineKind.NS3
    command: List[str] = field(default_factory=lambda: [
        "./ns3", "run", "scratch/up2down1 --dataRate={rate} --flowmonFile={flowmon}",
    ])
    cwd: Optional[str] = None
    timeout: Optional[float] = None  # seconds, None = wait forever

    def validate(self) -> None:
        """Validate configuration values."""
        if self.kind is EngineKind.PROGRAM:
            if not self.command:
                raise ConfigurationError("engine command must not be empty")
            if not any("{flowmon}" in part for part in self.command):
                raise ConfigurationError("engine command must contain '{flowmon}'")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("engine timeout must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "command": list(self.command),
            "cwd": self.cwd,
            "timeout": self.timeout,
        }


@dataclass
class ExperimentConfig:
    """Complete configuration of one sweep experiment."""
    sweep: SweepSpec = field(default_factory=SweepSpec)
    unit: str = "kbps"
    topology: TopologyConfig = field(default_factory=TopologyConfig)
    plot: PlotConfig = field(default_factory=PlotConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    output_dir: Path = Path("output/sweep")

    def validate(self) -> None:
        """Validate configuration values."""
        if not self.unit:
            raise ConfigurationError("unit must not be empty")
        self.topology.validate()
        self.plot.validate()
        self.engine.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        return {
            "sweep": self.sweep.to_dict(),
            "unit": self.unit,
            "topology": self.topology.to_dict(),
            "plot": self.plot.to_dict(),
            "engine": self.engine.to_dict(),
            "output_dir": str(self.output_dir),
        }

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def load_experiment_config(config_path: str | Path) -> ExperimentConfig:
    """
    Load experiment configuration from YAML file.

    Every section and key is optional; missing values take the defaults
    of the up2down1 experiment (1kbps to 2001kbps in 250kbps steps).

    Args:
        config_path: Path to YAML configuration file.

    Returns:
        ExperimentConfig instance.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file is not valid YAML or a value has
            the wrong type or range.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Experiment config file not found: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"invalid YAML in {config_path}: {e}") from e

    return _parse_experiment_config({} if data is None else data)


def _parse_experiment_config(data: Dict[str, Any]) -> ExperimentConfig:
    """Parse YAML data into ExperimentConfig."""
    if not isinstance(data, dict):
        raise ConfigurationError("experiment config must be a mapping")

    config = ExperimentConfig(
        sweep=_parse_sweep(_section(data, "sweep")),
        unit=_string(data, "unit", "kbps"),
        topology=_parse_topology(_section(data, "topology")),
        plot=_parse_plot(_section(data, "plot")),
        engine=_parse_engine(_section(data, "engine")),
        output_dir=Path(_string(data, "output_dir", "output/sweep")),
    )
    config.validate()
    return config


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Nested mapping under key; absent or empty sections parse as {}."""
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"'{key}' must be a mapping, got {type(section).__name__}"
        )
    return section


def _string(section: Dict[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    value = section.get(key, default)
    if value is None and default is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"'{key}' must be a string, got {value!r}")
    return value


def _number(section: Dict[str, Any], key: str, default: Optional[float]) -> Optional[float]:
    value = section.get(key, default)
    if value is None and default is None:
        return None
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(f"'{key}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"'{key}' must be finite, got {value!r}")
    return value


def _integer(section: Dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"'{key}' must be an integer, got {value!r}")
    return value


def _string_list(section: Dict[str, Any], key: str, default: Sequence[str]) -> List[str]:
    value = section.get(key, default)
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"'{key}' must be a list of strings, got {value!r}")
    for item in value:
        if not isinstance(item, str):
            raise ConfigurationError(f"'{key}' entries must be strings, got {item!r}")
    return list(value)


def _parse_sweep(sweep: Dict[str, Any]) -> SweepSpec:
    # SweepSpec checks its own field types
    defaults = SweepSpec()
    return SweepSpec(
        start=sweep.get("start", defaults.start),
        step=sweep.get("step", defaults.step),
        count=sweep.get("count", defaults.count),
    )


def _parse_topology(topology: Dict[str, Any]) -> TopologyConfig:
    defaults = TopologyConfig()
    return TopologyConfig(
        link_delay=_string(topology, "link_delay", defaults.link_delay),
        stations=_integer(topology, "stations", defaults.stations),
        ssid=_string(topology, "ssid", defaults.ssid),
        remote_station_manager=_string(
            topology, "remote_station_manager", defaults.remote_station_manager
        ),
        wired_network=_string(topology, "wired_network", defaults.wired_network),
        wireless_network=_string(topology, "wireless_network", defaults.wireless_network),
        netmask=_string(topology, "netmask", defaults.netmask),
        port=_integer(topology, "port", defaults.port),
        stop_time=_number(topology, "stop_time", defaults.stop_time),
        measurement_window=_number(topology, "measurement_window", defaults.measurement_window),
    )


def _parse_plot(plot: Dict[str, Any]) -> PlotConfig:
    defaults = PlotConfig()
    return PlotConfig(
        name=_string(plot, "name", defaults.name),
        title=_string(plot, "title", defaults.title),
        x_axis_label=_string(plot, "x_axis_label", defaults.x_axis_label),
        y_axis_label=_string(plot, "y_axis_label", defaults.y_axis_label),
        labels=tuple(_string_list(plot, "labels", defaults.labels)),
        terminal=_string(plot, "terminal", defaults.terminal),
    )


def _parse_engine(engine: Dict[str, Any]) -> EngineConfig:
    defaults = EngineConfig()
    try:
        kind = EngineKind(engine.get("kind", defaults.kind.value))
    except ValueError as e:
        raise ConfigurationError(f"unknown engine kind: {engine.get('kind')!r}") from e

    if isinstance(engine.get("command"), str):
        command = engine["command"].split()
    else:
        command = _string_list(engine, "command", defaults.command)
    return EngineConfig(
        kind=kind,
        command=command,
        cwd=_string(engine, "cwd", defaults.cwd),
        timeout=_number(engine, "timeout", defaults.timeout),
    )

"""
Integration tests for the wlan-sweep command line.

Tests verify:
1. Config loading and command-line overrides
2. Output files for each format
3. Exit status on simulation and configuration errors
4. The external-program engine with a real subprocess
"""

import json
import sys
import textwrap

import pytest
import yaml

import matplotlib
matplotlib.use('Agg')

import wlan_sweep.engine
from wlan_sweep.cli import build_config, main
from wlan_sweep.config import EngineKind, SweepSpec


@pytest.fixture
def use_adapter(monkeypatch):
    """Make the CLI use the given adapter instead of ns-3."""
    def _use(adapter):
        monkeypatch.setattr(wlan_sweep.engine, "create_adapter", lambda config: adapter)
        return adapter
    return _use


class TestBuildConfig:
    """Test build_config() argument handling."""

    def _args(self, argv):
        import argparse
        parser = argparse.ArgumentParser()
        parser.add_argument('-c', '--config', default=None)
        parser.add_argument('--start', type=float, default=None)
        parser.add_argument('--step', type=float, default=None)
        parser.add_argument('--count', type=int, default=None)
        parser.add_argument('--engine', default=None)
        parser.add_argument('-o', '--output', default=None)
        return parser.parse_args(argv)

    def test_defaults(self):
        config = build_config(self._args([]))
        assert config.sweep == SweepSpec(1, 250, 9)
        assert config.engine.kind is EngineKind.NS3

    def test_partial_sweep_override(self):
        config = build_config(self._args(["--count", "3"]))
        assert config.sweep == SweepSpec(1, 250, 3)

    def test_engine_override(self):
        config = build_config(self._args(["--engine", "program"]))
        assert config.engine.kind is EngineKind.PROGRAM

    def test_config_file_then_override(self, tmp_path):
        path = tmp_path / "exp.yaml"
        path.write_text("sweep:\n  start: 100\n  step: 100\n  count: 5\n", encoding="utf-8")

        config = build_config(self._args(["-c", str(path), "--step", "50"]))

        assert config.sweep == SweepSpec(100, 50, 5)


class TestMain:
    """Test main() with a stub adapter."""

    def test_default_outputs(self, tmp_path, use_adapter, stub_adapter):
        use_adapter(stub_adapter)
        out = tmp_path / "out"

        status = main(["--count", "3", "-o", str(out), "-q"])

        assert status == 0
        assert (out / "up2down1.plt").exists()
        assert (out / "up2down1-1.dat").exists()
        assert json.loads((out / "up2down1.json").read_text())["x_range"] == [1.0, 751.0]
        assert len(stub_adapter.calls) == 3

    def test_all_formats(self, tmp_path, use_adapter, stub_adapter):
        use_adapter(stub_adapter)
        out = tmp_path / "out"

        status = main([
            "--count", "2", "-o", str(out), "-q",
            "-f", "json", "-f", "npz", "-f", "png",
        ])

        assert status == 0
        assert (out / "up2down1.json").exists()
        assert (out / "up2down1.npz").exists()
        assert (out / "up2down1-chart.png").exists()
        assert not (out / "up2down1.plt").exists()

    def test_chart_does_not_collide_with_gnuplot_image(self, tmp_path, use_adapter, stub_adapter):
        use_adapter(stub_adapter)
        out = tmp_path / "out"

        status = main(["--count", "2", "-o", str(out), "-q", "-f", "gnuplot", "-f", "png"])

        assert status == 0
        assert 'set output "up2down1.png"' in (out / "up2down1.plt").read_text()
        assert (out / "up2down1-chart.png").exists()
        assert not (out / "up2down1.png").exists()

    def test_report_printed(self, tmp_path, use_adapter, stub_adapter, capsys):
        use_adapter(stub_adapter)

        main(["--count", "2", "-o", str(tmp_path), "-f", "json"])

        out = capsys.readouterr().out
        assert "Link Capacity Sweep" in out
        assert "Sweep Report: Throughput vs. datarate" in out
        assert "500kb/s up" in out
        assert "Saved:" in out

    def test_simulation_failure_exit_status(
        self, tmp_path, use_adapter, failing_adapter_factory, capsys
    ):
        use_adapter(failing_adapter_factory(fail_at=1))
        out = tmp_path / "out"

        status = main(["-o", str(out), "-q"])

        assert status == 1
        assert "sweep index 1" in capsys.readouterr().err
        assert not (out / "up2down1.json").exists()

    def test_configuration_error_exit_status(self, tmp_path, capsys):
        status = main(["--count", "0", "-o", str(tmp_path), "-q"])

        assert status == 1
        assert "Configuration error" in capsys.readouterr().err

    @pytest.mark.parametrize("text", [
        "topology:\n  port: '9'\n",
        "topology:\n  measurement_window: '9'\n",
        "engine:\n  timeout: soon\n",
        "sweep: [1, 2]\n",
        "sweep: [1, 2\n  count: 3\n",
        "plot:\n  labels: abc\n",
    ])
    def test_invalid_config_file_exit_status(self, tmp_path, capsys, text):
        path = tmp_path / "bad.yaml"
        path.write_text(text, encoding="utf-8")

        status = main(["-c", str(path), "-o", str(tmp_path), "-q"])

        assert status == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        status = main(["-c", str(tmp_path / "missing.yaml"), "-q"])

        assert status == 1
        assert "not found" in capsys.readouterr().err

    def test_missing_bindings(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setitem(sys.modules, "ns", None)

        status = main(["--engine", "ns3", "-o", str(tmp_path), "-q"])

        assert status == 1
        assert "pip install ns3" in capsys.readouterr().err


FAKE_NS3_PROGRAM = textwrap.dedent('''
    import sys

    rate = sys.argv[1]
    flowmon = sys.argv[2]
    kbps = int(rate[:-len("kbps")])
    # Uplinks get the full link up to their offered load, downlink is constant
    up_heavy = min(kbps, 1000) * 1000 // 8 * 9
    up_light = min(kbps, 500) * 1000 // 8 * 9
    down = 1125000

    with open(flowmon, "w") as f:
        f.write(f"""<FlowMonitor>
      <FlowStats>
        <Flow flowId="1" rxBytes="{up_heavy}" />
        <Flow flowId="2" rxBytes="{up_light}" />
        <Flow flowId="3" rxBytes="{down}" />
      </FlowStats>
      <Ipv4FlowClassifier>
        <Flow flowId="1" sourceAddress="10.1.3.1" destinationAddress="10.1.1.2" destinationPort="9" />
        <Flow flowId="2" sourceAddress="10.1.3.2" destinationAddress="10.1.1.2" destinationPort="9" />
        <Flow flowId="3" sourceAddress="10.1.1.2" destinationAddress="10.1.3.3" destinationPort="9" />
      </Ipv4FlowClassifier>
    </FlowMonitor>
    """)
''')


class TestProgramEngine:
    """End-to-end through Ns3ProgramAdapter and a stand-in ns-3 program."""

    def test_program_sweep(self, tmp_path):
        script = tmp_path / "fake_ns3.py"
        script.write_text(FAKE_NS3_PROGRAM, encoding="utf-8")
        config_path = tmp_path / "exp.yaml"
        config_path.write_text(yaml.safe_dump({
            "sweep": {"start": 250, "step": 250, "count": 3},
            "engine": {
                "kind": "program",
                "command": [sys.executable, str(script), "{rate}", "{flowmon}"],
                "timeout": 60,
            },
            "output_dir": str(tmp_path / "out"),
        }), encoding="utf-8")

        status = main(["-c", str(config_path), "-q", "-f", "json"])

        assert status == 0
        data = json.loads((tmp_path / "out" / "up2down1.json").read_text())
        up_heavy, up_light, down = data["series"]
        assert [x for x, _ in up_heavy["points"]] == [250, 500, 750]
        assert [y for _, y in up_heavy["points"]] == pytest.approx([0.25, 0.5, 0.75])
        assert [y for _, y in up_light["points"]] == pytest.approx([0.25, 0.5, 0.5])
        assert [y for _, y in down["points"]] == pytest.approx([1.0, 1.0, 1.0])

"""Tests for ManifestStore (JSON / NPZ persistence)."""

import json

import numpy as np
import pytest

from wlan_sweep.core.result import DataSeries, SeriesPoint
from wlan_sweep.export.manifest import PlotManifest
from wlan_sweep.export.store import FORMAT_VERSION, ManifestStore


@pytest.fixture
def manifest() -> PlotManifest:
    return PlotManifest(
        series=tuple(
            DataSeries(label, tuple(SeriesPoint(x, x * k / 1000) for x in (1, 251, 501)))
            for k, label in enumerate(("1000kb/s up", "500kb/s up", "1000kb/s down"), start=1)
        ),
        x_axis_label="Datarate (kbps)",
        y_axis_label="Throughput (Mbps)",
        x_range=(1, 751),
        title="Throughput vs. datarate",
    )


class TestManifestStore:
    """Test ManifestStore."""

    def test_creates_base_dir(self, tmp_path):
        store = ManifestStore(tmp_path / "a" / "b")
        assert store.base_dir.is_dir()

    def test_json_round_trip(self, tmp_path, manifest):
        store = ManifestStore(tmp_path)

        path = store.save_json(manifest, "up2down1")

        assert path == tmp_path / "up2down1.json"
        assert store.load(path) == manifest

    def test_json_metadata(self, tmp_path, manifest):
        path = ManifestStore(tmp_path).save_json(manifest)

        data = json.loads(path.read_text(encoding="utf-8"))

        assert path.name == "manifest.json"
        assert data["format_version"] == FORMAT_VERSION
        assert "saved_at" in data

    def test_timestamped_names(self, tmp_path, manifest):
        path = ManifestStore(tmp_path, timestamped=True).save_json(manifest, "run")
        assert path.name.endswith("_run.json")
        assert path.name != "run.json"

    def test_npz_contents(self, tmp_path, manifest):
        path = ManifestStore(tmp_path).save_npz(manifest, "up2down1")

        data = np.load(path)

        np.testing.assert_array_equal(data["x"], [1, 251, 501])
        assert data["y"].shape == (3, 3)
        np.testing.assert_allclose(data["y"][1], [0.002, 0.502, 1.002])
        assert list(data["labels"]) == ["1000kb/s up", "500kb/s up", "1000kb/s down"]
        np.testing.assert_array_equal(data["x_range"], [1, 751])
        assert str(data["title"]) == "Throughput vs. datarate"

    def test_load_unsupported_format(self, tmp_path, manifest):
        path = ManifestStore(tmp_path).save_npz(manifest, "up2down1")
        with pytest.raises(ValueError, match="Unsupported file format"):
            ManifestStore(tmp_path).load(path)

    def test_list_files(self, tmp_path, manifest):
        store = ManifestStore(tmp_path)
        store.save_json(manifest, "a")
        store.save_json(manifest, "b")

        assert [p.name for p in store.list_files("*.json")] == ["a.json", "b.json"]

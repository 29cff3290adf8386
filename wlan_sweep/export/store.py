"""
Manifest Store.

Provides persistent storage for plot manifests:
- JSON: Human-readable, lossless round-trip
- NPZ: NumPy compressed arrays for numeric post-processing
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np

from .manifest import PlotManifest


FORMAT_VERSION = "1.0"


@dataclass
class ManifestStore:
    """
    Persistent storage for sweep manifests.

    Usage:
        store = ManifestStore("output/sweep")
        path = store.save_json(manifest, "up2down1")
        loaded = store.load(path)
    """

    base_dir: Path = None
    timestamped: bool = False

    def __post_init__(self):
        if self.base_dir is None:
            self.base_dir = Path("output/sweep")
        else:
            self.base_dir = Path(self.base_dir)

        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _generate_filename(self, name: Optional[str], extension: str) -> Path:
        """Generate (optionally timestamped) filename."""
        stem = name or "manifest"
        if self.timestamped:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            stem = f"{timestamp}_{stem}"
        return self.base_dir / f"{stem}.{extension}"

    def save_json(self, manifest: PlotManifest, name: Optional[str] = None) -> Path:
        """
        Save manifest to JSON format.

        Args:
            manifest: Manifest to save.
            name: Optional base name for the file.

        Returns:
            Path to saved file.
        """
        filepath = self._generate_filename(name, "json")

        data = manifest.to_dict()
        data['saved_at'] = datetime.now().isoformat()
        data['format_version'] = FORMAT_VERSION

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return filepath

    def save_npz(self, manifest: PlotManifest, name: Optional[str] = None) -> Path:
        """
        Save manifest arrays to NumPy compressed format.

        Stores x (n,), y (series, n), labels, axis labels, title and x_range.
        """
        filepath = self._generate_filename(name, "npz")

        x, y = manifest.as_arrays()
        np.savez_compressed(
            filepath,
            x=x,
            y=y,
            labels=np.array(manifest.labels),
            x_range=np.array(manifest.x_range, dtype=float),
            x_axis_label=np.array(manifest.x_axis_label),
            y_axis_label=np.array(manifest.y_axis_label),
            title=np.array(manifest.title),
        )

        return filepath

    def load(self, filepath: Path) -> PlotManifest:
        """
        Load a manifest saved as JSON.

        Raises:
            ValueError: If file format is not supported.
        """
        filepath = Path(filepath)

        if filepath.suffix != '.json':
            raise ValueError(f"Unsupported file format: {filepath.suffix}")

        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return PlotManifest.from_dict(data)

    def list_files(self, pattern: str = "*") -> list:
        """List saved manifest files."""
        return sorted(self.base_dir.glob(pattern))

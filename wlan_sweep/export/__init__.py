"""
Sweep export: plot manifest assembly, persistence and rendering.

- DatasetExporter / PlotManifest: labeled series + axis metadata
- write_gnuplot: gnuplot control and data files
- ManifestStore: JSON / NPZ persistence
- plot_throughput_sweep: matplotlib rendering
"""

from .manifest import (
    PlotManifest,
    DatasetExporter,
)
from .gnuplot import (
    render_control,
    write_gnuplot,
)
from .store import (
    ManifestStore,
)
from .plot import (
    SweepPlotConfig,
    plot_throughput_sweep,
)

__all__ = [
    # Manifest
    "PlotManifest",
    "DatasetExporter",
    # Gnuplot
    "render_control",
    "write_gnuplot",
    # Storage
    "ManifestStore",
    # Rendering
    "SweepPlotConfig",
    "plot_throughput_sweep",
]

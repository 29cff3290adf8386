"""
Throughput vs. link capacity chart.

Renders a PlotManifest with matplotlib: one line-with-markers curve per
flow, x axis fixed to the manifest's x-range.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import matplotlib.colors as mcolors
from matplotlib.figure import Figure

from .manifest import PlotManifest


# Color palette for multiple curves
COLORS = list(mcolors.TABLEAU_COLORS.values())
MARKERS = ['o', 's', '^', 'D', 'v']


@dataclass
class SweepPlotConfig:
    """Configuration for the sweep chart."""
    figsize: Tuple[int, int] = (10, 6)
    line_width: float = 2.0
    marker_size: float = 7
    show_grid: bool = True
    grid_alpha: float = 0.3
    dpi: int = 150


def plot_throughput_sweep(
    manifest: PlotManifest,
    config: Optional[SweepPlotConfig] = None,
    save_path: Optional[str] = None,
) -> Figure:
    """
    Plot throughput of every flow against the swept link capacity.

    Args:
        manifest: Assembled sweep data.
        config: Visualization configuration.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib Figure object.
    """
    if config is None:
        config = SweepPlotConfig()

    fig, ax = plt.subplots(figsize=config.figsize)

    if not any(s.points for s in manifest.series):
        ax.text(0.5, 0.5, "No data available", ha='center', va='center',
                transform=ax.transAxes)
        ax.set_title(manifest.title)
        _save(fig, save_path, config.dpi)
        return fig

    for i, series in enumerate(manifest.series):
        ax.plot(
            series.xs, series.ys,
            color=COLORS[i % len(COLORS)],
            marker=MARKERS[i % len(MARKERS)],
            linewidth=config.line_width,
            markersize=config.marker_size,
            label=series.label,
        )

    ax.set_xlim(*manifest.x_range)
    ax.set_ylim(bottom=0)
    ax.set_xlabel(manifest.x_axis_label, fontsize=12)
    ax.set_ylabel(manifest.y_axis_label, fontsize=12)
    ax.set_title(manifest.title, fontsize=14, fontweight='bold')

    if config.show_grid:
        ax.grid(True, alpha=config.grid_alpha)

    ax.legend(loc='best', fontsize=10)

    plt.tight_layout()
    _save(fig, save_path, config.dpi)

    return fig


def _save(fig: Figure, save_path: Optional[str], dpi: int) -> None:
    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=dpi, bbox_inches='tight')

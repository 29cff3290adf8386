"""
Experiment runner.

Wires SweepController -> SimulationAdapter -> ResultAggregator ->
DatasetExporter for one complete experiment.
"""

from __future__ import annotations

from typing import Optional, Callable

from .config import ExperimentConfig
from .core import ResultAggregator, SimulationAdapter, SweepController
from .export import DatasetExporter, PlotManifest


def run_experiment(
    config: ExperimentConfig,
    adapter: SimulationAdapter,
    verbose: bool = False,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> PlotManifest:
    """
    Run the full sweep and assemble the plot manifest.

    The sweep is all-or-nothing: a failing step raises SimulationFailure
    and no manifest is built.

    Args:
        config: Experiment configuration (sweep, plot labels).
        adapter: Simulation adapter serving this sweep.
        verbose: Print progress during sweep.
        progress_callback: Called with (completed, total) after each step.

    Returns:
        PlotManifest with one series per flow.
    """
    aggregator = ResultAggregator()
    controller = SweepController(config.sweep, unit=config.unit, verbose=verbose)
    controller.run(adapter, aggregator, progress_callback=progress_callback)

    exporter = DatasetExporter(config.sweep)
    return exporter.build(
        aggregator.snapshot(),
        labels=config.plot.labels,
        x_axis_label=config.plot.x_axis_label,
        y_axis_label=config.plot.y_axis_label,
        title=config.plot.title,
    )

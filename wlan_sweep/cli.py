"""
Link capacity sweep for the up2down1 wireless scenario.

Runs the fixed topology (three stations behind one access-point router,
wired link to a second router) once per wired-link capacity and writes
per-flow throughput series.

Usage:
    wlan-sweep                                  # 1..2001 kbps in 9 steps, ns-3 bindings
    wlan-sweep -c experiment.yaml               # Settings from YAML
    wlan-sweep --start 1 --step 500 --count 5   # Custom sweep
    wlan-sweep --engine program -c ns3.yaml     # External ns-3 program
    wlan-sweep -f gnuplot -f png -o output/run1
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .config import (
    EngineKind,
    ExperimentConfig,
    SweepSpec,
    load_experiment_config,
)
from .errors import ConfigurationError, SimulationFailure
from .export import ManifestStore, PlotManifest, plot_throughput_sweep, write_gnuplot
from .experiment import run_experiment


OUTPUT_FORMATS = ['gnuplot', 'json', 'npz', 'png']
DEFAULT_FORMATS = ['gnuplot', 'json']


def build_config(args: argparse.Namespace) -> ExperimentConfig:
    """Load the experiment config and apply command-line overrides."""
    config = load_experiment_config(args.config) if args.config else ExperimentConfig()

    if args.start is not None or args.step is not None or args.count is not None:
        config.sweep = SweepSpec(
            start=config.sweep.start if args.start is None else args.start,
            step=config.sweep.step if args.step is None else args.step,
            count=config.sweep.count if args.count is None else args.count,
        )
    if args.engine:
        config.engine = replace(config.engine, kind=EngineKind(args.engine))
    if args.output:
        config.output_dir = args.output

    config.validate()
    return config


def print_report(manifest: PlotManifest) -> None:
    """Print the assembled series as a table."""
    print(f"\n{'=' * 60}")
    print(f"Sweep Report: {manifest.title}")
    print(f"{'=' * 60}")
    print(f"x range: [{manifest.x_range[0]}:{manifest.x_range[1]}]")

    header = f"  {'x':<10}" + "".join(f"{label:<16}" for label in manifest.labels)
    print(f"\n{header}")
    print(f"  {'-' * (len(header) - 2)}")

    if not manifest.series:
        return
    for i, point in enumerate(manifest.series[0].points):
        row = f"  {point.x:<10}"
        for series in manifest.series:
            row += f"{series.points[i].y:<16.6f}"
        print(row)


def write_outputs(
    manifest: PlotManifest,
    config: ExperimentConfig,
    formats: List[str],
) -> List[Path]:
    """Write the manifest in every requested format."""
    output_dir = Path(config.output_dir)
    name = config.plot.name
    written: List[Path] = []

    if 'gnuplot' in formats:
        written.extend(write_gnuplot(manifest, output_dir, name, terminal=config.plot.terminal))

    store = ManifestStore(output_dir)
    if 'json' in formats:
        written.append(store.save_json(manifest, name))
    if 'npz' in formats:
        written.append(store.save_npz(manifest, name))

    if 'png' in formats:
        import matplotlib.pyplot as plt

        # gnuplot renders <name>.<terminal> from the .plt file
        png_path = output_dir / f"{name}-chart.png"
        fig = plot_throughput_sweep(manifest, save_path=str(png_path))
        plt.close(fig)
        written.append(png_path)

    return written


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Sweep wired-link capacity and measure per-flow throughput'
    )
    parser.add_argument(
        '-c', '--config',
        type=Path,
        default=None,
        help='Experiment config YAML file (default: built-in experiment)'
    )
    parser.add_argument('--start', type=float, default=None, help='First link capacity')
    parser.add_argument('--step', type=float, default=None, help='Capacity increment per step')
    parser.add_argument('--count', type=int, default=None, help='Number of steps')
    parser.add_argument(
        '--engine',
        choices=[kind.value for kind in EngineKind],
        default=None,
        help='Simulation engine (default: from config, else ns3)'
    )
    parser.add_argument(
        '-o', '--output',
        type=Path,
        default=None,
        help='Output directory (default: output/sweep)'
    )
    parser.add_argument(
        '-f', '--format',
        choices=OUTPUT_FORMATS,
        action='append',
        default=None,
        help=f'Output format, repeatable (default: {" ".join(DEFAULT_FORMATS)})'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Quiet mode (less output)'
    )

    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print("=" * 60)
        print("Link Capacity Sweep")
        print("=" * 60)
        print(f"Engine: {config.engine.kind.value}")
        if args.config:
            print(f"Config: {args.config}")
        print(f"Output: {config.output_dir}")

    from .engine import create_adapter

    try:
        adapter = create_adapter(config)
    except ImportError as e:
        print(f"Simulation engine unavailable: {e}", file=sys.stderr)
        print("Install the ns-3 bindings (pip install ns3) or use --engine program.",
              file=sys.stderr)
        return 1

    try:
        manifest = run_experiment(config, adapter, verbose=not args.quiet)
    except SimulationFailure as e:
        print(f"Sweep aborted at {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print_report(manifest)

    for path in write_outputs(manifest, config, args.format or DEFAULT_FORMATS):
        if not args.quiet:
            print(f"Saved: {path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())

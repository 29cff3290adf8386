"""
Gnuplot output for a PlotManifest.

Writes one whitespace-separated data file per series and a control
file that renders them:

    <name>.plt        gnuplot commands
    <name>-1.dat      "x y" rows of the first series
    <name>-2.dat      ...

Run `gnuplot <name>.plt` in the output directory to produce
<name>.<terminal>. With inline=True the data is embedded in the control
file instead (plot '-' ... e), which is how ns-3's Gnuplot class emits it.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from .manifest import PlotManifest


def _fmt(value) -> str:
    return repr(value) if isinstance(value, float) else str(value)


def _quote(text: str) -> str:
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


def series_rows(manifest: PlotManifest, index: int) -> List[str]:
    """Data rows of one series, in point order."""
    return [f"{_fmt(p.x)} {_fmt(p.y)}" for p in manifest.series[index].points]


def render_control(
    manifest: PlotManifest,
    name: str,
    terminal: str = "png",
    inline: bool = False,
) -> str:
    """Gnuplot control file text."""
    start, end = manifest.x_range
    lines = [
        f"set terminal {terminal}",
        f"set output {_quote(f'{name}.{terminal}')}",
        f"set title {_quote(manifest.title)}",
        f"set xlabel {_quote(manifest.x_axis_label)}",
        f"set ylabel {_quote(manifest.y_axis_label)}",
        f"set xrange [{_fmt(start)}:{_fmt(end)}]",
    ]

    sources = []
    for i, series in enumerate(manifest.series):
        source = '"-"' if inline else _quote(f"{name}-{i + 1}.dat")
        sources.append(f"{source} title {_quote(series.label)} with linespoints")
    lines.append("plot " + ", ".join(sources))

    if inline:
        for i in range(len(manifest.series)):
            lines.extend(series_rows(manifest, i))
            lines.append("e")

    return "\n".join(lines) + "\n"


def write_gnuplot(
    manifest: PlotManifest,
    output_dir: Path,
    name: str,
    terminal: str = "png",
    inline: bool = False,
) -> List[Path]:
    """
    Write control and data files.

    Args:
        manifest: Plot to write.
        output_dir: Target directory (created if needed).
        name: Base file name, e.g. "up2down1".
        terminal: Gnuplot terminal, also the image extension.
        inline: Embed data in the control file.

    Returns:
        Written paths, control file first.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    control_path = output_dir / f"{name}.plt"
    with open(control_path, 'w', encoding='utf-8') as f:
        f.write(render_control(manifest, name, terminal=terminal, inline=inline))
    written = [control_path]

    if not inline:
        for i, series in enumerate(manifest.series):
            data_path = output_dir / f"{name}-{i + 1}.dat"
            with open(data_path, 'w', encoding='utf-8') as f:
                f.write(f"# {series.label}\n")
                for row in series_rows(manifest, i):
                    f.write(row + "\n")
            written.append(data_path)

    return written

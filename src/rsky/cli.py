#!/usr/bin/env python3
"""rsky command-line interface.

Usage::

    rsky compute --per 10 --a 15 --inc 90 --degrees --start 0 --stop 10 --num 5
    rsky compute --per 3.5 --a 8.8 --inc 1.55 --ecc 0.2 --times-file times.txt
    rsky plot --per 10 --a 15 --inc 89 --degrees --start 0 --stop 20 --save d.png
"""
from __future__ import annotations

import sys
import logging
from pathlib import Path

import click
import numpy as np
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .kepler import KeplerConvergenceError
from .orbit import OrbitalParameters, OrbitParameterError
from .batch import evaluate_orbit, build_separation_table

console = Console()

# Failures reported as a one-line error rather than a traceback
INPUT_ERRORS = (OrbitParameterError, KeplerConvergenceError, ValueError)


def orbit_options(func):
    """Shared orbital-element and time-grid options."""
    options = [
        click.option("--t0", default=0.0, show_default=True, help="Time of inferior conjunction"),
        click.option("--per", "-p", type=float, required=True, help="Orbital period"),
        click.option("--a", "-a", "a", type=float, required=True, help="Semi-major axis (stellar radii)"),
        click.option("--inc", "-i", type=float, required=True, help="Inclination"),
        click.option("--ecc", "-e", default=0.0, show_default=True, help="Eccentricity"),
        click.option("--omega", "-w", default=0.0, show_default=True, help="Argument of periapsis"),
        click.option("--degrees", is_flag=True, help="Read --inc and --omega in degrees"),
        click.option("--times-file", "-f", type=click.Path(exists=True), help="File with one time per line"),
        click.option("--start", type=float, help="First time of a uniform grid"),
        click.option("--stop", type=float, help="Last time of a uniform grid"),
        click.option("--num", "-n", default=100, show_default=True, help="Number of grid points"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """rsky — sky-projected star-planet separation on a Keplerian orbit."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s — %(message)s")


@main.command()
@orbit_options
@click.option("--workers", type=int, help="Evaluate on this many threads")
@click.option("--output", "-o", type=click.Path(), help="Save results to CSV")
def compute(
    t0: float,
    per: float,
    a: float,
    inc: float,
    ecc: float,
    omega: float,
    degrees: bool,
    times_file: str | None,
    start: float | None,
    stop: float | None,
    num: int,
    workers: int | None,
    output: str | None,
):
    """Compute separations for a set of times."""
    params = _build_params(t0, per, a, inc, ecc, omega, degrees)
    try:
        times = _get_times(times_file, start, stop, num)
        separations = evaluate_orbit(times, params, workers=workers)
    except INPUT_ERRORS as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    _display_results(params, times, separations)

    if output:
        # Geometry columns come from the vectorised path
        table = build_separation_table(times, params)
        table.to_csv(output, index=False)
        console.print(f"\nResults saved to {output}")


@main.command()
@orbit_options
@click.option("--save", "save_path", type=click.Path(), required=True, help="Output image path")
@click.option("--title", type=str, help="Plot title")
def plot(
    t0: float,
    per: float,
    a: float,
    inc: float,
    ecc: float,
    omega: float,
    degrees: bool,
    times_file: str | None,
    start: float | None,
    stop: float | None,
    num: int,
    save_path: str,
    title: str | None,
):
    """Plot the separation curve to an image file."""
    params = _build_params(t0, per, a, inc, ecc, omega, degrees)
    try:
        times = _get_times(times_file, start, stop, num)
        table = build_separation_table(times, params)
    except INPUT_ERRORS as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    from .viz import plot_separation
    import matplotlib.pyplot as plt

    plot_separation(table, title=title, save_path=save_path)
    plt.close("all")
    console.print(f"Plot saved to {save_path}")


def _build_params(
    t0: float,
    per: float,
    a: float,
    inc: float,
    ecc: float,
    omega: float,
    degrees: bool,
) -> OrbitalParameters:
    if degrees:
        return OrbitalParameters.from_degrees(t0, per, a, inc, ecc, omega)
    return OrbitalParameters(t0=t0, per=per, a=a, inc=inc, ecc=ecc, omega=omega)


def _get_times(
    times_file: str | None,
    start: float | None,
    stop: float | None,
    num: int,
) -> list[float]:
    if times_file:
        return load_times_file(times_file)
    if start is not None and stop is not None:
        return np.linspace(start, stop, num).tolist()
    console.print("[red]Error: provide --times-file or --start and --stop[/red]")
    sys.exit(1)


def load_times_file(filepath: str | Path) -> list[float]:
    """Read observation times, one per line.

    Blank lines and lines starting with ``#`` are skipped; only the first
    whitespace-separated column is used.
    """
    times = []
    for lineno, line in enumerate(Path(filepath).read_text().splitlines(), 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            times.append(float(line.split()[0]))
        except ValueError:
            raise ValueError(f"Line {lineno} of {filepath}: not a time value: {line!r}") from None
    return times


def _display_results(
    params: OrbitalParameters,
    times: list[float],
    separations: list[float],
):
    """Display separations with rich formatting."""
    n_overlap = sum(1 for d in separations if d < 1.0)
    console.print(
        Panel(
            f"Period: {params.per:g}   a: {params.a:g} R*\n"
            f"Inclination: {np.degrees(params.inc):.3f}°   "
            f"e: {params.ecc:g}   ω: {np.degrees(params.omega):.3f}°\n"
            f"Samples: {len(times)}\n"
            f"Within stellar disk (d < 1): [bold green]{n_overlap}[/bold green]",
            title="Separation Results",
            box=box.ROUNDED,
        )
    )

    table = Table(box=box.SIMPLE_HEAVY)
    table.add_column("Time", style="cyan", justify="right")
    table.add_column("d (R*)", justify="right")

    for t, d in list(zip(times, separations))[:50]:
        color = "green" if d < 1.0 else "white"
        table.add_row(f"{t:.6f}", f"[{color}]{d:.6f}[/{color}]")

    if len(times) > 50:
        console.print(f"(showing 50 of {len(times)} samples)")
    console.print(table)


if __name__ == "__main__":
    main()

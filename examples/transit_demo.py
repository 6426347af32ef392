"""
Example: separation curves for a few synthetic planets.

Evaluates the sky-projected separation over two orbits for a circular
edge-on planet, a grazing planet and an eccentric hot Jupiter, and lists
the samples where the planet overlaps the stellar disk (d < 1 + k, with
k the planet-to-star radius ratio).
"""

import math
from pathlib import Path

import numpy as np

from rsky import OrbitalParameters, build_separation_table, evaluate_array


PLANETS = {
    "EDGE-ON": (OrbitalParameters(t0=0.0, per=10.0, a=15.0, inc=math.pi / 2, ecc=0.0, omega=0.0), 0.1),
    "GRAZING": (OrbitalParameters.from_degrees(0.0, 4.2, 9.0, 83.8), 0.12),
    "ECCENTRIC": (OrbitalParameters.from_degrees(1.25, 3.52, 8.8, 86.7, ecc=0.2, omega_deg=40.0), 0.11),
}


def main():
    print("=" * 65)
    print("  rsky — Synthetic Separation Demo")
    print("=" * 65)

    for name, (params, k) in PLANETS.items():
        times = np.linspace(params.t0 - params.per, params.t0 + params.per, 4001)
        d = evaluate_array(times, params)
        in_transit = d < 1.0 + k

        print(f"\n{name}: P={params.per:g}  a={params.a:g} R*  "
              f"i={math.degrees(params.inc):.2f}°  e={params.ecc:g}")
        print(f"  min d = {d.min():.4f} R*   max d = {d.max():.4f} R*")
        print(f"  samples overlapping the disk: {int(in_transit.sum())} of {len(d)}")

    # ── Generate plots if matplotlib is available ──
    try:
        from rsky.viz import plot_separation
        import matplotlib
        matplotlib.use("Agg")  # Non-interactive backend

        Path("data").mkdir(exist_ok=True)
        params, _ = PLANETS["ECCENTRIC"]
        table = build_separation_table(
            np.linspace(0.0, 2 * params.per, 2000), params
        )
        plot_separation(
            table,
            title="ECCENTRIC: sky-projected separation",
            save_path="data/demo_separation.png",
        )
        print(f"\nPlot saved to data/demo_separation.png")

    except ImportError:
        print("\nInstall matplotlib for visualization: pip install matplotlib")


if __name__ == "__main__":
    main()

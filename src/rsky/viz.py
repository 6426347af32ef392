"""Plots of the sky-projected separation curve.

Draws ``d(t)`` from a separation table, with the stellar disk radius
(``d = 1``) marked so the times where the planet can overlap the star
stand out.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


# Use a clean style
plt.rcParams.update({
    "figure.facecolor": "white",
    "axes.facecolor": "#fafafa",
    "axes.grid": True,
    "grid.alpha": 0.3,
    "font.family": "sans-serif",
    "font.size": 10,
})


def plot_separation(
    table: pd.DataFrame,
    title: Optional[str] = None,
    save_path: Optional[str | Path] = None,
    figsize: tuple = (12, 7),
) -> plt.Figure:
    """Plot separation and true anomaly against time.

    Args:
        table: DataFrame from build_separation_table()
        title: Plot title
        save_path: Path to save figure (optional)

    Returns:
        matplotlib Figure
    """
    fig, axes = plt.subplots(2, 1, figsize=figsize, sharex=True,
                             gridspec_kw={"height_ratios": [3, 1]})
    order = np.argsort(table["time"].to_numpy(), kind="stable")
    sorted_table = table.iloc[order]

    # Panel 1: separation
    ax = axes[0]
    ax.plot(sorted_table["time"], sorted_table["separation"],
            linewidth=0.8, color="#2c3e50")
    ax.axhline(1.0, color="#e67e22", linewidth=1.0, linestyle="--",
               label="Stellar radius")
    ax.set_ylabel("Separation (R*)")
    ax.set_title(title or "Sky-projected star-planet separation")
    ax.legend(loc="upper right", fontsize=8)

    # Panel 2: true anomaly
    ax = axes[1]
    ax.plot(sorted_table["time"], np.degrees(sorted_table["true_anomaly"]),
            linewidth=0.8, color="#8e44ad")
    ax.set_ylabel("True anomaly (°)")
    ax.set_xlabel("Time")

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig

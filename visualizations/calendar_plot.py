"""
Calendar graph rendering.

Draws a CalendarGrid as a heat map of extreme days (season day on the x
axis, season-year on the y axis, most recent season at the top) with a
side panel of per-season counts of days beyond the most severe threshold.
"""

import math
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap
from matplotlib.patches import Patch

from analysis.calendar_graph.datastructures import CalendarGrid

# Keep the season axis readable on long records
MAX_YEAR_TICKS = 30


def grid_to_matrix(grid: CalendarGrid) -> np.ndarray:
    """Seasons × days matrix of legend indices (NaN where no cell).

    Row 0 is the most recent season (seasons_ago = 1), column 0 is day 1.
    """
    matrix = np.full((grid.axes.n_seasons, grid.axes.n_days), np.nan)
    codes = {category: i for i, category in enumerate(grid.categories)}

    cells = grid.cells
    rows = cells["seasons_ago"].to_numpy(dtype=int) - 1
    cols = cells["day_number"].to_numpy(dtype=int) - 1
    values = cells["temperature_category"].astype(str).map(codes).to_numpy(dtype=float)
    matrix[rows, cols] = values
    return matrix


def plot_calendar_grid(
    grid: CalendarGrid,
    title: Optional[str] = None,
    save_path: Optional[Path] = None,
    dpi: int = 120,
):
    """Render a calendar grid.

    Args:
        grid: Output of build_calendar_graph()
        title: Optional plot title (default: grid.title)
        save_path: If provided, save PNG here
        dpi: Resolution for the saved image

    Returns:
        Tuple of (fig, (grid_ax, counts_ax)) matplotlib objects
    """
    axes = grid.axes
    matrix = grid_to_matrix(grid)
    colors = [entry.color for entry in grid.legend]
    cmap = ListedColormap(colors)
    cmap.set_bad(color="white")
    norm = BoundaryNorm(np.arange(len(colors) + 1) - 0.5, cmap.N)

    height = max(4.0, 0.18 * axes.n_seasons + 2.0)
    fig, (ax, ax_counts) = plt.subplots(
        1, 2,
        figsize=(12, height),
        sharey=True,
        gridspec_kw={"width_ratios": [5, 1], "wspace": 0.05},
    )

    ax.imshow(
        np.ma.masked_invalid(matrix),
        cmap=cmap,
        norm=norm,
        aspect="auto",
        interpolation="nearest",
        extent=(0.5, axes.n_days + 0.5, axes.n_seasons + 0.5, 0.5),
    )

    ax.set_xticks(axes.month_ticks)
    ax.set_xticklabels(axes.month_labels)
    step = max(1, math.ceil(len(axes.year_ticks) / MAX_YEAR_TICKS))
    ax.set_yticks(axes.year_ticks[::step])
    ax.set_yticklabels(axes.year_labels[::step], fontsize=8)
    ax.set_xlabel(axes.x_label, fontsize=12)
    ax.set_ylabel(axes.y_label, fontsize=12)
    ax.set_title(title or grid.title, fontsize=14, fontweight="bold")
    ax.grid(True, axis="x", alpha=0.3, linestyle=":", linewidth=1)

    counts = grid.extreme_counts
    # Legend lists bands mildest first, so index 2 is the most severe band
    severe = grid.legend[2]
    ax_counts.barh(
        counts["seasons_ago"], counts["extreme_count"],
        height=0.8, color=severe.color, edgecolor="black", linewidth=0.5,
    )
    ax_counts.set_xlabel(f"Days in {severe.label}", fontsize=10)
    ax_counts.grid(True, axis="x", alpha=0.3, linestyle=":", linewidth=1)
    ax_counts.tick_params(axis="y", left=False)

    handles = [
        Patch(facecolor=entry.color, edgecolor="black", label=entry.label)
        for entry in grid.legend
    ]
    ax.legend(
        handles=handles,
        loc="upper center",
        bbox_to_anchor=(0.5, -0.08),
        ncol=len(handles),
        fontsize=10,
        frameon=False,
    )

    for notice in grid.notices:
        fig.text(0.01, 0.01, notice, fontsize=8, color="gray")

    plt.tight_layout()

    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, bbox_inches="tight", dpi=dpi)
        print(f"Saved calendar graph to {save_path}")

    return fig, (ax, ax_counts)

"""
Visualization tools for station temperature records.

This package provides plotting for:
1. Calendar graphs of extreme summer/winter days per season-year
"""

from visualizations.calendar_plot import (
    grid_to_matrix,
    plot_calendar_grid,
)

__all__ = [
    "grid_to_matrix",
    "plot_calendar_grid",
]

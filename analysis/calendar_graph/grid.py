"""
Grid assembly: classified days + missing days + axis metadata.

The result is a CalendarGrid, the only object a renderer needs. Cells are
(day_number, seasons_ago, temperature_category) triples; season-years with
no extreme day simply have no cells but still get a year tick and a count.
"""

import logging
from typing import List, Sequence

import pandas as pd

from analysis.calendar_graph.categories import category_dtype
from analysis.calendar_graph.datastructures import (
    AxisDescriptor,
    CalendarGrid,
    ExtremeDays,
    LegendEntry,
    MISSING_CATEGORY,
    SeasonWindow,
    TEMPERATURE_COL,
)
from analysis.calendar_graph.seasons import SeasonPolicy, get_season_policy

logger = logging.getLogger(__name__)

CELL_COLUMNS = ["day_number", "seasons_ago", "temperature_category"]

TEMPERATURE_UNIT = "°C"


def build_axes(
    window: SeasonWindow,
    policy: SeasonPolicy,
    include_leap_day: bool,
) -> AxisDescriptor:
    """Month and season-year ticks for a window."""
    month_ticks, month_labels = policy.month_ticks(include_leap_day)
    years = window.season_years

    return AxisDescriptor(
        month_ticks=month_ticks,
        month_labels=month_labels,
        year_ticks=[window.last_season - s + 1 for s in years],
        year_labels=[policy.year_label(s) for s in years],
        n_days=len(policy.canonical_days(include_leap_day)),
        n_seasons=window.n_seasons,
    )


def build_legend(extremes: ExtremeDays, policy: SeasonPolicy, has_missing: bool) -> List[LegendEntry]:
    legend = [
        LegendEntry(category=b.label, label=f"{b.label}{TEMPERATURE_UNIT}", color=b.color)
        for b in extremes.bands
    ]
    if has_missing:
        legend.append(
            LegendEntry(category=MISSING_CATEGORY, label=MISSING_CATEGORY, color=policy.missing_color)
        )
    return legend


def assemble_grid(
    indexed: pd.DataFrame,
    extremes: ExtremeDays,
    window: SeasonWindow,
    location: str,
    series_type: str,
    thresholds: Sequence[float],
    include_leap_day: bool,
    padding_rows: int = 0,
) -> CalendarGrid:
    """Combine extreme days, missing days and axes into a CalendarGrid.

    Args:
        indexed: Season frame with day_number and seasons_ago columns
        extremes: Classifier output for the same frame
        window: Resolved season window
        location: Station name (for the title)
        series_type: 'Maximum' or 'Minimum'
        thresholds: The thresholds the bands were built from
        include_leap_day: Whether day positions include Feb 29
        padding_rows: Number of Feb 29 padding rows in `indexed`

    Returns:
        CalendarGrid
    """
    policy = get_season_policy(window.season)
    dtype = category_dtype(extremes.bands)

    extreme_cells = extremes.days.dropna(subset=["day_number"])[CELL_COLUMNS].copy()

    if "is_padding" in indexed.columns:
        padding = indexed["is_padding"].astype(bool)
    else:
        padding = pd.Series(False, index=indexed.index)
    missing_rows = indexed[indexed[TEMPERATURE_COL].isna() & ~padding]
    missing_cells = pd.DataFrame({
        "day_number": missing_rows["day_number"].to_numpy(),
        "seasons_ago": missing_rows["seasons_ago"].to_numpy(),
        "temperature_category": MISSING_CATEGORY,
    })

    cells = pd.concat(
        [extreme_cells.astype({"temperature_category": object}), missing_cells],
        ignore_index=True,
    )
    cells["day_number"] = cells["day_number"].astype(int)
    cells["seasons_ago"] = cells["seasons_ago"].astype(int)
    cells["temperature_category"] = cells["temperature_category"].astype(dtype)
    cells = cells.sort_values(["seasons_ago", "day_number"]).reset_index(drop=True)

    extreme_counts = (
        extremes.counts[["seasons_ago", "extreme_count"]]
        .sort_values("seasons_ago")
        .reset_index(drop=True)
    )

    has_missing = not missing_cells.empty
    first_label = policy.year_label(window.first_season)
    last_label = policy.year_label(window.last_season)
    title = (
        f"{location}: {series_type.lower()} temperatures, "
        f"{policy.name.lower()} {first_label} to {last_label}"
    )

    logger.info(
        f"Assembled grid for {location}: {len(extreme_cells)} extreme cells, "
        f"{len(missing_cells)} missing cells, {window.n_seasons} seasons"
    )

    return CalendarGrid(
        cells=cells,
        extreme_counts=extreme_counts,
        legend=build_legend(extremes, policy, has_missing),
        axes=build_axes(window, policy, include_leap_day),
        location=location,
        series_type=series_type,
        season=policy.name,
        window=window,
        thresholds=tuple(float(t) for t in thresholds),
        precision=extremes.precision,
        title=title,
        padding_rows=padding_rows,
    )

"""
End-to-end calendar graph construction.

    dataset → validate → select station series → resolve season window
            → normalize leap days → index seasons → classify extremes
            → assemble grid

Example:
    >>> grid = build_calendar_graph(dataset, "Summer", 1990, 2020,
    ...                             thresholds=[35, 40, 45])
    >>> plot_calendar_grid(grid, save_path="summer.png")
"""

import logging
from datetime import date
from typing import Optional, Sequence, Union

import pandas as pd

from analysis.calendar_graph.categories import check_precision, check_thresholds, classify_extremes
from analysis.calendar_graph.datastructures import CalendarGrid
from analysis.calendar_graph.grid import assemble_grid
from analysis.calendar_graph.leap_days import normalize_leap_days
from analysis.calendar_graph.schema import select_series, validate_dataset
from analysis.calendar_graph.seasons import (
    SeasonPolicy,
    check_year_range,
    get_season_policy,
    index_seasons,
    resolve_season_window,
)
from src.config import get_settings

logger = logging.getLogger(__name__)


def default_thresholds(season: Union[str, SeasonPolicy]) -> Sequence[float]:
    """Configured thresholds for a season."""
    settings = get_settings()
    policy = get_season_policy(season)
    if policy.extreme_above:
        return settings.summer_thresholds
    return settings.winter_thresholds


def build_calendar_graph(
    dataset: pd.DataFrame,
    season: Union[str, SeasonPolicy],
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    thresholds: Optional[Sequence[float]] = None,
    location: Optional[str] = None,
    series_type: Optional[str] = None,
    precision: Optional[int] = None,
    today: Optional[date] = None,
) -> CalendarGrid:
    """Build a renderable calendar grid for one station and season.

    Args:
        dataset: TemperatureDataset (see build_dataset)
        season: 'Summer' or 'Winter'
        start_year: First year to draw (default: `history_years` ago)
        end_year: Last year to draw (default: this year)
        thresholds: Three ascending cutoffs (default: from settings)
        location: Station name (default: last location in sorted order)
        series_type: 'Maximum' or 'Minimum' (default: the season's usual type)
        precision: Label decimals (default: detected from the data)
        today: Reference date for year defaults

    Returns:
        CalendarGrid

    Raises:
        SchemaError, ArgumentError, EmptyRangeError, EmptyExtremesError
    """
    settings = get_settings()
    policy = get_season_policy(season)

    # Argument checks that need no data
    start_year, end_year = check_year_range(
        start_year, end_year, today=today, history_years=settings.history_years
    )
    thresholds = check_thresholds(
        default_thresholds(policy) if thresholds is None else thresholds
    )
    if precision is not None:
        precision = check_precision(precision)
    series_type = series_type or policy.default_type

    validate_dataset(dataset)
    series = select_series(dataset, location, series_type)
    location = series["Location"].iloc[0]

    window, frame = resolve_season_window(
        series, policy, start_year, end_year, history_years=settings.history_years
    )
    normalized, padding_rows = normalize_leap_days(frame, window)
    include_leap_day = policy.window_has_leap_day(window)
    indexed = index_seasons(normalized, window, include_leap_day)

    extremes = classify_extremes(indexed, window, thresholds, precision=precision)

    grid = assemble_grid(
        indexed,
        extremes,
        window,
        location=location,
        series_type=series_type,
        thresholds=thresholds,
        include_leap_day=include_leap_day,
        padding_rows=padding_rows,
    )
    if window.adjusted:
        grid.notices.append(
            f"Requested years {window.requested_start_year}-{window.requested_end_year} "
            f"adjusted to {window.start_year}-{window.end_year}"
        )
    return grid

"""
Temperature calendar graph sub-package.

Turns a cleaned daily station series into a season-aligned grid of
extreme-temperature categories: one row per season-year, one column per
day of the season.

Key use case:
- Summer heat and winter cold extremes for a BoM station at a glance
- Counting days beyond the most severe threshold per season

Public API:
- build_dataset (dataset)
- validate_dataset, list_locations, default_location (schema)
- SUMMER, WINTER, resolve_season_window (seasons)
- normalize_leap_days (leap_days)
- classify_extremes (categories)
- assemble_grid (grid)
- build_calendar_graph (pipeline)
"""

from analysis.calendar_graph.categories import build_bands, classify_extremes, detect_precision
from analysis.calendar_graph.datastructures import (
    CalendarGrid,
    ExtremeDays,
    LegendEntry,
    RawStationRows,
    SeasonWindow,
    TemperatureBand,
)
from analysis.calendar_graph.dataset import build_dataset
from analysis.calendar_graph.errors import (
    ArgumentError,
    CalendarGraphError,
    EmptyExtremesError,
    EmptyRangeError,
    SchemaError,
)
from analysis.calendar_graph.grid import assemble_grid
from analysis.calendar_graph.leap_days import normalize_leap_days
from analysis.calendar_graph.pipeline import build_calendar_graph
from analysis.calendar_graph.schema import (
    default_location,
    list_locations,
    select_series,
    validate_dataset,
)
from analysis.calendar_graph.seasons import (
    SUMMER,
    WINTER,
    SeasonPolicy,
    get_season_policy,
    index_seasons,
    resolve_season_window,
)

__all__ = [
    "CalendarGrid",
    "ExtremeDays",
    "LegendEntry",
    "RawStationRows",
    "SeasonWindow",
    "TemperatureBand",
    "CalendarGraphError",
    "SchemaError",
    "ArgumentError",
    "EmptyRangeError",
    "EmptyExtremesError",
    "build_dataset",
    "validate_dataset",
    "list_locations",
    "default_location",
    "select_series",
    "SeasonPolicy",
    "SUMMER",
    "WINTER",
    "get_season_policy",
    "resolve_season_window",
    "index_seasons",
    "normalize_leap_days",
    "detect_precision",
    "build_bands",
    "classify_extremes",
    "assemble_grid",
    "build_calendar_graph",
]

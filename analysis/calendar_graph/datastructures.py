"""
Core data structures for temperature calendar graphs.

These are the typed hand-off objects between pipeline stages. The tabular
data itself stays in pandas DataFrames; the dataclasses here carry the
derived metadata (season window, bands, axes) that travels with them.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd


# Column contract of a TemperatureDataset
DATE_COL = "Date"
YEAR_COL = "Year"
MONTH_COL = "Month"
DAY_COL = "Day"
LOCATION_COL = "Location"
TYPE_COL = "Type"
TEMPERATURE_COL = "Temperature"

DATASET_COLUMNS = [
    DATE_COL,
    YEAR_COL,
    MONTH_COL,
    DAY_COL,
    LOCATION_COL,
    TYPE_COL,
    TEMPERATURE_COL,
]

SERIES_TYPES = ("Maximum", "Minimum")

MISSING_CATEGORY = "Missing"


@dataclass
class RawStationRows:
    """Daily rows for one station series as delivered by a fetcher.

    Attributes:
        location: Station name
        series_type: 'Maximum' or 'Minimum'
        frame: DataFrame with Year, Month, Day and one temperature column
            whose name contains "degree"
        source: Where the rows came from (URL or file), for logging
    """

    location: str
    series_type: str
    frame: pd.DataFrame
    source: str = ""


@dataclass(frozen=True)
class SeasonWindow:
    """Resolved calendar range a graph is drawn over.

    Attributes:
        season: Season name ('Summer' or 'Winter')
        start_year: First calendar year of the window (after clamping)
        end_year: Last calendar year of the window (after clamping)
        min_available_year: Earliest year with non-missing in-season data
        max_available_year: Latest year with non-missing in-season data
        first_season: Season-year id of the oldest season drawn
        last_season: Season-year id of the most recent season drawn
        requested_start_year: Start year as asked for by the caller
        requested_end_year: End year as asked for by the caller
        adjusted: True if the requested years were moved to fit the data
    """

    season: str
    start_year: int
    end_year: int
    min_available_year: int
    max_available_year: int
    first_season: int
    last_season: int
    requested_start_year: int
    requested_end_year: int
    adjusted: bool = False

    @property
    def n_seasons(self) -> int:
        """Number of season-years in the window."""
        return self.last_season - self.first_season + 1

    @property
    def season_years(self) -> List[int]:
        """Season-year ids, oldest first."""
        return list(range(self.first_season, self.last_season + 1))


@dataclass(frozen=True)
class TemperatureBand:
    """One ordered severity band between two thresholds.

    `lower` is exclusive and `upper` inclusive; either may be None for an
    open-ended band. `rank` is 1 for the mildest band.
    """

    rank: int
    label: str
    lower: Optional[float]
    upper: Optional[float]
    color: str

    def contains(self, value: float) -> bool:
        if self.lower is not None and not value > self.lower:
            return False
        if self.upper is not None and not value <= self.upper:
            return False
        return True


@dataclass
class ExtremeDays:
    """Output of the extreme-category classifier.

    Attributes:
        days: One row per extreme day with columns season_year,
            season_number, seasons_ago, day_number, Temperature and
            temperature_category. Season-years without any extreme day
            appear once with NaN day_number and category.
        counts: One row per season-year with columns season_year,
            seasons_ago and extreme_count (days beyond the most severe
            threshold).
        bands: The bands used, mildest first.
        precision: Decimal places used for labels.
    """

    days: pd.DataFrame
    counts: pd.DataFrame
    bands: List[TemperatureBand]
    precision: int


@dataclass(frozen=True)
class LegendEntry:
    """Category → display label → color mapping for one legend row."""

    category: str
    label: str
    color: str


@dataclass
class AxisDescriptor:
    """Tick positions and labels for both grid axes."""

    month_ticks: List[int]
    month_labels: List[str]
    year_ticks: List[int]
    year_labels: List[str]
    n_days: int
    n_seasons: int
    x_label: str = "Day of season"
    y_label: str = "Season"


@dataclass
class CalendarGrid:
    """Renderable day-position × season-year grid.

    This is the hand-off contract to a chart renderer and carries no
    rendering logic of its own.
    """

    cells: pd.DataFrame
    extreme_counts: pd.DataFrame
    legend: List[LegendEntry]
    axes: AxisDescriptor
    location: str
    series_type: str
    season: str
    window: SeasonWindow
    thresholds: Tuple[float, float, float]
    precision: int
    title: str = ""
    padding_rows: int = 0
    notices: List[str] = field(default_factory=list)

    @property
    def categories(self) -> List[str]:
        """Legend categories in display order."""
        return [entry.category for entry in self.legend]

    @property
    def missing_count(self) -> int:
        """Number of cells drawn as missing."""
        return int((self.cells["temperature_category"] == MISSING_CATEGORY).sum())

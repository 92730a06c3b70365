"""
Season policies and season window resolution.

Summer and winter follow mirrored but not symmetric rules, so each season
is a SeasonPolicy instance that owns its month set, the direction in which
temperatures are extreme, how a requested year range becomes a window of
season-years, and its label and color templates.

Season-years are identified by the calendar year in which the season
starts. Summer 1995 runs from 1 Nov 1995 to 31 Mar 1996 and is labelled
"1995-96"; winter 1995 runs from 1 May to 30 Sep 1995.

Window rules:
    1. Filter to the season's months.
    2. Take min/max available years from the non-missing rows.
    3. Clamp the requested start up to min and end down to max, logging a
       warning when the request fell outside the data.
    4. Summer: a collapsed window is re-anchored to two years at the data
       boundary, then widened by one year each side. Only season-years
       whose November and March both fall inside the available years are
       kept.
       Winter: a collapsed window is pinned to the boundary year with no
       widening.
"""

import calendar
import logging
import numbers
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd

from analysis.calendar_graph.datastructures import (
    DAY_COL,
    MONTH_COL,
    SeasonWindow,
    TEMPERATURE_COL,
    YEAR_COL,
)
from analysis.calendar_graph.errors import ArgumentError, EmptyRangeError

logger = logging.getLogger(__name__)

MONTH_ABBR = {m: calendar.month_abbr[m] for m in range(1, 13)}


@dataclass(frozen=True)
class SeasonPolicy:
    """Everything that differs between summer and winter graphs.

    Attributes:
        name: 'Summer' or 'Winter'
        months: Season months in chronological order within the season
        extreme_above: True if hotter is more extreme, False if colder is
        default_type: Series type graphed when the caller does not choose
        band_colors: Colors from mildest to most severe band
        missing_color: Color for days with no temperature
    """

    name: str
    months: Tuple[int, ...]
    extreme_above: bool
    default_type: str
    band_colors: Tuple[str, str, str]
    missing_color: str = "#BDBDBD"

    @property
    def spans_year_boundary(self) -> bool:
        return list(self.months) != sorted(self.months)

    @property
    def has_february(self) -> bool:
        return 2 in self.months

    def in_season(self, months: pd.Series) -> pd.Series:
        """Boolean mask of rows whose month belongs to the season."""
        return months.isin(self.months)

    def season_year(self, years: pd.Series, months: pd.Series) -> pd.Series:
        """Season-year id for each (year, month) pair."""
        if not self.spans_year_boundary:
            return years.astype(int)
        wrapped = months < self.months[0]
        return (years - wrapped.astype(int)).astype(int)

    def calendar_year(self, season_year: int, month: int) -> int:
        """Calendar year in which `month` of a season-year falls."""
        if self.spans_year_boundary and month < self.months[0]:
            return season_year + 1
        return season_year

    def anchor_collapsed(
        self,
        start_year: int,
        end_year: int,
        min_year: int,
        max_year: int,
    ) -> Tuple[int, int, bool]:
        """Re-anchor a clamped window that no longer holds a season.

        Returns:
            (start_year, end_year, collapsed)
        """
        if self.spans_year_boundary:
            # A summer needs two calendar years to exist at all
            if start_year >= max_year:
                return max_year - 1, max_year, True
            if end_year <= min_year:
                return min_year, min_year + 1, True
        else:
            if start_year > max_year:
                return max_year, max_year, True
            if end_year < min_year:
                return min_year, min_year, True
        return start_year, end_year, False

    def season_range(
        self,
        start_year: int,
        end_year: int,
        min_year: int,
        max_year: int,
    ) -> Tuple[int, int]:
        """First and last season-year ids drawn for a clamped window."""
        if self.spans_year_boundary:
            expanded_start, expanded_end = start_year - 1, end_year + 1
            first = max(expanded_start, min_year)
            last = min(expanded_end - 1, max_year - 1)
            return first, last
        return start_year, end_year

    def year_label(self, season_year: int) -> str:
        if self.spans_year_boundary:
            return f"{season_year}-{(season_year + 1) % 100:02d}"
        return f"{season_year}"

    def canonical_days(self, include_leap_day: bool) -> List[Tuple[int, int]]:
        """(month, day) pairs of the season in drawing order."""
        days = []
        for month in self.months:
            n_days = calendar.monthrange(2001, month)[1]
            if month == 2 and include_leap_day:
                n_days = 29
            days.extend((month, d) for d in range(1, n_days + 1))
        return days

    def day_positions(self, include_leap_day: bool) -> Dict[Tuple[int, int], int]:
        """Map (month, day) to its 1-based position within the season."""
        return {
            md: pos
            for pos, md in enumerate(self.canonical_days(include_leap_day), start=1)
        }

    def month_ticks(self, include_leap_day: bool) -> Tuple[List[int], List[str]]:
        """Day positions of the first of each month, with month labels."""
        positions = self.day_positions(include_leap_day)
        ticks = [positions[(m, 1)] for m in self.months]
        labels = [MONTH_ABBR[m] for m in self.months]
        return ticks, labels

    def window_has_leap_day(self, window: SeasonWindow) -> bool:
        """True if any season-year in the window has a 29 February."""
        if not self.has_february:
            return False
        return any(
            calendar.isleap(self.calendar_year(s, 2)) for s in window.season_years
        )


SUMMER = SeasonPolicy(
    name="Summer",
    months=(11, 12, 1, 2, 3),
    extreme_above=True,
    default_type="Maximum",
    band_colors=("#FECC5C", "#FD8D3C", "#E31A1C"),
)

WINTER = SeasonPolicy(
    name="Winter",
    months=(5, 6, 7, 8, 9),
    extreme_above=False,
    default_type="Minimum",
    band_colors=("#9ECAE1", "#4292C6", "#08306B"),
)

SEASON_POLICIES = {
    "summer": SUMMER,
    "winter": WINTER,
}


def get_season_policy(season: Union[str, SeasonPolicy]) -> SeasonPolicy:
    """Look up a season policy by name (case-insensitive)."""
    if isinstance(season, SeasonPolicy):
        return season
    if isinstance(season, str) and season.strip().lower() in SEASON_POLICIES:
        return SEASON_POLICIES[season.strip().lower()]
    raise ArgumentError(f"season must be 'Summer' or 'Winter', got {season!r}")


def _check_year(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ArgumentError(f"{name} must be an integer year, got {value!r}")
    return int(value)


def check_year_range(
    start_year: Optional[int],
    end_year: Optional[int],
    today: Optional[date] = None,
    history_years: int = 30,
) -> Tuple[int, int]:
    """Apply defaults and validate a requested year range.

    Defaults are `history_years` before today and today's year. Nothing
    here touches the data, so bad input fails before any filtering.
    """
    today = today or date.today()
    start = today.year - history_years if start_year is None else _check_year(start_year, "start_year")
    end = today.year if end_year is None else _check_year(end_year, "end_year")

    if start > end:
        raise ArgumentError(f"start_year ({start}) must not be after end_year ({end})")

    return start, end


def resolve_season_window(
    series: pd.DataFrame,
    season: Union[str, SeasonPolicy],
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    today: Optional[date] = None,
    history_years: int = 30,
) -> Tuple[SeasonWindow, pd.DataFrame]:
    """Resolve the season window for one station series.

    Args:
        series: Dataset already filtered to one location and type
        season: 'Summer', 'Winter' or a SeasonPolicy
        start_year: Requested first year (default: `history_years` ago)
        end_year: Requested last year (default: this year)
        today: Reference date for the defaults
        history_years: Length of the default window

    Returns:
        (window, frame) where frame holds the in-window season rows with an
        added `season_year` column, sorted by date

    Raises:
        ArgumentError: Bad season or year range
        EmptyRangeError: No data in the season or in the resolved window
    """
    policy = get_season_policy(season)
    requested_start, requested_end = check_year_range(
        start_year, end_year, today=today, history_years=history_years
    )

    in_season = series[policy.in_season(series[MONTH_COL])]
    observed = in_season[in_season[TEMPERATURE_COL].notna()]
    if observed.empty:
        raise EmptyRangeError(f"no {policy.name.lower()} temperatures in dataset")

    min_year = int(observed[YEAR_COL].min())
    max_year = int(observed[YEAR_COL].max())

    start = max(requested_start, min_year)
    end = min(requested_end, max_year)
    adjusted = requested_start < min_year or requested_end > max_year

    start, end, collapsed = policy.anchor_collapsed(start, end, min_year, max_year)
    if collapsed:
        logger.info(
            f"{policy.name} window {requested_start}-{requested_end} is outside "
            f"{min_year}-{max_year}, anchored at {start}-{end}"
        )

    if adjusted:
        logger.warning(
            f"Requested {policy.name.lower()} years {requested_start}-{requested_end} "
            f"adjusted to available data: {start}-{end}"
        )

    first_season, last_season = policy.season_range(start, end, min_year, max_year)

    frame = in_season.copy()
    frame["season_year"] = policy.season_year(frame[YEAR_COL], frame[MONTH_COL])
    frame = frame[
        (frame["season_year"] >= first_season) & (frame["season_year"] <= last_season)
    ]

    if frame.empty:
        raise EmptyRangeError(
            f"no {policy.name.lower()} data between {start} and {end} "
            f"(available {min_year}-{max_year})"
        )

    window = SeasonWindow(
        season=policy.name,
        start_year=start,
        end_year=end,
        min_available_year=min_year,
        max_available_year=max_year,
        first_season=first_season,
        last_season=last_season,
        requested_start_year=requested_start,
        requested_end_year=requested_end,
        adjusted=adjusted,
    )

    frame = frame.sort_values([YEAR_COL, MONTH_COL, DAY_COL]).reset_index(drop=True)
    return window, frame


def index_seasons(
    frame: pd.DataFrame,
    window: SeasonWindow,
    include_leap_day: bool,
) -> pd.DataFrame:
    """Add season_number, seasons_ago and day_number columns.

    day_number is the position of the date in the season's canonical day
    sequence, so gaps and partial seasons keep their true positions.
    """
    policy = get_season_policy(window.season)
    positions = policy.day_positions(include_leap_day)

    indexed = frame.copy()
    indexed["season_number"] = (indexed["season_year"] - window.first_season + 1).astype(int)
    indexed["seasons_ago"] = (window.last_season - indexed["season_year"] + 1).astype(int)

    keys = list(zip(indexed[MONTH_COL].astype(int), indexed[DAY_COL].astype(int)))
    unknown = [k for k in keys if k not in positions]
    if unknown:
        raise ArgumentError(
            f"dates outside the {policy.name.lower()} calendar: month/day {unknown[0]}"
        )
    indexed["day_number"] = [positions[k] for k in keys]

    return indexed

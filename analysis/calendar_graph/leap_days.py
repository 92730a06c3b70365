"""
Leap-day normalisation for season frames.

When at least one season-year in a window has a 29 February, every other
season-year gets one too (as a missing-temperature padding row) so that
day positions line up from March onwards. Padding rows are flagged in the
`is_padding` column; the grid does not draw them as missing days.
"""

import logging
from typing import Tuple

import numpy as np
import pandas as pd

from analysis.calendar_graph.datastructures import (
    DATE_COL,
    DAY_COL,
    MONTH_COL,
    SeasonWindow,
    TEMPERATURE_COL,
    YEAR_COL,
)
from analysis.calendar_graph.seasons import get_season_policy

logger = logging.getLogger(__name__)


def normalize_leap_days(
    frame: pd.DataFrame,
    window: SeasonWindow,
) -> Tuple[pd.DataFrame, int]:
    """Insert missing Feb 29 rows when the window contains a leap February.

    Args:
        frame: Season frame from resolve_season_window()
        window: The resolved window

    Returns:
        (normalized_frame, inserted_count). The frame is a new object,
        sorted by (Year, Month, Day).
    """
    policy = get_season_policy(window.season)
    normalized = frame.copy()
    if "is_padding" not in normalized.columns:
        normalized["is_padding"] = False

    if not policy.window_has_leap_day(window):
        return normalized, 0

    feb = normalized[normalized[MONTH_COL] == 2]
    has_leap_day = set(feb.loc[feb[DAY_COL] == 29, "season_year"])
    feb_28 = feb[feb[DAY_COL] == 28]

    padding = feb_28[~feb_28["season_year"].isin(has_leap_day)].copy()
    if padding.empty:
        return normalized, 0

    padding[DAY_COL] = 29
    padding[TEMPERATURE_COL] = np.nan
    padding["is_padding"] = True
    # Real calendar dates cannot hold Feb 29 in a common year, so the Date
    # of a padding row stays NaT
    padding[DATE_COL] = pd.NaT

    normalized = pd.concat([normalized, padding], ignore_index=True)
    normalized = normalized.sort_values(
        [YEAR_COL, MONTH_COL, DAY_COL], kind="mergesort"
    ).reset_index(drop=True)

    logger.debug(f"Inserted {len(padding)} padding Feb 29 rows")
    return normalized, len(padding)

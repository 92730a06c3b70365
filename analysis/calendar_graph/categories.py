"""
Extreme-temperature categorisation.

Three ascending thresholds t1 < t2 < t3 split extreme days into three
ordered bands. In summer a day is extreme when it is above t1 and the
bands run upwards; in winter a day is extreme when it is at or below t3
and the bands run downwards:

    Summer: (t1, t2]  (t2, t3]  (t3, +inf)
    Winter: (t2, t3]  (t1, t2]  (-inf, t1]
            mildest  ─────────► most severe

Band labels are printed with a fixed number of decimals. The lower end of
a band is shown one display step above its cutoff (1 / 10**precision) so
that neighbouring labels never share a value.
"""

import logging
import math
import numbers
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from analysis.calendar_graph.datastructures import (
    ExtremeDays,
    MISSING_CATEGORY,
    SeasonWindow,
    TEMPERATURE_COL,
    TemperatureBand,
)
from analysis.calendar_graph.errors import ArgumentError, EmptyExtremesError
from analysis.calendar_graph.seasons import SeasonPolicy, get_season_policy

logger = logging.getLogger(__name__)

# Upper bound for detected decimal places
MAX_PRECISION = 6


def detect_precision(temperatures, max_digits: int = MAX_PRECISION) -> int:
    """Number of decimal places needed to show every temperature exactly.

    Checks numerically for the smallest `d` where rounding to `d` places
    leaves all values unchanged.

    Example:
        >>> detect_precision([21.0, 22.5, 19.25])
        2
    """
    values = np.asarray(pd.Series(temperatures, dtype="float64").dropna())
    if values.size == 0:
        return 0

    for digits in range(max_digits + 1):
        if np.allclose(np.round(values, digits), values, rtol=0.0, atol=1e-9):
            return digits
    return max_digits


def check_thresholds(thresholds: Sequence[float]) -> Tuple[float, float, float]:
    """Validate three strictly ascending finite thresholds."""
    if isinstance(thresholds, (str, bytes)) or not hasattr(thresholds, "__len__"):
        raise ArgumentError(f"thresholds must be a sequence of three numbers, got {thresholds!r}")
    if len(thresholds) != 3:
        raise ArgumentError(f"exactly three thresholds are required, got {len(thresholds)}")

    values = []
    for t in thresholds:
        if isinstance(t, bool) or not isinstance(t, numbers.Real) or not math.isfinite(t):
            raise ArgumentError(f"thresholds must be finite numbers, got {t!r}")
        values.append(float(t))

    t1, t2, t3 = values
    if not t1 < t2 < t3:
        raise ArgumentError(f"thresholds must be strictly ascending, got {values}")

    return t1, t2, t3


def check_precision(precision) -> int:
    if isinstance(precision, bool) or not isinstance(precision, numbers.Integral) or precision < 0:
        raise ArgumentError(f"precision must be a non-negative integer, got {precision!r}")
    return int(precision)


def build_bands(
    thresholds: Sequence[float],
    season: Union[str, SeasonPolicy],
    precision: int = 0,
) -> List[TemperatureBand]:
    """Build the three severity bands, mildest first.

    Example:
        >>> [b.label for b in build_bands([30, 35, 40], "Summer", 1)]
        ['30.1 to 35.0', '35.1 to 40.0', '40.1 and above']
    """
    policy = get_season_policy(season)
    t1, t2, t3 = check_thresholds(thresholds)
    precision = check_precision(precision)
    step = 10 ** -precision

    def fmt(value: float) -> str:
        return f"{value:.{precision}f}"

    if policy.extreme_above:
        spans = [
            (t1, t2, f"{fmt(t1 + step)} to {fmt(t2)}"),
            (t2, t3, f"{fmt(t2 + step)} to {fmt(t3)}"),
            (t3, None, f"{fmt(t3 + step)} and above"),
        ]
    else:
        spans = [
            (t2, t3, f"{fmt(t2 + step)} to {fmt(t3)}"),
            (t1, t2, f"{fmt(t1 + step)} to {fmt(t2)}"),
            (None, t1, f"{fmt(t1)} and below"),
        ]

    labels = [label for _, _, label in spans]
    if len(set(labels)) != len(labels):
        raise ArgumentError(
            f"thresholds {[t1, t2, t3]} cannot be told apart at precision {precision}"
        )

    return [
        TemperatureBand(
            rank=rank,
            label=label,
            lower=lower,
            upper=upper,
            color=policy.band_colors[rank - 1],
        )
        for rank, (lower, upper, label) in enumerate(spans, start=1)
    ]


def category_dtype(bands: List[TemperatureBand]) -> pd.CategoricalDtype:
    """Ordered categorical type: bands mildest → most severe, then Missing."""
    return pd.CategoricalDtype(
        categories=[b.label for b in bands] + [MISSING_CATEGORY],
        ordered=True,
    )


def categorize_temperatures(
    temperatures: pd.Series,
    bands: List[TemperatureBand],
) -> pd.Series:
    """Band label for each temperature; NaN where the day is not extreme."""
    ordered = sorted(bands, key=lambda b: -math.inf if b.lower is None else b.lower)
    bins = [-math.inf if b.lower is None else b.lower for b in ordered]
    bins.append(math.inf if ordered[-1].upper is None else ordered[-1].upper)

    cut = pd.cut(
        temperatures.astype("float64"),
        bins=bins,
        labels=[b.label for b in ordered],
        right=True,
    )
    return cut.astype(category_dtype(bands))


def _season_table(window: SeasonWindow) -> pd.DataFrame:
    years = window.season_years
    return pd.DataFrame({
        "season_year": years,
        "season_number": [s - window.first_season + 1 for s in years],
        "seasons_ago": [window.last_season - s + 1 for s in years],
    })


def classify_extremes(
    indexed: pd.DataFrame,
    window: SeasonWindow,
    thresholds: Sequence[float],
    precision: Optional[int] = None,
) -> ExtremeDays:
    """Label extreme days and count the most severe ones per season-year.

    Args:
        indexed: Season frame with season_year and day_number columns
        window: The resolved window (its season picks the polarity)
        thresholds: Three ascending thresholds
        precision: Label decimals; detected from the data when None

    Returns:
        ExtremeDays with every season-year present in both tables

    Raises:
        ArgumentError: Bad thresholds or precision
        EmptyExtremesError: No non-missing day is beyond the mildest cutoff
    """
    policy = get_season_policy(window.season)
    t1, t2, t3 = check_thresholds(thresholds)

    if precision is None:
        precision = detect_precision(indexed[TEMPERATURE_COL])
        logger.debug(f"Detected label precision: {precision}")
    else:
        precision = check_precision(precision)

    bands = build_bands((t1, t2, t3), policy, precision)

    observed = indexed[indexed[TEMPERATURE_COL].notna()].copy()
    observed["temperature_category"] = categorize_temperatures(
        observed[TEMPERATURE_COL], bands
    )
    extreme = observed[observed["temperature_category"].notna()]

    if extreme.empty:
        direction = "above" if policy.extreme_above else "at or below"
        mildest = t1 if policy.extreme_above else t3
        raise EmptyExtremesError(
            f"no {policy.name.lower()} days {direction} {mildest} between "
            f"{window.first_season} and {window.last_season}"
        )

    seasons = _season_table(window)
    days = seasons.merge(
        extreme[["season_year", "day_number", TEMPERATURE_COL, "temperature_category"]],
        on="season_year",
        how="left",
    )
    days["day_number"] = days["day_number"].astype("Int64")
    days["temperature_category"] = days["temperature_category"].astype(category_dtype(bands))
    days = days.sort_values(["season_year", "day_number"]).reset_index(drop=True)

    if policy.extreme_above:
        severe = observed[TEMPERATURE_COL] > t3
    else:
        severe = observed[TEMPERATURE_COL] <= t1
    per_season = observed[severe].groupby("season_year").size()

    counts = seasons[["season_year", "seasons_ago"]].copy()
    counts["extreme_count"] = (
        counts["season_year"].map(per_season).fillna(0).astype(int)
    )

    logger.info(
        f"Classified {len(extreme)} extreme {policy.name.lower()} days "
        f"over {window.n_seasons} seasons"
    )

    return ExtremeDays(days=days, counts=counts, bands=bands, precision=precision)

"""
Build a TemperatureDataset from raw station rows.

Handles:
- Locating the temperature column (name contains "degree")
- Building a Date column from Year/Month/Day, dropping impossible dates
- De-duplicating on (Date, Location, Type), keeping observed values first
- Gap-filling every calendar day between a series' first and last date
- Sorting by (Date, Location, Type)
"""

import logging
from typing import Iterable, List, Union

import pandas as pd

from analysis.calendar_graph.datastructures import (
    DATASET_COLUMNS,
    DATE_COL,
    DAY_COL,
    LOCATION_COL,
    MONTH_COL,
    RawStationRows,
    SERIES_TYPES,
    TEMPERATURE_COL,
    TYPE_COL,
    YEAR_COL,
)
from analysis.calendar_graph.errors import ArgumentError, SchemaError
from analysis.calendar_graph.schema import validate_dataset

logger = logging.getLogger(__name__)

KEY_COLUMNS = [DATE_COL, LOCATION_COL, TYPE_COL]


def find_temperature_column(frame: pd.DataFrame) -> str:
    """Name of the single column whose name contains 'degree'."""
    matches = [c for c in frame.columns if "degree" in str(c).lower()]
    if len(matches) != 1:
        raise SchemaError(
            f"expected exactly one temperature column containing 'degree', found {len(matches)}"
        )
    return matches[0]


def _normalize_rows(raw: RawStationRows) -> pd.DataFrame:
    if raw.series_type not in SERIES_TYPES:
        raise ArgumentError(f"type not available: {raw.series_type!r}")
    if not raw.location:
        raise ArgumentError("station rows have no location name")

    frame = raw.frame
    missing = [c for c in (YEAR_COL, MONTH_COL, DAY_COL) if c not in frame.columns]
    if missing:
        raise SchemaError(f"station rows missing column(s): {', '.join(missing)}")

    temp_col = find_temperature_column(frame)

    parts = pd.DataFrame({
        YEAR_COL: pd.to_numeric(frame[YEAR_COL], errors="coerce"),
        MONTH_COL: pd.to_numeric(frame[MONTH_COL], errors="coerce"),
        DAY_COL: pd.to_numeric(frame[DAY_COL], errors="coerce"),
        TEMPERATURE_COL: pd.to_numeric(frame[temp_col], errors="coerce").astype("float64"),
    })
    parts = parts.dropna(subset=[YEAR_COL, MONTH_COL, DAY_COL])
    if parts.empty:
        logger.warning(f"No dated rows for {raw.location} {raw.series_type}")
        return parts

    parts[DATE_COL] = pd.to_datetime(
        parts[[YEAR_COL, MONTH_COL, DAY_COL]].astype(int).rename(
            columns={YEAR_COL: "year", MONTH_COL: "month", DAY_COL: "day"}
        ),
        errors="coerce",
    )
    bad_dates = parts[DATE_COL].isna().sum()
    if bad_dates:
        logger.warning(f"Dropped {bad_dates} rows with invalid dates from {raw.location}")
    parts = parts.dropna(subset=[DATE_COL])

    parts[LOCATION_COL] = raw.location
    parts[TYPE_COL] = raw.series_type
    return parts


def _gap_fill(series: pd.DataFrame) -> pd.DataFrame:
    location = series[LOCATION_COL].iloc[0]
    series_type = series[TYPE_COL].iloc[0]
    full_range = pd.date_range(series[DATE_COL].min(), series[DATE_COL].max(), freq="D")

    filled = (
        series.set_index(DATE_COL)[[TEMPERATURE_COL]]
        .reindex(full_range)
        .rename_axis(DATE_COL)
        .reset_index()
    )
    filled[YEAR_COL] = filled[DATE_COL].dt.year
    filled[MONTH_COL] = filled[DATE_COL].dt.month
    filled[DAY_COL] = filled[DATE_COL].dt.day
    filled[LOCATION_COL] = location
    filled[TYPE_COL] = series_type

    added = len(filled) - len(series)
    if added:
        logger.debug(f"Gap-filled {added} days for {location} {series_type}")
    return filled


def build_dataset(rows: Union[RawStationRows, Iterable[RawStationRows]]) -> pd.DataFrame:
    """Clean raw station rows into a validated TemperatureDataset.

    Args:
        rows: One RawStationRows or an iterable of them

    Returns:
        DataFrame with the dataset columns, one row per calendar day per
        (Location, Type) between that series' first and last date

    Raises:
        ArgumentError: No rows, unknown type or unnamed station
        SchemaError: Raw rows missing date parts or temperature column
    """
    if isinstance(rows, RawStationRows):
        rows = [rows]

    parts: List[pd.DataFrame] = [_normalize_rows(raw) for raw in rows]
    parts = [p for p in parts if not p.empty]
    if not parts:
        raise ArgumentError("no station rows to build a dataset from")

    combined = pd.concat(parts, ignore_index=True)

    # Observed temperatures win over blanks for the same day
    combined = combined.sort_values(
        KEY_COLUMNS + [TEMPERATURE_COL], na_position="last", kind="mergesort"
    )
    before = len(combined)
    combined = combined.drop_duplicates(subset=KEY_COLUMNS, keep="first")
    if len(combined) < before:
        logger.info(f"Removed {before - len(combined)} duplicate daily rows")

    filled = [
        _gap_fill(group)
        for _, group in combined.groupby([LOCATION_COL, TYPE_COL], sort=True)
    ]
    dataset = pd.concat(filled, ignore_index=True)

    dataset = dataset[DATASET_COLUMNS].sort_values(KEY_COLUMNS).reset_index(drop=True)
    for col in (YEAR_COL, MONTH_COL, DAY_COL):
        dataset[col] = dataset[col].astype(int)

    validate_dataset(dataset)
    logger.info(
        f"Built dataset: {len(dataset)} rows, "
        f"{dataset[LOCATION_COL].nunique()} location(s)"
    )
    return dataset

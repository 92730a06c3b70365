"""
Dataset schema validation and location lookup.

validate_dataset() checks shape, column types and that only Temperature
holds missing values: a dataset whose Year disagrees with its Date still
passes. Callers validate before any season or threshold work so that
malformed input fails with a message naming the offending column.
"""

import logging
from datetime import date
from typing import List, Optional

import numpy as np
import pandas as pd
from pandas.api import types as ptypes

from analysis.calendar_graph.datastructures import (
    DATASET_COLUMNS,
    DATE_COL,
    DAY_COL,
    LOCATION_COL,
    MONTH_COL,
    SERIES_TYPES,
    TEMPERATURE_COL,
    TYPE_COL,
    YEAR_COL,
)
from analysis.calendar_graph.errors import ArgumentError, SchemaError

logger = logging.getLogger(__name__)

NUMERIC_COLUMNS = [YEAR_COL, MONTH_COL, DAY_COL, TEMPERATURE_COL]
CALENDAR_COLUMNS = [YEAR_COL, MONTH_COL, DAY_COL]
TEXT_COLUMNS = [LOCATION_COL, TYPE_COL]


def _is_date_column(series: pd.Series) -> bool:
    if ptypes.is_datetime64_any_dtype(series):
        return True
    if ptypes.is_object_dtype(series):
        values = series.dropna()
        return all(isinstance(v, date) for v in values)
    return False


def _is_numeric_column(series: pd.Series) -> bool:
    return ptypes.is_numeric_dtype(series) and not ptypes.is_bool_dtype(series)


def _is_text_column(series: pd.Series) -> bool:
    if ptypes.is_string_dtype(series) or ptypes.is_object_dtype(series):
        values = series.dropna()
        return all(isinstance(v, str) for v in values)
    return False


def validate_dataset(data) -> None:
    """Check that `data` is a well-formed TemperatureDataset.

    Args:
        data: Object to check, normally a pandas DataFrame

    Raises:
        SchemaError: Naming the first violated constraint
    """
    if not isinstance(data, pd.DataFrame):
        raise SchemaError(
            f"dataset must be a pandas DataFrame, got {type(data).__name__}"
        )

    columns = list(data.columns)
    duplicated = sorted({str(c) for c in columns if columns.count(c) > 1})
    if duplicated:
        raise SchemaError(f"duplicated column(s): {', '.join(duplicated)}")

    missing = [c for c in DATASET_COLUMNS if c not in columns]
    if missing:
        raise SchemaError(f"missing required column(s): {', '.join(missing)}")

    if not _is_date_column(data[DATE_COL]):
        raise SchemaError(f"column {DATE_COL} must be a date type, got {data[DATE_COL].dtype}")

    for col in NUMERIC_COLUMNS:
        if not _is_numeric_column(data[col]):
            raise SchemaError(f"column {col} must be numeric, got {data[col].dtype}")

    for col in TEXT_COLUMNS:
        if not _is_text_column(data[col]):
            raise SchemaError(f"column {col} must be text, got {data[col].dtype}")

    # Temperature is the only column allowed to be absent
    for col in DATASET_COLUMNS:
        if col != TEMPERATURE_COL and data[col].isna().any():
            raise SchemaError(f"column {col} has missing values")

    for col in CALENDAR_COLUMNS:
        values = data[col].to_numpy(dtype="float64")
        if not np.isfinite(values).all() or (values != np.round(values)).any():
            raise SchemaError(f"column {col} must hold whole numbers")


def _sorted_locations(data: pd.DataFrame) -> List[str]:
    return sorted(data[LOCATION_COL].dropna().unique().tolist())


def list_locations(data: pd.DataFrame) -> List[str]:
    """Sorted distinct station names in a dataset."""
    validate_dataset(data)
    return _sorted_locations(data)


def default_location(data: pd.DataFrame, validate: bool = True) -> str:
    """Location used when the caller does not name one.

    Picks the last name in sorted order, which for same-city stations
    usually lands on the one with the longer record.

    Args:
        data: TemperatureDataset
        validate: Skip schema validation when the caller already ran it
    """
    locations = list_locations(data) if validate else _sorted_locations(data)
    if not locations:
        raise ArgumentError("dataset has no locations")
    return locations[-1]


def select_series(
    data: pd.DataFrame,
    location: Optional[str],
    series_type: str,
) -> pd.DataFrame:
    """Filter a validated dataset to one station and one series type.

    The dataset is not validated again; run validate_dataset() first.

    Args:
        data: TemperatureDataset
        location: Station name, or None for default_location()
        series_type: 'Maximum' or 'Minimum'

    Returns:
        New DataFrame sorted by date

    Raises:
        ArgumentError: Unknown location or type
    """
    if location is None:
        location = default_location(data, validate=False)
        logger.info(f"No location given, using {location}")
    else:
        locations = _sorted_locations(data)
        if location not in locations:
            raise ArgumentError(
                f"location not available: {location!r} (available: {', '.join(locations)})"
            )

    if series_type not in SERIES_TYPES:
        raise ArgumentError(
            f"type not available: {series_type!r} (expected one of {', '.join(SERIES_TYPES)})"
        )

    station = data[data[LOCATION_COL] == location]
    series = station[station[TYPE_COL] == series_type]
    if series.empty:
        present = sorted(station[TYPE_COL].unique().tolist())
        raise ArgumentError(
            f"type not available: {series_type!r} for {location} (available: {', '.join(present)})"
        )

    return series.sort_values(DATE_COL).reset_index(drop=True)

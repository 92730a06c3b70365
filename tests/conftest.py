"""Pytest fixtures and configuration."""

import os
import sys

import numpy as np
import pandas as pd
import pytest
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Load environment variables
load_dotenv()


def make_series(
    start: str,
    end: str,
    location: str = "Sydney (Observatory Hill)",
    series_type: str = "Maximum",
    temperature: float = 25.0,
    overrides: dict = None,
) -> pd.DataFrame:
    """Daily TemperatureDataset rows for one station series.

    Every day gets `temperature` except the dates in `overrides`
    ('YYYY-MM-DD' → value, None for missing).
    """
    dates = pd.date_range(start, end, freq="D")
    temps = pd.Series(float(temperature), index=dates)
    for day, value in (overrides or {}).items():
        temps[pd.Timestamp(day)] = np.nan if value is None else float(value)

    return pd.DataFrame({
        "Date": dates,
        "Year": dates.year.astype(int),
        "Month": dates.month.astype(int),
        "Day": dates.day.astype(int),
        "Location": location,
        "Type": series_type,
        "Temperature": temps.to_numpy(),
    })


@pytest.fixture
def series_factory():
    """Build synthetic station series (see make_series)."""
    return make_series


@pytest.fixture
def summer_dataset():
    """Three calendar years of maximums with a few hot days.

    Summer 2021-22: 25 Dec 2021 at 36, 15 Jan 2022 at 41
    Summer 2022-23: 1 Feb 2023 at 33
    """
    return make_series(
        "2021-01-01",
        "2023-12-31",
        overrides={
            "2021-12-25": 36.0,
            "2022-01-15": 41.0,
            "2023-02-01": 33.0,
        },
    )


@pytest.fixture
def winter_dataset():
    """Three years of minimums, never at or below 0, some days at or below 5."""
    return make_series(
        "2020-01-01",
        "2022-12-31",
        location="Canberra Airport",
        series_type="Minimum",
        temperature=10.0,
        overrides={
            "2021-07-01": 4.0,
            "2022-06-15": 2.5,
        },
    )


@pytest.fixture
def two_station_dataset():
    """Two stations, both series types, sorted like a built dataset."""
    frames = [
        make_series("2020-01-01", "2020-12-31", location="Melbourne Regional Office"),
        make_series("2020-01-01", "2020-12-31", location="Melbourne Airport"),
        make_series("2020-01-01", "2020-12-31", location="Melbourne Airport", series_type="Minimum"),
    ]
    return (
        pd.concat(frames, ignore_index=True)
        .sort_values(["Date", "Location", "Type"])
        .reset_index(drop=True)
    )


@pytest.fixture(scope="session")
def settings():
    """Get application settings."""
    from src.config.settings import get_settings

    return get_settings()

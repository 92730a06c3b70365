"""
Tests for extreme-temperature categorisation.
"""

import numpy as np
import pandas as pd
import pytest

from analysis.calendar_graph.categories import (
    build_bands,
    categorize_temperatures,
    check_thresholds,
    classify_extremes,
    detect_precision,
)
from analysis.calendar_graph.errors import ArgumentError, EmptyExtremesError
from analysis.calendar_graph.seasons import index_seasons, resolve_season_window


def prepare(data, season, start, end):
    window, frame = resolve_season_window(data, season, start, end)
    return window, index_seasons(frame, window, include_leap_day=False)


class TestDetectPrecision:
    """Test decimal place detection."""

    def test_whole_numbers(self):
        assert detect_precision([30.0, 31.0, 25.0]) == 0

    def test_one_decimal(self):
        assert detect_precision([30.0, 31.4, np.nan]) == 1

    def test_largest_wins(self):
        assert detect_precision([21.0, 22.5, 19.25]) == 2

    def test_all_missing(self):
        assert detect_precision([np.nan, np.nan]) == 0

    def test_capped(self):
        assert detect_precision([1 / 3], max_digits=4) == 4


class TestThresholds:
    """Test threshold validation."""

    @pytest.mark.parametrize("bad", [
        [30, 35],
        [30, 35, 40, 45],
        [35, 30, 40],
        [30, 30, 40],
        [30, "35", 40],
        [30, 35, float("inf")],
        "30,35,40",
    ])
    def test_rejected(self, bad):
        with pytest.raises(ArgumentError):
            check_thresholds(bad)

    def test_accepted(self):
        assert check_thresholds([30, 35, 40.5]) == (30.0, 35.0, 40.5)


class TestBuildBands:
    """Test band boundaries and labels."""

    def test_summer_labels(self):
        bands = build_bands([30, 35, 40], "Summer", precision=1)
        assert [b.label for b in bands] == ["30.1 to 35.0", "35.1 to 40.0", "40.1 and above"]
        assert [b.rank for b in bands] == [1, 2, 3]
        assert bands[2].upper is None

    def test_winter_labels(self):
        bands = build_bands([0, 3, 5], "Winter", precision=0)
        assert [b.label for b in bands] == ["4 to 5", "1 to 3", "0 and below"]
        assert bands[2].lower is None

    def test_band_membership(self):
        summer = build_bands([30, 35, 40], "Summer")
        assert not summer[0].contains(30.0)
        assert summer[0].contains(35.0)
        assert summer[2].contains(50.0)

        winter = build_bands([0, 3, 5], "Winter")
        assert winter[0].contains(5.0)
        assert not winter[0].contains(5.1)
        assert winter[2].contains(0.0)

    def test_indistinguishable_labels(self):
        with pytest.raises(ArgumentError, match="precision"):
            build_bands([30.1, 30.2, 30.3], "Winter", precision=0)

    def test_negative_precision(self):
        with pytest.raises(ArgumentError, match="precision"):
            build_bands([30, 35, 40], "Summer", precision=-1)


class TestCategorizeTemperatures:
    """Test per-day band assignment."""

    def test_summer_bands(self):
        bands = build_bands([30, 35, 40], "Summer")
        temps = pd.Series([29.0, 30.0, 30.5, 35.0, 38.0, 40.0, 41.0])
        result = categorize_temperatures(temps, bands)
        assert result.iloc[:2].isna().all()
        assert result.iloc[2:].tolist() ==["31 to 35", "31 to 35", "36 to 40", "36 to 40", "41 and above"]

    def test_winter_bands(self):
        bands = build_bands([0, 3, 5], "Winter")
        temps = pd.Series([6.0, 5.0, 3.0, 0.5, 0.0, -4.0])
        result = categorize_temperatures(temps, bands)
        assert pd.isna(result.iloc[0])
        assert result.iloc[1:].tolist() == ["4 to 5", "1 to 3", "1 to 3", "0 and below", "0 and below"]

    def test_summer_monotonic(self):
        """A hotter summer day is never in a milder band."""
        bands = build_bands([30, 35, 40], "Summer", precision=1)
        temps = pd.Series(np.arange(25.0, 50.0, 0.1))
        codes = categorize_temperatures(temps, bands).cat.codes.to_numpy()
        assert (np.diff(codes) >= 0).all()


class TestClassifyExtremes:
    """Test classification over a season window."""

    def test_summer_counts(self, summer_dataset):
        window, indexed = prepare(summer_dataset, "Summer", 2021, 2023)
        extremes = classify_extremes(indexed, window, [30, 35, 40])

        days = extremes.days.dropna(subset=["day_number"])
        assert len(days) == 3
        assert extremes.precision == 0
        assert extremes.counts["extreme_count"].tolist() == [1, 0]
        assert extremes.counts["seasons_ago"].tolist() == [2, 1]

    def test_empty_seasons_left_joined(self, summer_dataset):
        data = summer_dataset.copy()
        data.loc[data["Date"] == pd.Timestamp("2023-02-01"), "Temperature"] = 25.0
        window, indexed = prepare(data, "Summer", 2021, 2023)
        extremes = classify_extremes(indexed, window, [30, 35, 40])

        assert set(extremes.days["season_year"]) == {2021, 2022}
        empty = extremes.days[extremes.days["season_year"] == 2022]
        assert len(empty) == 1
        assert pd.isna(empty["temperature_category"].iloc[0])
        assert pd.isna(empty["day_number"].iloc[0])

    def test_explicit_precision(self, summer_dataset):
        window, indexed = prepare(summer_dataset, "Summer", 2021, 2023)
        extremes = classify_extremes(indexed, window, [30, 35, 40], precision=1)
        assert [b.label for b in extremes.bands][0] == "30.1 to 35.0"

    def test_winter_counts_most_severe(self, winter_dataset):
        window, indexed = prepare(winter_dataset, "Winter", 2020, 2022)
        extremes = classify_extremes(indexed, window, [0, 3, 5])

        days = extremes.days.dropna(subset=["day_number"])
        assert len(days) == 2
        assert extremes.counts["extreme_count"].tolist() == [0, 0, 0]

    def test_no_extremes(self, series_factory):
        data = series_factory("2020-01-01", "2022-12-31", temperature=20.0)
        window, indexed = prepare(data, "Summer", 2020, 2022)
        with pytest.raises(EmptyExtremesError):
            classify_extremes(indexed, window, [30, 35, 40])

    def test_missing_temperatures_ignored(self, series_factory):
        data = series_factory(
            "2020-01-01", "2022-12-31", temperature=20.0,
            overrides={"2021-01-10": None},
        )
        window, indexed = prepare(data, "Summer", 2020, 2022)
        with pytest.raises(EmptyExtremesError):
            classify_extremes(indexed, window, [30, 35, 40])

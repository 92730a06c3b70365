"""
Tests for leap-day normalisation.
"""

import pandas as pd

from analysis.calendar_graph.leap_days import normalize_leap_days
from analysis.calendar_graph.seasons import resolve_season_window


def feb_29_rows(frame):
    return frame[(frame["Month"] == 2) & (frame["Day"] == 29)]


class TestNormalizeLeapDays:
    """Test Feb 29 padding across season-years."""

    def test_pads_every_common_year(self, series_factory):
        """One leap February among four seasons → three padding rows."""
        data = series_factory("2021-01-01", "2025-12-31")
        window, frame = resolve_season_window(data, "Summer", 2021, 2025)
        assert window.season_years == [2021, 2022, 2023, 2024]

        normalized, inserted = normalize_leap_days(frame, window)

        assert inserted == 3
        assert len(normalized) == len(frame) + 3
        padding = feb_29_rows(normalized)
        assert sorted(padding["season_year"]) == [2021, 2022, 2023, 2024]
        assert padding["is_padding"].sum() == 3
        assert padding.loc[padding["is_padding"], "Temperature"].isna().all()

    def test_padding_cloned_from_feb_28(self, series_factory):
        data = series_factory("2021-01-01", "2025-12-31", location="Darwin Airport")
        window, frame = resolve_season_window(data, "Summer", 2021, 2025)
        normalized, _ = normalize_leap_days(frame, window)

        padding = normalized[normalized["is_padding"]]
        assert set(padding["Location"]) == {"Darwin Airport"}
        assert set(padding["Type"]) == {"Maximum"}
        assert set(padding["Year"]) == {2022, 2023, 2025}

    def test_no_leap_year_no_padding(self, summer_dataset):
        window, frame = resolve_season_window(summer_dataset, "Summer", 2021, 2023)
        normalized, inserted = normalize_leap_days(frame, window)
        assert inserted == 0
        assert feb_29_rows(normalized).empty
        assert len(normalized) == len(frame)

    def test_winter_has_no_february(self, series_factory):
        data = series_factory("2019-01-01", "2021-12-31", series_type="Minimum")
        window, frame = resolve_season_window(data, "Winter", 2019, 2021)
        _, inserted = normalize_leap_days(frame, window)
        assert inserted == 0

    def test_order_preserved(self, series_factory):
        data = series_factory("2021-01-01", "2025-12-31")
        window, frame = resolve_season_window(data, "Summer", 2021, 2025)
        normalized, _ = normalize_leap_days(frame, window)

        keys = list(zip(normalized["Year"], normalized["Month"], normalized["Day"]))
        assert keys == sorted(keys)

    def test_input_frame_untouched(self, series_factory):
        data = series_factory("2021-01-01", "2025-12-31")
        window, frame = resolve_season_window(data, "Summer", 2021, 2025)
        before = frame.copy()
        normalize_leap_days(frame, window)
        pd.testing.assert_frame_equal(frame, before)

"""
Tests for weight conversion and window helpers
"""

import pytest
from datetime import datetime, date, timedelta, timezone

from engine.units import convert_weight, ensure_utc, window_days, week_start, last_day


class TestConvertWeight:
    """Tests for convert_weight"""

    @pytest.mark.unit
    def test_kg_to_lbs(self):
        assert convert_weight(70, "kg", "lbs") == pytest.approx(154.3234)

    @pytest.mark.unit
    def test_lbs_to_kg(self):
        assert convert_weight(154.3234, "lbs", "kg") == pytest.approx(70.0, abs=1e-3)

    @pytest.mark.unit
    def test_pounds_is_an_alias_of_lbs(self):
        assert convert_weight(100, "pounds", "kg") == convert_weight(100, "lbs", "kg")
        assert convert_weight(50, "kg", "pounds") == convert_weight(50, "kg", "lbs")

    @pytest.mark.unit
    def test_same_unit_is_identity(self):
        assert convert_weight(72.5, "kg", "kg") == 72.5
        assert convert_weight(150.0, "lbs", "pounds") == pytest.approx(150.0, abs=1e-3)

    @pytest.mark.unit
    def test_units_are_case_insensitive(self):
        assert convert_weight(70, "KG", "LBS") == convert_weight(70, "kg", "lbs")

    @pytest.mark.unit
    @pytest.mark.parametrize("weight", [0.5, 45.0, 70.3, 180.25, 300.0])
    def test_round_trip_stays_within_tolerance(self, weight):
        back = convert_weight(convert_weight(weight, "kg", "lbs"), "lbs", "kg")
        assert abs(back - weight) < 1e-3

    @pytest.mark.unit
    def test_unknown_source_unit_returns_value_unchanged(self):
        assert convert_weight(12.0, "stone", "kg") == 12.0

    @pytest.mark.unit
    def test_unknown_target_unit_returns_kilograms(self):
        assert convert_weight(70.0, "kg", "stone") == 70.0


class TestWindowHelpers:
    """Tests for time-window helpers"""

    @pytest.mark.unit
    def test_naive_datetimes_are_treated_as_utc(self):
        naive = datetime(2024, 1, 1, 8, 30)
        assert ensure_utc(naive) == datetime(2024, 1, 1, 8, 30, tzinfo=timezone.utc)

    @pytest.mark.unit
    def test_aware_datetimes_are_normalized(self):
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2024, 1, 1, 10, 0, tzinfo=plus_two)
        assert ensure_utc(moment) == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

    @pytest.mark.unit
    def test_window_days_rounds_up(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert window_days(start, start + timedelta(days=7)) == 7
        assert window_days(start, start + timedelta(days=6, hours=1)) == 7

    @pytest.mark.unit
    def test_week_start_is_the_preceding_sunday(self):
        # 2024-03-13 is a Wednesday
        assert week_start(date(2024, 3, 13)) == date(2024, 3, 10)
        assert week_start(date(2024, 3, 10)) == date(2024, 3, 10)
        assert week_start(date(2024, 3, 16)) == date(2024, 3, 10)

    @pytest.mark.unit
    def test_last_day_of_a_midnight_bounded_window(self):
        assert last_day(datetime(2024, 3, 4, tzinfo=timezone.utc)) == date(2024, 3, 3)
        assert last_day(datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)) == date(2024, 3, 15)

# ABOUTME: Contract tests for hourly-series alignment and current-conditions extraction.
# ABOUTME: Covers each alignment tier and each value fallback tier in isolation and end to end.

from city_weather.current import (
    align_index,
    current_conditions,
    exact_match,
    extract_current,
    first_numeric,
    nearest_match,
    parse_timestamp,
    pick_hourly_value,
    same_day_match,
    value_at,
)
from city_weather.models import ForecastPayload

HOURS = ["2024-01-01T00:00", "2024-01-01T01:00", "2024-01-01T02:00"]


class TestAlignIndex:
    def test_exact_match(self):
        """An hourly timestamp equal to the current time is used directly.

        Implementation: Current time "01:00" appears verbatim at position 1.
        Passing implies: The exact-match tier runs first.
        """
        assert align_index(HOURS, "2024-01-01T01:00") == 1

    def test_same_day_mid_hour_after_last_entry(self):
        """A same-day time past the series end aligns to that day's last entry.

        Implementation: Hours 00:00 and 01:00, current time 05:30 on the same day.
        Passing implies: The same-day tier picks the closest entry of the day, not just the first.
        """
        assert align_index(["2024-01-01T00:00", "2024-01-01T01:00"], "2024-01-01T05:30") == 1

    def test_same_day_mid_hour_picks_closest(self):
        """A mid-hour time aligns to the nearer of the surrounding hours.

        Implementation: Current time 01:45 sits between 01:00 and 02:00.
        Passing implies: The same-day tier measures distance within the day.
        """
        assert align_index(HOURS, "2024-01-01T01:45") == 2

    def test_nearest_neighbour_across_days(self):
        """A time on a day not covered falls through to the nearest timestamp overall.

        Implementation: Series covers Jan 1, current time is early Jan 2.
        Passing implies: The nearest-neighbour tier is reached when no same-day entry exists.
        """
        assert align_index(HOURS, "2024-01-02T00:30") == 2

    def test_empty_series_returns_zero(self):
        assert align_index([], "2024-01-01T01:00") == 0

    def test_missing_current_time_returns_zero(self):
        assert align_index(HOURS, None) == 0
        assert align_index(HOURS, "") == 0

    def test_unparseable_current_time_returns_zero(self):
        """A current time that matches nothing and cannot be parsed defaults to 0.

        Implementation: Current time is garbage text.
        Passing implies: Alignment never fails outright.
        """
        assert align_index(HOURS, "not-a-time") == 0

    def test_unparseable_entries_are_skipped(self):
        """Hourly entries that cannot be parsed are ignored by the nearest-neighbour tier.

        Implementation: First entry is garbage, current time is on another day.
        Passing implies: Bad entries never win and never raise.
        """
        hours = ["garbage", "2024-01-01T10:00", "2024-01-01T20:00"]
        assert align_index(hours, "2024-01-02T03:00") == 2


class TestAlignmentTiers:
    def test_exact_match_misses_return_none(self):
        assert exact_match(HOURS, "2024-01-01T01:30") is None

    def test_same_day_match_without_date_returns_none(self):
        assert same_day_match(HOURS, "2024-02-01T01:00") is None

    def test_same_day_match_falls_back_to_first_when_unparseable(self):
        """Same-day entries with unparseable times resolve to the first one of the day.

        Implementation: Entries share the date prefix but carry an invalid time part.
        Passing implies: The tier still yields an index rather than None.
        """
        hours = ["2024-01-01Tbad", "2024-01-01Tworse"]
        assert same_day_match(hours, "2024-01-01T05:30") == 0

    def test_nearest_match_ties_go_to_earliest(self):
        assert nearest_match(["2024-01-01T00:00", "2024-01-01T02:00"], "2024-01-01T01:00") == 0

    def test_parse_timestamp_handles_offsets(self):
        """Timestamps with and without offsets compare on the same UTC scale.

        Implementation: Parses a naive time and the same instant with +00:00.
        Passing implies: Naive timestamps are read as UTC.
        """
        assert parse_timestamp("2024-01-01T01:00") == parse_timestamp("2024-01-01T01:00+00:00")
        assert parse_timestamp("nope") is None
        assert parse_timestamp(None) is None


class TestHourlyValueTiers:
    def test_value_at_index(self):
        assert value_at([10, 20, 30], 1) == 20

    def test_value_at_rejects_non_numbers(self):
        assert value_at([None, "20", True], 0) is None
        assert value_at([None, "20", True], 1) is None
        assert value_at([None, "20", True], 2) is None

    def test_value_at_out_of_range(self):
        assert value_at([10], 5) is None

    def test_first_numeric(self):
        assert first_numeric([None, None, 55]) == 55
        assert first_numeric([None, "x"]) is None

    def test_pick_hourly_value_prefers_index(self):
        assert pick_hourly_value([1, 2, 3], 2) == 3

    def test_pick_hourly_value_falls_back_to_first_numeric(self):
        assert pick_hourly_value([None, None, 55], 0) == 55

    def test_pick_hourly_value_empty(self):
        assert pick_hourly_value([], 0) is None
        assert pick_hourly_value(None, 0) is None


def _payload(hourly: dict | None = None, current: dict | None = None) -> ForecastPayload:
    data = {"daily": {"time": ["2024-01-01"]}}
    if hourly is not None:
        data["hourly"] = hourly
    if current is not None:
        data["current_weather"] = current
    return ForecastPayload.model_validate(data)


class TestExtractCurrent:
    def test_humidity_first_numeric_fallback(self):
        """Humidity uses the first numeric value when the aligned slot is empty.

        Implementation: Humidity series [None, None, 55] read at index 0.
        Passing implies: Stale-but-present values beat null.
        """
        payload = _payload(hourly={"time": HOURS, "relative_humidity_2m": [None, None, 55]})
        assert extract_current(payload, 0).humidity == 55

    def test_temperature_comes_from_current_weather(self):
        payload = _payload(
            hourly={"time": HOURS, "apparent_temperature": [1.0, 2.0, 3.0]},
            current={"temperature": 21.4, "windspeed": 9.0, "time": "2024-01-01T01:00"},
        )
        result = extract_current(payload, 1)
        assert result.temperature == 21.4
        assert result.apparent_temperature == 2.0

    def test_windspeed_falls_back_to_current_weather(self):
        """Windspeed uses current_weather.windspeed when the hourly series has no numbers.

        Implementation: Hourly wind is all None, current_weather has windspeed 12.
        Passing implies: The third tier (top-level scalar) is applied for wind only.
        """
        payload = _payload(
            hourly={"time": HOURS, "wind_speed_10m": [None, None, None]},
            current={"temperature": 20.0, "windspeed": 12.0, "time": "2024-01-01T01:00"},
        )
        assert extract_current(payload, 1).windspeed == 12.0

    def test_missing_hourly_degrades_to_none(self):
        """A payload without hourly data yields null hourly-derived fields.

        Implementation: Payload has daily data and current_weather only.
        Passing implies: Absent hourly is tolerated, not an error.
        """
        payload = _payload(current={"temperature": 18.0, "windspeed": 5.0, "time": "2024-01-01T01:00"})
        result = extract_current(payload, 0)
        assert result.humidity is None
        assert result.visibility is None
        assert result.apparent_temperature is None
        assert result.windspeed == 5.0
        assert result.temperature == 18.0

    def test_everything_missing(self):
        result = extract_current(_payload(), 0)
        assert result.model_dump() == {
            "temperature": None,
            "windspeed": None,
            "humidity": None,
            "visibility": None,
            "apparent_temperature": None,
        }

    def test_serializes_with_camel_case(self):
        payload = _payload(hourly={"time": HOURS, "apparent_temperature": [4.0, 5.0, 6.0]})
        dumped = extract_current(payload, 0).model_dump(by_alias=True)
        assert dumped["apparentTemperature"] == 4.0
        assert "apparent_temperature" not in dumped


class TestCurrentConditions:
    def test_aligns_then_extracts(self):
        """current_conditions aligns on current_weather.time before reading the series.

        Implementation: Current time is 02:00, visibility differs per hour.
        Passing implies: The aligner's index drives the extractor.
        """
        payload = _payload(
            hourly={"time": HOURS, "visibility": [1000, 2000, 3000]},
            current={"temperature": 10.0, "time": "2024-01-01T02:00"},
        )
        assert current_conditions(payload).visibility == 3000

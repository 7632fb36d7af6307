# ABOUTME: Temporal alignment of hourly series to "now" and extraction of current-conditions values.
# ABOUTME: Both are tiered fallback chains where each tier is a separate function tried in order.

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from city_weather.models import CurrentConditions, ForecastPayload, HourlySeries


def parse_timestamp(value: Any) -> float | None:
    """Epoch milliseconds for an ISO-8601 timestamp. Naive timestamps are read as UTC."""
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000


def _nearest(hourly_times: Sequence[str], indices: Sequence[int], current_ms: float) -> int | None:
    best_index = None
    best_delta = float("inf")
    for i in indices:
        ms = parse_timestamp(hourly_times[i])
        if ms is None:
            continue
        delta = abs(ms - current_ms)
        if delta < best_delta:
            best_delta = delta
            best_index = i
    return best_index


def exact_match(hourly_times: Sequence[str], current_time: str) -> int | None:
    try:
        return list(hourly_times).index(current_time)
    except ValueError:
        return None


def same_day_match(hourly_times: Sequence[str], current_time: str) -> int | None:
    """Closest entry on the same calendar day, or the day's first entry when times don't parse."""
    current_date = current_time.split("T")[0]
    same_day = [i for i, t in enumerate(hourly_times) if isinstance(t, str) and t.startswith(current_date)]
    if not same_day:
        return None

    current_ms = parse_timestamp(current_time)
    if current_ms is None:
        return same_day[0]
    nearest = _nearest(hourly_times, same_day, current_ms)
    return same_day[0] if nearest is None else nearest


def nearest_match(hourly_times: Sequence[str], current_time: str) -> int | None:
    current_ms = parse_timestamp(current_time)
    if current_ms is None:
        return None
    return _nearest(hourly_times, range(len(hourly_times)), current_ms)


ALIGNMENT_TIERS: tuple[Callable[[Sequence[str], str], int | None], ...] = (
    exact_match,
    same_day_match,
    nearest_match,
)


def align_index(hourly_times: Sequence[str] | None, current_time: str | None) -> int:
    """Index into `hourly_times` that best represents `current_time`. Never fails; defaults to 0."""
    if not hourly_times or not current_time:
        return 0
    for tier in ALIGNMENT_TIERS:
        index = tier(hourly_times, current_time)
        if index is not None:
            return index
    return 0


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def value_at(values: Sequence[Any], index: int) -> float | None:
    if 0 <= index < len(values) and is_number(values[index]):
        return values[index]
    return None


def first_numeric(values: Sequence[Any]) -> float | None:
    return next((v for v in values if is_number(v)), None)


def pick_hourly_value(values: Sequence[Any] | None, index: int) -> float | None:
    """Value at `index`, else the first numeric value in the series, else None."""
    if not values:
        return None
    value = value_at(values, index)
    if value is not None:
        return value
    return first_numeric(values)


def extract_current(forecast: ForecastPayload, index: int) -> CurrentConditions:
    """Project the hourly arrays down to single current values.

    Temperature always comes from `current_weather`. Windspeed prefers the hourly
    series and falls back to `current_weather.windspeed`.
    """
    hourly = forecast.hourly or HourlySeries()
    current_weather = forecast.current_weather

    windspeed = pick_hourly_value(hourly.wind_speed_10m, index)
    if windspeed is None and current_weather is not None:
        windspeed = current_weather.windspeed

    return CurrentConditions(
        temperature=current_weather.temperature if current_weather else None,
        windspeed=windspeed,
        humidity=pick_hourly_value(hourly.relative_humidity_2m, index),
        visibility=pick_hourly_value(hourly.visibility, index),
        apparent_temperature=pick_hourly_value(hourly.apparent_temperature, index),
    )


def current_conditions(forecast: ForecastPayload) -> CurrentConditions:
    """Align the hourly series to the current observation time and extract current values."""
    hourly_times = forecast.hourly.time if forecast.hourly else []
    current_time = forecast.current_weather.time if forecast.current_weather else None
    return extract_current(forecast, align_index(hourly_times, current_time))

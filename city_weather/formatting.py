# ABOUTME: Human-readable text blocks returned by the MCP tools.
# ABOUTME: Formats NWS forecast periods and alerts, and Open-Meteo compact summaries.

from typing import Any

from city_weather.current import is_number
from city_weather.models import Alert, ForecastPayload, ForecastPeriod, GeoLocation


def format_number(value: Any) -> str:
    """Render 21.0 as "21" and 21.5 as "21.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{format_number(latitude)}, {format_number(longitude)}"


def format_alert(alert: Alert) -> str:
    return "\n".join(
        [
            f"Event: {alert.event or 'Unknown'}",
            f"Area: {alert.area_desc or 'Unknown'}",
            f"Severity: {alert.severity or 'Unknown'}",
            f"Status: {alert.status or 'Unknown'}",
            f"Headline: {alert.headline or 'No headline'}",
            "---",
        ]
    )


def format_alerts(state: str, alerts: list[Alert]) -> str:
    if not alerts:
        return f"No active alerts for {state}"
    return f"Active alerts for {state}:\n\n" + "\n".join(format_alert(a) for a in alerts)


def format_period(period: ForecastPeriod) -> str:
    temperature = format_number(period.temperature) if period.temperature is not None else "Unknown"
    return "\n".join(
        [
            f"{period.name or 'Unknown'}:",
            f"Temperature: {temperature}°{period.temperature_unit or 'F'}",
            f"Wind: {period.wind_speed or 'Unknown'} {period.wind_direction or ''}".rstrip(),
            period.short_forecast or "No forecast available",
            "---",
        ]
    )


def format_nws_forecast(latitude: float, longitude: float, periods: list[ForecastPeriod]) -> str:
    body = "\n".join(format_period(p) for p in periods)
    return f"Forecast for {format_coordinates(latitude, longitude)}:\n\n{body}"


def _degrees(value: Any) -> str:
    return f"{format_number(value)}°C" if is_number(value) else "Unknown"


def format_open_meteo_summary(latitude: float, longitude: float, payload: ForecastPayload) -> str:
    """Compact current + daily high/low summary from Open-Meteo."""
    coordinates = format_coordinates(latitude, longitude)
    if not payload.is_usable:
        return f"No forecast periods available for {coordinates}"

    lines = []
    current = payload.current_weather
    if current is not None:
        temperature = format_number(current.temperature) if current.temperature is not None else "Unknown"
        wind = format_number(current.windspeed) if current.windspeed is not None else "Unknown"
        lines.append(f"Current: {temperature}°C, Wind {wind} km/h")

    daily = payload.daily
    for i, day in enumerate(daily.time):
        high = daily.temperature_2m_max[i] if i < len(daily.temperature_2m_max) else None
        low = daily.temperature_2m_min[i] if i < len(daily.temperature_2m_min) else None
        lines.append(f"{day}: High {_degrees(high)}, Low {_degrees(low)}")

    return f"Forecast for {coordinates} (Open-Meteo):\n\n" + "\n".join(lines)


def format_location_header(location: GeoLocation) -> str:
    return f"Location: {location.describe()} ({format_coordinates(location.latitude, location.longitude)})"

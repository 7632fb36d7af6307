# ABOUTME: Service layer for Open-Meteo, NWS and REST Countries API calls.
# ABOUTME: Every fetch goes through fetch_json, which converts upstream failures into None plus a log line.

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from city_weather.models import Alert, ForecastPayload, ForecastPeriod, GeoLocation, PointReference

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
NWS_API_BASE = "https://api.weather.gov"
COUNTRIES_API_BASE = "https://restcountries.com/v3.1"

COUNTRY_FIELDS = "name,cca2,translations,altSpellings"

DAILY_PARAMS = "temperature_2m_max,temperature_2m_min,precipitation_probability_max,weathercode"
HOURLY_PARAMS = "relative_humidity_2m,visibility,apparent_temperature,wind_speed_10m"
SUMMARY_DAILY_PARAMS = "temperature_2m_max,temperature_2m_min"

FORECAST_DAYS = 8

JSON_HEADERS = {"Accept": "application/json"}
NWS_HEADERS = {"Accept": "application/geo+json"}


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict | None = None,
    headers: dict | None = None,
) -> Any | None:
    """GET a JSON document, returning None on network errors, non-2xx statuses or invalid JSON."""
    try:
        resp = await client.get(url, params=params, headers=headers or JSON_HEADERS)
        resp.raise_for_status()
        return resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Request to %s failed: %s", url, e)
        return None


async def geocode_candidates(client: httpx.AsyncClient, city_name: str, language: str, count: int) -> list[GeoLocation]:
    """Ranked geocoding candidates for a city name; empty when nothing matched or the fetch failed."""
    data = await fetch_json(
        client,
        GEOCODING_URL,
        params={"name": city_name, "count": count, "language": language, "format": "json"},
    )
    if not isinstance(data, dict):
        return []

    candidates = []
    for raw in data.get("results") or []:
        try:
            candidates.append(GeoLocation.model_validate(raw))
        except ValidationError:
            logger.warning("Skipping malformed geocoding result: %r", raw)
    return candidates


async def get_forecast(client: httpx.AsyncClient, latitude: float, longitude: float) -> ForecastPayload | None:
    """Fetch current weather, hourly conditions and the daily outlook from Open-Meteo."""
    data = await fetch_json(
        client,
        FORECAST_URL,
        params={
            "latitude": latitude,
            "longitude": longitude,
            "current_weather": "true",
            "hourly": HOURLY_PARAMS,
            "daily": DAILY_PARAMS,
            "forecast_days": FORECAST_DAYS,
            "timezone": "auto",
        },
    )
    return _parse_forecast(data)


async def get_forecast_summary(client: httpx.AsyncClient, latitude: float, longitude: float) -> ForecastPayload | None:
    """Fetch Open-Meteo's compact summary: current weather plus daily highs and lows."""
    data = await fetch_json(
        client,
        FORECAST_URL,
        params={
            "latitude": latitude,
            "longitude": longitude,
            "current_weather": "true",
            "daily": SUMMARY_DAILY_PARAMS,
            "timezone": "auto",
        },
    )
    return _parse_forecast(data)


async def get_point(client: httpx.AsyncClient, latitude: float, longitude: float) -> PointReference | None:
    """Resolve coordinates to an NWS point reference. None outside NWS coverage."""
    url = f"{NWS_API_BASE}/points/{latitude:.4f},{longitude:.4f}"
    data = await fetch_json(client, url, headers=NWS_HEADERS)
    if not isinstance(data, dict):
        return None
    return PointReference.model_validate(data.get("properties") or {})


async def get_nws_forecast(client: httpx.AsyncClient, forecast_url: str) -> list[ForecastPeriod] | None:
    """Fetch the periods of an NWS gridded forecast. None when the fetch failed."""
    data = await fetch_json(client, forecast_url, headers=NWS_HEADERS)
    if not isinstance(data, dict):
        return None
    periods = (data.get("properties") or {}).get("periods") or []
    return _validate_each(ForecastPeriod, periods, "forecast period")


async def get_alerts(client: httpx.AsyncClient, state: str) -> list[Alert] | None:
    """Fetch NWS alerts for a two-letter state code. None when the fetch failed."""
    data = await fetch_json(client, f"{NWS_API_BASE}/alerts", params={"area": state}, headers=NWS_HEADERS)
    if not isinstance(data, dict):
        return None
    features = data.get("features") or []
    return _validate_each(Alert, [f.get("properties") or {} for f in features if isinstance(f, dict)], "alert")


async def get_all_countries(client: httpx.AsyncClient) -> list[dict] | None:
    """Fetch the full REST Countries directory as raw items."""
    data = await fetch_json(client, f"{COUNTRIES_API_BASE}/all", params={"fields": COUNTRY_FIELDS})
    if not isinstance(data, list):
        return None
    return data


async def find_countries_by_translation(client: httpx.AsyncClient, query: str) -> list[dict] | None:
    """Search REST Countries by any translated name. A 404 means zero matches, not a failure."""
    url = f"{COUNTRIES_API_BASE}/translation/{quote(query, safe='')}"
    try:
        resp = await client.get(url, params={"fields": COUNTRY_FIELDS}, headers=JSON_HEADERS)
        if resp.status_code == 404:
            return []
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Country translation search for %r failed: %s", query, e)
        return None
    return data if isinstance(data, list) else None


def _parse_forecast(data: Any) -> ForecastPayload | None:
    if not isinstance(data, dict):
        return None
    try:
        return ForecastPayload.model_validate(data)
    except ValueError as e:
        logger.warning("Unexpected forecast payload: %s", e)
        return None


def _validate_each(model: type[BaseModel], items: list, kind: str) -> list:
    """Validate upstream items one by one, skipping (and logging) any that do not fit `model`."""
    parsed = []
    for raw in items:
        if not isinstance(raw, dict):
            continue
        try:
            parsed.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping malformed %s %r: %s", kind, raw, e)
    return parsed

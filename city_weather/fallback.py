# ABOUTME: Provider fallback for tool-server forecasts: NWS first, Open-Meteo when NWS has no point.
# ABOUTME: Runs as an explicit state machine and always ends in a text block, never an exception.

import logging
from dataclasses import dataclass
from enum import Enum

import httpx

from city_weather.formatting import format_coordinates, format_nws_forecast, format_open_meteo_summary
from city_weather.models import PointReference
from city_weather.weather_service import get_forecast_summary, get_nws_forecast, get_point

logger = logging.getLogger(__name__)


class LookupState(str, Enum):
    PRIMARY_LOOKUP = "primary_lookup"
    PRIMARY_FORECAST_FETCH = "primary_forecast_fetch"
    SECONDARY_LOOKUP = "secondary_lookup"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Provider(str, Enum):
    NWS = "nws"
    OPEN_METEO = "open-meteo"


@dataclass(frozen=True)
class FallbackOutcome:
    """Terminal state of a lookup and the text to hand back to the tool caller."""

    state: LookupState
    text: str
    provider: Provider | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is LookupState.SUCCEEDED


def valid_coordinates(latitude: float, longitude: float) -> bool:
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


async def forecast_for_point(client: httpx.AsyncClient, latitude: float, longitude: float) -> FallbackOutcome:
    """Forecast text for a coordinate pair.

    Only a failed point lookup or a point without a forecast URL moves on to
    Open-Meteo. A failure fetching the NWS forecast itself is terminal.
    """
    if not valid_coordinates(latitude, longitude):
        return FallbackOutcome(
            LookupState.FAILED,
            f"Invalid coordinates: {format_coordinates(latitude, longitude)}. "
            "Latitude must be within [-90, 90] and longitude within [-180, 180].",
        )

    state = LookupState.PRIMARY_LOOKUP
    point: PointReference | None = None
    secondary_failure = ""

    while True:
        if state is LookupState.PRIMARY_LOOKUP:
            point = await get_point(client, latitude, longitude)
            if point is None:
                logger.info("No NWS point for %s, falling back to Open-Meteo", format_coordinates(latitude, longitude))
                secondary_failure = f"Failed to retrieve forecast data for coordinates: {format_coordinates(latitude, longitude)}"
                state = LookupState.SECONDARY_LOOKUP
            else:
                state = LookupState.PRIMARY_FORECAST_FETCH

        elif state is LookupState.PRIMARY_FORECAST_FETCH:
            if not point.forecast_url:
                logger.info("NWS point has no forecast URL, falling back to Open-Meteo")
                secondary_failure = "Failed to get forecast data from grid point response and Open-Meteo"
                state = LookupState.SECONDARY_LOOKUP
                continue

            periods = await get_nws_forecast(client, point.forecast_url)
            if periods is None:
                return FallbackOutcome(LookupState.FAILED, "Failed to retrieve forecast data", Provider.NWS)
            if not periods:
                return FallbackOutcome(LookupState.FAILED, "No forecast periods available", Provider.NWS)
            return FallbackOutcome(
                LookupState.SUCCEEDED, format_nws_forecast(latitude, longitude, periods), Provider.NWS
            )

        elif state is LookupState.SECONDARY_LOOKUP:
            payload = await get_forecast_summary(client, latitude, longitude)
            if payload is None:
                return FallbackOutcome(LookupState.FAILED, secondary_failure, Provider.OPEN_METEO)
            text = format_open_meteo_summary(latitude, longitude, payload)
            terminal = LookupState.SUCCEEDED if payload.is_usable else LookupState.FAILED
            return FallbackOutcome(terminal, text, Provider.OPEN_METEO)

# ABOUTME: MCP tool server (stdio) exposing alerts and forecasts to an LLM agent.
# ABOUTME: Tools return preformatted text blocks only; failures become sentences, never errors.

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from city_weather.config import Settings, configure_logging
from city_weather.deps import WeatherDeps, create_http_client
from city_weather.fallback import forecast_for_point
from city_weather.forecast import city_forecast_text
from city_weather.formatting import format_alerts
from city_weather.weather_service import get_alerts

logger = logging.getLogger(__name__)

mcp = FastMCP("weather")

_settings = Settings.from_env()
_deps = WeatherDeps(http_client=create_http_client(_settings), settings=_settings)


async def alerts_text(deps: WeatherDeps, state: str) -> str:
    state_code = state.strip().upper()
    if len(state_code) != 2 or not state_code.isalpha():
        return f"Invalid state code: {state!r}. Use a two-letter code such as CA or NY."

    alerts = await get_alerts(deps.http_client, state_code)
    if alerts is None:
        return "Failed to retrieve alerts data"
    return format_alerts(state_code, alerts)


@mcp.tool(name="get-alerts", title="Get Weather Alerts")
async def get_alerts_tool(
    state: Annotated[str, Field(min_length=2, max_length=2, description="Two-letter state code (e.g. CA, NY)")],
) -> str:
    """Get weather alerts for a state."""
    return await alerts_text(_deps, state)


@mcp.tool(name="get-forecast", title="Get Weather Forecast")
async def get_forecast_tool(
    latitude: Annotated[float, Field(ge=-90, le=90, description="Latitude of the location")],
    longitude: Annotated[float, Field(ge=-180, le=180, description="Longitude of the location")],
) -> str:
    """Get weather forecast for a location."""
    outcome = await forecast_for_point(_deps.http_client, latitude, longitude)
    return outcome.text


@mcp.tool(name="get-city-forecast", title="Get City Weather Forecast")
async def get_city_forecast_tool(
    city: Annotated[str, Field(description="City name (e.g. Tel Aviv, Springfield)")],
    country: Annotated[str, Field(description="ISO country code or country name (e.g. IL, United States)")],
    lang: Annotated[str, Field(description="Language for place-name lookup")] = "en",
) -> str:
    """Get weather forecast for a city in a given country."""
    return await city_forecast_text(_deps, city, country, lang)


def main() -> None:
    configure_logging(_settings.log_level)
    logger.info("Weather MCP server running on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

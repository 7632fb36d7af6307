# ABOUTME: Response assembly: composes the resolver, the current-conditions extractor and the
# ABOUTME: country directory into the plain dicts served by the web layer and the tool server.

from city_weather.countries import list_countries, search_countries
from city_weather.current import current_conditions
from city_weather.deps import WeatherDeps
from city_weather.errors import CountriesUnavailable, ForecastUnavailable, InvalidInput, WeatherError
from city_weather.fallback import forecast_for_point
from city_weather.formatting import format_location_header
from city_weather.locations import resolve_location, search_cities
from city_weather.weather_service import get_forecast


def _require(message: str, *values: str) -> None:
    if not all(v and v.strip() for v in values):
        raise InvalidInput(message)


async def locate(deps: WeatherDeps, city: str, country: str, lang: str = "en") -> dict:
    """Resolve a city + country pair to a single location."""
    _require("Please provide both city and country.", city, country)
    location = await resolve_location(
        deps.http_client, city, country, lang, strict=deps.settings.strict_country
    )
    return {"location": location.to_public()}


async def city_forecast(deps: WeatherDeps, city: str, country: str, lang: str = "en") -> dict:
    """Location, current conditions and the raw hourly/daily series for a city."""
    _require("Please provide both city and country.", city, country)
    location = await resolve_location(
        deps.http_client, city, country, lang, strict=deps.settings.strict_country
    )

    forecast = await get_forecast(deps.http_client, location.latitude, location.longitude)
    if forecast is None or not forecast.is_usable:
        raise ForecastUnavailable()

    return {
        "location": location.to_public(),
        "timezone": forecast.timezone,
        "current": current_conditions(forecast).model_dump(by_alias=True),
        "current_weather": _raw(forecast.current_weather),
        "hourly": _raw(forecast.hourly),
        "daily": _raw(forecast.daily),
    }


async def countries(deps: WeatherDeps, lang: str = "en", refresh: bool = False) -> dict:
    entries = await list_countries(deps.http_client, deps.country_cache, lang, refresh=refresh)
    if not entries:
        raise CountriesUnavailable()
    return {"countries": [e.to_public() for e in entries]}


async def country_search(deps: WeatherDeps, query: str, lang: str = "en") -> dict:
    _require("Please provide query.", query)
    entries = await search_countries(deps.http_client, lang, query)
    return {"countries": [e.to_public() for e in entries]}


async def cities(deps: WeatherDeps, country: str, query: str, lang: str = "en") -> dict:
    _require("Please provide country and query.", country, query)
    entries = await search_cities(deps.http_client, country, query, lang)
    return {"cities": [e.model_dump() for e in entries]}


async def city_forecast_text(deps: WeatherDeps, city: str, country: str, lang: str = "en") -> str:
    """Tool-server variant: resolve the city, then run the provider fallback chain."""
    try:
        _require("Please provide both city and country.", city, country)
        location = await resolve_location(
            deps.http_client, city, country, lang, strict=deps.settings.strict_country
        )
    except WeatherError as e:
        return f"{e.message} ({city}, {country})"

    outcome = await forecast_for_point(deps.http_client, location.latitude, location.longitude)
    return f"{format_location_header(location)}\n\n{outcome.text}"


def _raw(model) -> dict | None:
    # Echo upstream blocks as received, including fields this app does not model.
    return model.model_dump(exclude_unset=True) if model is not None else None

# ABOUTME: ASGI web entry point exposing the forecast engine as JSON endpoints.
# ABOUTME: Builds a Starlette app around injected WeatherDeps and maps WeatherError to {error} responses.

import contextlib
import logging

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from city_weather import forecast
from city_weather.config import Settings, configure_logging
from city_weather.deps import WeatherDeps, create_http_client
from city_weather.errors import WeatherError

logger = logging.getLogger(__name__)


def _param(request: Request, name: str, default: str = "") -> str:
    return request.query_params.get(name, default).strip()


def _deps(request: Request) -> WeatherDeps:
    return request.app.state.deps


async def location_endpoint(request: Request) -> JSONResponse:
    result = await forecast.locate(
        _deps(request), _param(request, "city"), _param(request, "country"), _param(request, "lang", "en")
    )
    return JSONResponse(result)


async def forecast_endpoint(request: Request) -> JSONResponse:
    result = await forecast.city_forecast(
        _deps(request), _param(request, "city"), _param(request, "country"), _param(request, "lang", "en")
    )
    return JSONResponse(result)


async def countries_endpoint(request: Request) -> JSONResponse:
    refresh = _param(request, "refresh") == "1"
    result = await forecast.countries(_deps(request), _param(request, "lang", "en"), refresh=refresh)
    return JSONResponse(result)


async def country_search_endpoint(request: Request) -> JSONResponse:
    result = await forecast.country_search(_deps(request), _param(request, "query"), _param(request, "lang", "en"))
    return JSONResponse(result)


async def cities_endpoint(request: Request) -> JSONResponse:
    result = await forecast.cities(
        _deps(request), _param(request, "country"), _param(request, "query"), _param(request, "lang", "en")
    )
    return JSONResponse(result)


async def health_endpoint(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def weather_error_handler(request: Request, exc: WeatherError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s raised an unexpected error", request.method, request.url.path)
    return JSONResponse({"error": "Unexpected error."}, status_code=500)


routes = [
    Route("/api/location", location_endpoint, methods=["GET"]),
    Route("/api/forecast", forecast_endpoint, methods=["GET"]),
    Route("/api/countries", countries_endpoint, methods=["GET"]),
    Route("/api/countries/search", country_search_endpoint, methods=["GET"]),
    Route("/api/cities", cities_endpoint, methods=["GET"]),
    Route("/healthz", health_endpoint, methods=["GET"]),
]


def create_app(deps: WeatherDeps | None = None) -> Starlette:
    """Build the Starlette app. The HTTP client is closed when the app shuts down."""
    if deps is None:
        settings = Settings.from_env()
        deps = WeatherDeps(http_client=create_http_client(settings), settings=settings)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        await deps.http_client.aclose()

    app = Starlette(
        routes=routes,
        exception_handlers={WeatherError: weather_error_handler, Exception: unexpected_error_handler},
        lifespan=lifespan,
    )
    app.state.deps = deps
    return app


app = create_app()


def main() -> None:
    settings: Settings = app.state.deps.settings
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

# ABOUTME: Dependency container for request handlers and tools using Pydantic BaseModel.
# ABOUTME: Holds the shared httpx.AsyncClient, the country cache and the runtime settings.

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic_ai.retries import AsyncTenacityTransport, RetryConfig, wait_retry_after
from tenacity import retry_if_exception, stop_after_attempt

from city_weather.config import Settings
from city_weather.countries import CountryCache

_TRANSIENT_STATUS = {429, 500, 502, 503, 504}


class WeatherDeps(BaseModel):
    """Dependencies injected into the HTTP handlers and MCP tools."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_client: httpx.AsyncClient
    country_cache: CountryCache = Field(default_factory=CountryCache)
    settings: Settings = Field(default_factory=Settings)


def is_transient_status(status_code: int) -> bool:
    return status_code in _TRANSIENT_STATUS


def is_transient_error(exc: BaseException) -> bool:
    """Connection errors, read timeouts and 429/5xx responses are worth another attempt."""
    if isinstance(exc, httpx.HTTPStatusError):
        return is_transient_status(exc.response.status_code)
    return isinstance(exc, (httpx.ConnectError, httpx.ReadTimeout))


def _raise_for_transient_status(response: httpx.Response) -> None:
    if is_transient_status(response.status_code):
        response.raise_for_status()


def create_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Create an httpx client with tenacity retry on transient HTTP errors.

    Retries connection errors, timeouts, and 429/5xx responses with exponential backoff.
    Other statuses (a 404 from a provider that has no data for a point) pass straight
    through so the caller can fall back without waiting.
    """
    settings = settings or Settings()
    transport = AsyncTenacityTransport(
        RetryConfig(
            retry=retry_if_exception(is_transient_error),
            wait=wait_retry_after(max_wait=30),
            stop=stop_after_attempt(max(settings.http_retries, 1)),
            reraise=True,
        ),
        validate_response=_raise_for_transient_status,
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=settings.http_timeout,
        headers={"User-Agent": settings.user_agent},
    )

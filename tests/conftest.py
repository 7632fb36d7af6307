# ABOUTME: Shared test fixtures for the city weather test suite.
# ABOUTME: Provides a mock httpx client that answers by URL fragment, and a WeatherDeps factory around it.

from unittest.mock import AsyncMock

import httpx
import pytest

from city_weather.countries import CountryCache
from city_weather.deps import WeatherDeps


def json_response(json_data, status_code: int = 200, url: str = "https://test") -> httpx.Response:
    return httpx.Response(status_code=status_code, json=json_data, request=httpx.Request("GET", url))


@pytest.fixture
def routed_client():
    """Factory for a mock httpx.AsyncClient routing GET calls by URL fragment.

    Each route maps a URL fragment to JSON data (served with 200), a `(status, json)`
    tuple, or an exception instance to raise. Unrouted URLs raise ConnectError.
    """

    def factory(routes: dict) -> AsyncMock:
        mock = AsyncMock(spec=httpx.AsyncClient)

        async def get(url, params=None, headers=None):
            for fragment, reply in routes.items():
                if fragment not in url:
                    continue
                if isinstance(reply, Exception):
                    raise reply
                if isinstance(reply, tuple):
                    status, body = reply
                    return json_response(body, status, url)
                return json_response(reply, 200, url)
            raise httpx.ConnectError("no route", request=httpx.Request("GET", url))

        mock.get.side_effect = get
        return mock

    return factory


@pytest.fixture
def make_deps(routed_client):
    """Build WeatherDeps around a routed mock client and a fresh country cache."""

    def factory(routes: dict, **kwargs) -> WeatherDeps:
        return WeatherDeps(http_client=routed_client(routes), country_cache=CountryCache(), **kwargs)

    return factory

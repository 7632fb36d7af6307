# ABOUTME: Location Resolver: picks one geocoded candidate for a city + country pair.
# ABOUTME: Also builds the de-duplicated city suggestions used to populate a country's city dropdown.

import httpx

from city_weather.errors import NoCountryMatch, NoLocationsFound
from city_weather.models import CityEntry, GeoLocation
from city_weather.weather_service import geocode_candidates

FORECAST_CANDIDATES = 10
CITY_LIST_CANDIDATES = 20


def _matches_country(candidate: GeoLocation, normalized: str, is_code: bool) -> bool:
    if is_code and candidate.country_code:
        return candidate.country_code.lower() == normalized
    return (candidate.country or "").lower() == normalized


def country_matches(candidates: list[GeoLocation], country: str) -> list[GeoLocation]:
    """Candidates belonging to `country`, which is an ISO alpha-2 code or a country name."""
    normalized = country.strip().lower()
    is_code = len(normalized) == 2
    return [c for c in candidates if _matches_country(c, normalized, is_code)]


def pick_location(candidates: list[GeoLocation], country: str, strict: bool = False) -> GeoLocation | None:
    """Pick the best candidate for `country`.

    The first country match in provider order wins. When nothing matches, the first
    candidate overall is returned unless `strict` is set, in which case the result is None.
    Returns None for an empty candidate list.
    """
    matches = country_matches(candidates, country)
    if matches:
        return matches[0]
    if strict or not candidates:
        return None
    return candidates[0]


async def resolve_location(
    client: httpx.AsyncClient,
    city: str,
    country: str,
    lang: str,
    count: int = FORECAST_CANDIDATES,
    strict: bool = False,
) -> GeoLocation:
    """Geocode `city` and disambiguate by `country`.

    Raises NoLocationsFound when the geocoder has no candidates and NoCountryMatch
    when none fits the country (only reachable with `strict`).
    """
    candidates = await geocode_candidates(client, city, lang, count)
    if not candidates:
        raise NoLocationsFound()

    location = pick_location(candidates, country, strict=strict)
    if location is None:
        raise NoCountryMatch()
    return location


async def search_cities(client: httpx.AsyncClient, country: str, query: str, lang: str) -> list[CityEntry]:
    """City suggestions for `query` inside the country with ISO code `country`."""
    candidates = await geocode_candidates(client, query, lang, CITY_LIST_CANDIDATES)
    country_code = country.upper()

    unique: dict[tuple[str, str], CityEntry] = {}
    for c in candidates:
        if not c.country_code or c.country_code.upper() != country_code:
            continue
        key = (c.name.lower(), c.admin1 or "")
        if key not in unique:
            unique[key] = CityEntry(name=c.name, admin1=c.admin1)
    return list(unique.values())

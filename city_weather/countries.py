# ABOUTME: Country Directory: cached per-language country list and live translated-name search.
# ABOUTME: Chooses a display name per language and sorts with Unicode collation via pyuca.

import logging
from functools import lru_cache

import httpx
from pydantic import ValidationError
from pyuca import Collator

from city_weather.models import CountryEntry
from city_weather.weather_service import find_countries_by_translation, get_all_countries

logger = logging.getLogger(__name__)

HEBREW = "he"


class CountryCache:
    """Country lists keyed by lowercase language tag.

    Entries live until a caller asks for a refresh. Concurrent fills of the same
    language may both write; the last write wins.
    """

    def __init__(self):
        self._entries: dict[str, list[CountryEntry]] = {}

    def get(self, lang: str) -> list[CountryEntry] | None:
        return self._entries.get(lang.lower())

    def set(self, lang: str, countries: list[CountryEntry]) -> None:
        self._entries[lang.lower()] = countries

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, lang: str) -> bool:
        return lang.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def collation_key(text: str):
    return _collator().sort_key(text)


def is_hebrew(lang: str) -> bool:
    return lang.lower().split("-")[0] == HEBREW


def hebrew_name(item: dict) -> str | None:
    """Translated Hebrew common name, else the native Hebrew common name."""
    translated = ((item.get("translations") or {}).get("heb") or {}).get("common")
    native = (((item.get("name") or {}).get("nativeName") or {}).get("heb") or {}).get("common")
    return translated or native or None


def to_country_entry(item: dict, lang: str) -> CountryEntry | None:
    """Map a REST Countries item to a CountryEntry, or None if it lacks a code or common name."""
    if not isinstance(item, dict):
        return None
    code = item.get("cca2")
    english = (item.get("name") or {}).get("common")
    if not isinstance(code, str) or not code or not english:
        return None

    hebrew = hebrew_name(item)
    name = (hebrew or english) if is_hebrew(lang) else english
    alt = item.get("altSpellings")
    if isinstance(alt, list):
        alt = [s for s in alt if isinstance(s, str)]
    try:
        return CountryEntry(
            code=code.upper(),
            name=name,
            english_name=english,
            hebrew_name=hebrew,
            alt_spellings=alt,
        )
    except ValidationError as e:
        logger.warning("Skipping malformed country %r: %s", code, e)
        return None


def build_country_list(items: list[dict], lang: str) -> list[CountryEntry]:
    """Filter, map and collation-sort raw directory items for a language."""
    entries = [e for e in (to_country_entry(item, lang) for item in items) if e is not None]
    return sorted(entries, key=lambda e: collation_key(e.name))


async def list_countries(
    client: httpx.AsyncClient,
    cache: CountryCache,
    lang: str,
    refresh: bool = False,
) -> list[CountryEntry]:
    """Country list for `lang`, served from `cache` unless `refresh` is set.

    Returns an empty list when the directory could not be fetched.
    """
    if not refresh:
        cached = cache.get(lang)
        if cached is not None:
            return cached

    items = await get_all_countries(client)
    if items is None:
        return []

    countries = build_country_list(items, lang)
    if countries:
        cache.set(lang, countries)
    else:
        logger.warning("Country directory returned no usable entries for %r", lang)
    return countries


async def search_countries(client: httpx.AsyncClient, lang: str, query: str) -> list[CountryEntry]:
    """Live search of the directory by translated name; bypasses the cache."""
    items = await find_countries_by_translation(client, query)
    if not items:
        return []
    return build_country_list(items, lang)

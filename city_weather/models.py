# ABOUTME: Pydantic BaseModels for geocoding, forecast, country directory and NWS data.
# ABOUTME: Defines structured types for upstream API data and the values returned to callers.

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class GeoLocation(BaseModel):
    """Geocoded candidate from the Open-Meteo geocoding API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    latitude: float
    longitude: float
    country: str | None = None
    country_code: str | None = None
    admin1: str | None = None

    def to_public(self) -> dict:
        """Wire shape for the location block of HTTP responses."""
        return {
            "name": self.name,
            "admin1": self.admin1,
            "country": self.country,
            "country_code": self.country_code,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }

    def describe(self) -> str:
        return ", ".join(part for part in (self.name, self.admin1, self.country) if part)


class CurrentWeather(BaseModel):
    """The `current_weather` block of an Open-Meteo forecast."""

    model_config = ConfigDict(extra="allow")

    temperature: float | None = None
    windspeed: float | None = None
    time: str | None = None


class HourlySeries(BaseModel):
    """Column-oriented hourly data. Items are kept as returned, without coercion."""

    model_config = ConfigDict(extra="allow")

    time: list[Any] = []
    relative_humidity_2m: list[Any] = []
    visibility: list[Any] = []
    apparent_temperature: list[Any] = []
    wind_speed_10m: list[Any] = []


class DailySeries(BaseModel):
    """Column-oriented daily data. Every array is parallel to `time`."""

    model_config = ConfigDict(extra="allow")

    time: list[Any] = []
    temperature_2m_max: list[Any] = []
    temperature_2m_min: list[Any] = []
    precipitation_probability_max: list[Any] = []
    weathercode: list[Any] = []


class ForecastPayload(BaseModel):
    """Parsed response from the Open-Meteo forecast endpoint."""

    model_config = ConfigDict(extra="allow")

    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    current_weather: CurrentWeather | None = None
    hourly: HourlySeries | None = None
    daily: DailySeries | None = None

    @property
    def is_usable(self) -> bool:
        return self.daily is not None and len(self.daily.time) > 0


class CurrentConditions(BaseModel):
    """Single "now" values derived from a forecast payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    temperature: float | None = None
    windspeed: float | None = None
    humidity: float | None = None
    visibility: float | None = None
    apparent_temperature: float | None = None


class CountryEntry(BaseModel):
    """One country in the directory, with the display name chosen for a language."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    code: str
    name: str
    english_name: str
    hebrew_name: str | None = None
    alt_spellings: list[str] | None = None

    def to_public(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class CityEntry(BaseModel):
    """City suggestion for a country dropdown."""

    name: str
    admin1: str | None = None


class PointReference(BaseModel):
    """NWS point metadata linking coordinates to a gridded forecast resource."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    forecast_url: str | None = Field(default=None, alias="forecast")


class ForecastPeriod(BaseModel):
    """One period ("Tonight", "Tuesday", ...) of an NWS forecast."""

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    temperature: float | None = None
    temperature_unit: str | None = None
    wind_speed: str | None = None
    wind_direction: str | None = None
    short_forecast: str | None = None

    @field_validator("temperature", mode="before")
    @classmethod
    def unwrap_quantitative_value(cls, v: Any) -> Any:
        # NWS may send {"unitCode": "wmoUnit:degF", "value": 50} instead of a bare number
        if isinstance(v, dict):
            return v.get("value")
        return v


class Alert(BaseModel):
    """Properties of one active NWS alert feature."""

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    event: str | None = None
    area_desc: str | None = None
    severity: str | None = None
    status: str | None = None
    headline: str | None = None

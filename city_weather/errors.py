# ABOUTME: Exception taxonomy for the forecast resolution engine.
# ABOUTME: Each error carries a user-facing message and the HTTP status class the web layer maps it to.


class WeatherError(Exception):
    """Base class for failures surfaced to callers as `{"error": message}`."""

    status_code = 500
    default_message = "Unexpected error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(WeatherError):
    """A required field is missing or empty."""

    status_code = 400
    default_message = "Invalid request."


class NotFound(WeatherError):
    status_code = 404
    default_message = "Not found."


class NoLocationsFound(NotFound):
    """The geocoder returned zero candidates for the city."""

    default_message = "No locations found for that city."


class NoCountryMatch(NotFound):
    """Candidates exist but none belongs to the requested country (strict mode only)."""

    default_message = "No matching location for that country."


class UpstreamUnavailable(WeatherError):
    """A provider fetch failed or returned no usable data."""

    status_code = 502
    default_message = "Upstream service unavailable."


class ForecastUnavailable(UpstreamUnavailable):
    default_message = "Forecast data not available for this location."


class CountriesUnavailable(UpstreamUnavailable):
    default_message = "Unable to load countries list."

# ABOUTME: Runtime settings loaded from the environment (and a .env file via python-dotenv).
# ABOUTME: Also configures stdlib logging for the web and tool-server entry points.

import logging
import os
import sys

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Process-wide settings. Every field can be overridden with a WEATHER_* variable."""

    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    http_timeout: float = 10.0
    http_retries: int = 3
    user_agent: str = "weather-app/1.0"
    strict_country: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        values: dict = {}
        if "WEATHER_HOST" in env:
            values["host"] = env["WEATHER_HOST"]
        port = env.get("WEATHER_PORT") or env.get("PORT")
        if port:
            values["port"] = port
        if "WEATHER_LOG_LEVEL" in env:
            values["log_level"] = env["WEATHER_LOG_LEVEL"].upper()
        if "WEATHER_HTTP_TIMEOUT" in env:
            values["http_timeout"] = env["WEATHER_HTTP_TIMEOUT"]
        if "WEATHER_HTTP_RETRIES" in env:
            values["http_retries"] = env["WEATHER_HTTP_RETRIES"]
        if "WEATHER_USER_AGENT" in env:
            values["user_agent"] = env["WEATHER_USER_AGENT"]
        if "WEATHER_STRICT_COUNTRY" in env:
            values["strict_country"] = env["WEATHER_STRICT_COUNTRY"].strip().lower() in _TRUE_VALUES
        return cls(**values)


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout is reserved for the MCP stdio transport."""
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

"""Custom exception hierarchy for the weather client."""
from __future__ import annotations

from typing import Any


class WeatherClientError(RuntimeError):
    """Base error for weather client failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class InvalidURLError(WeatherClientError):
    """Raised when base URL, path and query cannot be assembled into a URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"{url} is invalid url.", details=url)
        self.url = url


class BadRequestError(WeatherClientError):
    """Raised when the API answers outside 2xx or with an unexpected top-level payload."""


class EncodingError(WeatherClientError):
    """Raised when a request payload cannot be serialized."""


class DecodingError(WeatherClientError):
    """Raised when a response body does not match the expected shape."""


class ConfigurationError(WeatherClientError):
    """Base error for configuration lookups."""

    def __init__(self, message: str, *, key: str) -> None:
        super().__init__(message, details=key)
        self.key = key


class MissingKeyError(ConfigurationError):
    """Raised when a configuration key is not present."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Configuration key {key!r} is missing.", key=key)


class InvalidValueError(ConfigurationError):
    """Raised when a configuration value cannot be read as a string."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Configuration key {key!r} has an invalid value.", key=key)


class SettingsFileError(WeatherClientError):
    """Raised when a settings file cannot be read as a JSON object."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Settings file {path} could not be loaded: {reason}", details=reason)
        self.path = path

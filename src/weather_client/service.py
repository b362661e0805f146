"""Weather lookups exposed to application code."""

from __future__ import annotations

from typing import Protocol

from .api import weather_endpoint
from .client import APIClient
from .config import Configuration
from .models import WeatherModel


class NetworkService(Protocol):
    """Capability handed to presentation code."""

    async def fetch_weather(self, query: str) -> WeatherModel:
        ...


class WeatherService:
    """`NetworkService` backed by an `APIClient`."""

    def __init__(self, client: APIClient, configuration: Configuration) -> None:
        self._client = client
        self._configuration = configuration

    async def fetch_weather(self, query: str) -> WeatherModel:
        endpoint = weather_endpoint(query, self._configuration)
        return await self._client.fetch_model(endpoint, WeatherModel)


__all__ = ["NetworkService", "WeatherService"]

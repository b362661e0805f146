"""Typed models for weather API responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

SMALL_ICON_SIZE = "64x64"
LARGE_ICON_SIZE = "128x128"


def format_reading(value: float) -> str:
    """Render a reading with one decimal place."""

    return f"{value:.1f}"


class WeatherCondition(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    icon_url: str = Field(alias="icon")

    @property
    def large_icon_url(self) -> str:
        """Absolute URL of the 128x128 variant of the condition icon.

        The API returns protocol-relative icon paths (``//cdn...``).
        """

        larger = self.icon_url.replace(SMALL_ICON_SIZE, LARGE_ICON_SIZE)
        if larger.startswith("//"):
            return f"https:{larger}"
        return larger


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class CurrentWeather(BaseModel):
    model_config = ConfigDict(frozen=True)

    temp_c: float
    condition: WeatherCondition
    humidity: int
    feelslike_c: float
    uv: float


class WeatherModel(BaseModel):
    """Current conditions for one location."""

    model_config = ConfigDict(frozen=True)

    location: Location
    current: CurrentWeather


__all__ = [
    "CurrentWeather",
    "Location",
    "WeatherCondition",
    "WeatherModel",
    "format_reading",
]

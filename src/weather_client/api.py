"""Concrete endpoints of the weather API."""

from __future__ import annotations

import logging

from .config import API_KEY_KEY, BASE_URL_KEY, Configuration
from .descriptor import QueryParameters
from .endpoint import Endpoint, HTTPMethod
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CURRENT_WEATHER_PATH = "/v1/current.json"
JSON_HEADERS = {"Content-Type": "application/json"}


def weather_endpoint(query: str, configuration: Configuration) -> Endpoint:
    """Describe ``GET /v1/current.json?q=<query>&key=<api key>``.

    Configuration failures do not raise here. A missing host yields an empty
    base URL and a missing key is left out of the query, so the request fails
    later with `InvalidURLError` or a non-2xx answer.
    """

    try:
        base_url = "https://" + configuration.value(BASE_URL_KEY)
    except ConfigurationError as exc:
        logger.warning("Weather API host unavailable: %s", exc)
        base_url = ""

    params: dict[str, str] = {"q": query}
    try:
        params["key"] = configuration.value(API_KEY_KEY)
    except ConfigurationError as exc:
        logger.warning("Weather API key unavailable: %s", exc)

    return Endpoint(
        method=HTTPMethod.GET,
        base_url=base_url,
        path=CURRENT_WEATHER_PATH,
        headers=JSON_HEADERS,
        body=QueryParameters(params),
    )


__all__ = ["CURRENT_WEATHER_PATH", "weather_endpoint"]

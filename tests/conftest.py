import copy

import pytest

from weather_client import APIClient, Configuration

WEATHER_PAYLOAD = {
    "location": {"name": "Paris", "country": "France"},
    "current": {
        "temp_c": 18.4,
        "condition": {
            "text": "Partly cloudy",
            "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png",
        },
        "humidity": 62,
        "feelslike_c": 17.9,
        "uv": 4.0,
    },
}


@pytest.fixture
def client():
    with APIClient() as api_client:
        yield api_client


@pytest.fixture
def configuration():
    return Configuration({"BASE_URL": "api.example.com", "API_KEY": "k"})


@pytest.fixture
def weather_payload():
    return copy.deepcopy(WEATHER_PAYLOAD)

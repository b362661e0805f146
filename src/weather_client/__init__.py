"""Declarative HTTP endpoints and the weather API built on them."""
from .client import APIClient
from .config import ClientConfig, Configuration
from .descriptor import JSONBody, MultipartForm, NoBody, QueryParameters, URLEncodedBody
from .endpoint import Endpoint, HTTPMethod, TransportRequest, build_request
from .exceptions import WeatherClientError
from .multipart import MultipartBody
from .service import NetworkService, WeatherService

__all__ = [
    "APIClient",
    "ClientConfig",
    "Configuration",
    "Endpoint",
    "HTTPMethod",
    "JSONBody",
    "MultipartBody",
    "MultipartForm",
    "NetworkService",
    "NoBody",
    "QueryParameters",
    "TransportRequest",
    "URLEncodedBody",
    "WeatherClientError",
    "WeatherService",
    "build_request",
]

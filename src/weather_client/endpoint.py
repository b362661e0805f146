"""Endpoint contracts and their conversion into transport requests."""

from __future__ import annotations

import json
import logging
import re
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from urllib.parse import SplitResult, quote, urlsplit, urlunsplit

from requests.structures import CaseInsensitiveDict

from .descriptor import NoBody, QueryItem, RequestDescriptor, to_query_items
from .exceptions import EncodingError, InvalidURLError
from .values import is_json_value

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Characters left literal inside query names and values; '+', '&', '=' and '#' are escaped.
_QUERY_SAFE = "/?:@!$'()*,;"
_FORBIDDEN_URL_CHARS = frozenset(' "<>\\^`{|}')
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class HTTPMethod(str, Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"

    @classmethod
    def _missing_(cls, value: object) -> HTTPMethod | None:
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None

    @property
    def token(self) -> str:
        return self.value.upper()


class BodyEncoding(str, Enum):
    """Which encoder produced a transport request's body."""

    URL_ENCODED = "url-encoded"
    JSON = "json"
    MULTIPART = "multipart"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Immutable description of one API call.

    Building an ``Endpoint`` has no side effects; nothing touches the network
    until it is handed to :class:`weather_client.client.APIClient`.
    """

    method: HTTPMethod
    base_url: str
    path: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    body: RequestDescriptor = field(default_factory=NoBody)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


@dataclass(slots=True)
class TransportRequest:
    """Fully assembled request ready for the transport."""

    method: str
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes | None = None
    body_encoding: BodyEncoding | None = None


def build_request(
    endpoint: Endpoint,
    *,
    default_headers: Mapping[str, str] | None = None,
) -> TransportRequest:
    """Turn an endpoint into a transport request.

    ``default_headers`` sit underneath the endpoint's own headers. Raises
    :class:`InvalidURLError` when the URL cannot be assembled and
    :class:`EncodingError` when a JSON payload is not serializable.
    """

    raw_url = endpoint.base_url + endpoint.path
    parts = _parse_url(raw_url)

    descriptor = endpoint.body
    query_items = descriptor.query_items
    if query_items:
        query = _encode_query(query_items).replace("+", "%2B")
        attached = urlunsplit(parts._replace(query=query))
        parts = _parse_url(attached)
    url = urlunsplit(parts)

    headers: CaseInsensitiveDict = CaseInsensitiveDict(default_headers or {})
    headers.update(endpoint.headers)
    request = TransportRequest(method=endpoint.method.token, url=url, headers=headers)

    url_encoded = descriptor.url_encoded_payload
    if url_encoded is not None:
        form = _encode_query(to_query_items(url_encoded))
        request.headers["Content-Type"] = FORM_CONTENT_TYPE
        request.body = form.encode("utf-8")
        request.body_encoding = BodyEncoding.URL_ENCODED

    json_payload = descriptor.json_payload
    if json_payload is not None:
        if not is_json_value(json_payload):
            raise EncodingError("JSON body contains values that cannot be serialized")
        request.body = json.dumps(dict(json_payload), separators=(",", ":")).encode("utf-8")
        request.body_encoding = BodyEncoding.JSON

    multipart = descriptor.multipart_payload
    if multipart is not None:
        request.headers["Content-Type"] = multipart.content_type
        request.body = multipart.finalize()
        request.body_encoding = BodyEncoding.MULTIPART

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Built request:\n%s", curl_command(request))
    return request


def curl_command(request: TransportRequest) -> str:
    """Render ``request`` as a copy-pasteable curl invocation."""

    base = f"curl {shlex.quote(request.url)}"
    if request.method == "HEAD":
        base += " --head"
    command = [base]
    if request.method not in {"GET", "HEAD"}:
        command.append(f"-X {request.method}")
    for key, value in request.headers.items():
        if key.lower() == "cookie":
            continue
        command.append(f"-H {shlex.quote(f'{key}: {value}')}")
    if request.body:
        try:
            text = request.body.decode("utf-8")
        except UnicodeDecodeError:
            text = None
        if text is not None:
            command.append(f"-d {shlex.quote(text)}")
    return " \\\n\t".join(command)


def _parse_url(url: str) -> SplitResult:
    if not url or _BAD_ESCAPE.search(url):
        raise InvalidURLError(url)
    for char in url:
        if char in _FORBIDDEN_URL_CHARS or ord(char) < 0x20 or ord(char) == 0x7F:
            raise InvalidURLError(url)
    try:
        parts = urlsplit(url)
        parts.port  # raises on a malformed port
    except ValueError as exc:
        raise InvalidURLError(url) from exc
    if not parts.scheme or not parts.hostname:
        raise InvalidURLError(url)
    return parts


def _encode_query(items: list[QueryItem]) -> str:
    return "&".join(
        f"{quote(name, safe=_QUERY_SAFE)}={quote(value, safe=_QUERY_SAFE)}" for name, value in items
    )


__all__ = [
    "BodyEncoding",
    "Endpoint",
    "FORM_CONTENT_TYPE",
    "HTTPMethod",
    "TransportRequest",
    "build_request",
    "curl_command",
]

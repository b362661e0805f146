"""Request descriptors: how an endpoint carries its payload."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import NamedTuple

from .multipart import MultipartBody
from .values import JSONValue, Payload, canonical_string


class QueryItem(NamedTuple):
    """A single ``name=value`` pair destined for the URL query."""

    name: str
    value: str


def to_query_items(payload: Mapping[str, JSONValue] | None) -> list[QueryItem]:
    """Convert a mapping into query items in insertion order.

    Values without a canonical string form are skipped rather than rejected.
    """

    if not payload:
        return []
    items: list[QueryItem] = []
    for name, value in payload.items():
        text = canonical_string(value)
        if text is None:
            continue
        items.append(QueryItem(name, text))
    return items


class RequestDescriptor(ABC):
    """Base for the five payload encodings.

    Every view answers for every subclass; a view that does not belong to the
    active encoding returns ``None`` (or an empty list) instead of raising.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def kind(self) -> str:
        """Name of the active encoding."""

    @property
    def json_payload(self) -> Payload | None:
        return None

    @property
    def url_encoded_payload(self) -> Payload | None:
        return None

    @property
    def query_items(self) -> list[QueryItem]:
        return []

    @property
    def multipart_payload(self) -> MultipartBody | None:
        return None


@dataclass(frozen=True, slots=True)
class JSONBody(RequestDescriptor):
    """Serialize ``payload`` as the JSON request body."""

    payload: Payload | None = None
    kind = "json"

    @property
    def json_payload(self) -> Payload | None:
        return self.payload


@dataclass(frozen=True, slots=True)
class URLEncodedBody(RequestDescriptor):
    """Send ``payload`` as an ``application/x-www-form-urlencoded`` body."""

    payload: Payload | None = None
    kind = "url-encoded"

    @property
    def url_encoded_payload(self) -> Payload | None:
        return self.payload


@dataclass(frozen=True, slots=True)
class QueryParameters(RequestDescriptor):
    """Attach ``payload`` to the URL query string."""

    payload: Payload | None = None
    kind = "query"

    @property
    def query_items(self) -> list[QueryItem]:
        return to_query_items(self.payload)


@dataclass(frozen=True, slots=True)
class MultipartForm(RequestDescriptor):
    """Send a prepared ``multipart/form-data`` body."""

    body: MultipartBody
    kind = "multipart"

    @property
    def multipart_payload(self) -> MultipartBody | None:
        return self.body


@dataclass(frozen=True, slots=True)
class NoBody(RequestDescriptor):
    """Plain request without payload."""

    kind = "none"


__all__ = [
    "JSONBody",
    "MultipartForm",
    "NoBody",
    "QueryItem",
    "QueryParameters",
    "RequestDescriptor",
    "URLEncodedBody",
    "to_query_items",
]

"""HTTP utilities for weather API access."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from requests import Response, Session

from .endpoint import TransportRequest
from .exceptions import BadRequestError, DecodingError

# Status assumed when the transport hands back a response without one.
MISSING_STATUS_CODE = 400


@dataclass(slots=True)
class HttpResponse:
    """Raw response envelope."""

    status_code: int
    content: bytes
    headers: Mapping[str, str]


def ensure_success(response: Response) -> int:
    """Return the status code, raising `BadRequestError` outside 2xx."""

    status_code = response.status_code
    if status_code is None:
        status_code = MISSING_STATUS_CODE
    if 200 <= status_code < 300:
        return status_code
    text = response.text or ""
    message = f"Weather API error {status_code}: {text[:200]}"
    raise BadRequestError(message, status_code=status_code, details=text)


def parse_json(content: bytes) -> Any:
    """Parse JSON with helpful error context."""

    try:
        return json.loads(content)
    except ValueError as exc:
        raise DecodingError("Response did not contain valid JSON", details=str(exc)) from exc


def send(
    session: Session,
    request: TransportRequest,
    *,
    timeout: float | tuple[float, float] | None = None,
    verify: bool | str = True,
) -> HttpResponse:
    """Perform one round trip and return the raw response envelope."""

    response = session.request(
        method=request.method,
        url=request.url,
        headers=dict(request.headers),
        data=request.body,
        timeout=timeout,
        verify=verify,
    )
    status_code = ensure_success(response)
    return HttpResponse(
        status_code=status_code,
        content=response.content or b"",
        headers=response.headers,
    )

"""High-level async client for declarative endpoints."""

from __future__ import annotations

import asyncio
import logging
from http.cookiejar import DefaultCookiePolicy
from collections.abc import Mapping
from typing import Any, TypeVar
from urllib.parse import urlsplit, urlunsplit

import requests
import urllib3
from pydantic import TypeAdapter, ValidationError
from urllib3.exceptions import InsecureRequestWarning

from .config import ClientConfig
from .endpoint import Endpoint, TransportRequest, build_request
from .exceptions import BadRequestError, DecodingError
from .http import parse_json, send

logger = logging.getLogger(__name__)

T = TypeVar("T")


class APIClient:
    """Execute endpoints and decode their responses.

    Each call is an independent round trip. The only shared object is the
    underlying ``requests.Session``.
    """

    def __init__(
        self,
        *,
        verify_ssl: bool | str = True,
        timeout: float = 30.0,
        default_headers: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = ClientConfig(
            timeout=timeout,
            verify_ssl=verify_ssl,
            default_headers=default_headers,
        )
        self._suppress_insecure_warning_if_needed()
        self._session = session or requests.Session()
        self._refuse_cookies()

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> APIClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    # Public API --------------------------------------------------------------
    def prepare(self, endpoint: Endpoint) -> TransportRequest:
        """Build the transport request that ``endpoint`` would send."""

        return build_request(endpoint, default_headers=self.config.resolved_headers())

    async def fetch_bytes(self, endpoint: Endpoint) -> bytes:
        """Send ``endpoint`` and return the body of a 2xx response."""

        request = self.prepare(endpoint)
        return await asyncio.to_thread(self._perform_request, request)

    async def fetch_model(self, endpoint: Endpoint, model: type[T]) -> T:
        """Send ``endpoint`` and validate the JSON body as ``model``.

        ``model`` is anything pydantic can validate: a ``BaseModel``, a
        dataclass, or a typing construct such as ``dict[str, int]``.
        """

        content = await self.fetch_bytes(endpoint)
        try:
            return TypeAdapter(model).validate_json(content)
        except ValidationError as exc:
            raise DecodingError(
                f"Response did not match {getattr(model, '__name__', model)}",
                details=exc.errors(),
            ) from exc

    async def fetch_dict(self, endpoint: Endpoint) -> dict[str, Any]:
        """Send ``endpoint`` and require a JSON object body."""

        content = await self.fetch_bytes(endpoint)
        payload = parse_json(content)
        if not isinstance(payload, dict):
            raise BadRequestError(
                "Response body is not a JSON object",
                details=type(payload).__name__,
            )
        return payload

    def close(self) -> None:
        self._session.close()

    # Internal helpers -------------------------------------------------------
    def _perform_request(self, request: TransportRequest) -> bytes:
        self._log_request(request)
        response = send(
            self._session,
            request,
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
        )
        logger.debug("Weather API response %s (%d bytes)", response.status_code, len(response.content))
        return response.content

    def _log_request(self, request: TransportRequest) -> None:
        # Query strings carry the API key.
        parsed = urlsplit(request.url)
        logger.info(
            "Weather API request %s %s",
            request.method,
            urlunsplit((parsed.scheme, parsed.netloc, parsed.path, "", "")),
        )

    def _refuse_cookies(self) -> None:
        # The shared jar stays empty across calls.
        cookies = getattr(self._session, "cookies", None)
        if cookies is not None:
            cookies.clear()
            cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))

    def _suppress_insecure_warning_if_needed(self) -> None:
        if isinstance(self.config.verify_ssl, bool) and not self.config.verify_ssl:
            urllib3.disable_warnings(InsecureRequestWarning)

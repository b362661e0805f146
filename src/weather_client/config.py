"""Configuration helpers for the weather client."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import InvalidValueError, MissingKeyError, SettingsFileError
from .values import canonical_string

BASE_URL_KEY = "BASE_URL"
API_KEY_KEY = "API_KEY"
ENV_PREFIX = "WEATHER_"


@dataclass(slots=True)
class ClientConfig:
    """Typed transport settings for `APIClient`."""

    timeout: float = 30.0
    verify_ssl: bool | str = True
    default_headers: Mapping[str, str] | None = None

    def resolved_headers(self) -> dict[str, str]:
        return dict(self.default_headers or {})


class Configuration:
    """Read-only application settings resolved by key.

    Values may be strings or numbers; numbers are returned in their canonical
    text form. Anything else is rejected with `InvalidValueError`.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = ENV_PREFIX,
    ) -> Configuration:
        source = os.environ if environ is None else environ
        values = {
            name[len(prefix):]: value
            for name, value in source.items()
            if name.startswith(prefix) and len(name) > len(prefix)
        }
        return cls(values)

    @classmethod
    def from_file(cls, path: str | Path) -> Configuration:
        """Load settings from a JSON object on disk."""

        location = Path(path).expanduser()
        try:
            raw = json.loads(location.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SettingsFileError(str(location), exc.strerror or str(exc)) from exc
        except ValueError as exc:
            raise SettingsFileError(str(location), f"invalid JSON ({exc})") from exc
        if not isinstance(raw, Mapping):
            raise SettingsFileError(str(location), "top-level value is not an object")
        return cls(raw)

    def value(self, key: str) -> str:
        if key not in self._values or self._values[key] is None:
            raise MissingKeyError(key)
        raw = self._values[key]
        if isinstance(raw, bool):
            raise InvalidValueError(key)
        text = canonical_string(raw)
        if text is None:
            raise InvalidValueError(key)
        return text

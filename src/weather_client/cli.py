"""Command-line interface for the weather API."""
from __future__ import annotations

import asyncio
import json
from typing import Any

import requests
import typer

try:  # pragma: no cover - exercised in runtime environments
    from rich import box
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover - optional dependency guard
    raise RuntimeError(
        "The CLI requires Rich for table rendering. Install the CLI extras via "
        "'pip install weather-client[cli]' to enable this command."
    ) from exc

from .api import weather_endpoint
from .client import APIClient
from .config import API_KEY_KEY, BASE_URL_KEY, Configuration
from .endpoint import curl_command
from .exceptions import WeatherClientError
from .models import WeatherModel, format_reading
from .service import WeatherService

app = typer.Typer(help="Weather API developer CLI.", no_args_is_help=True)

console = Console(force_terminal=False, color_system=None)


def _build_configuration(host: str | None, api_key: str | None) -> Configuration:
    values: dict[str, str] = {}
    if host:
        values[BASE_URL_KEY] = host
    if api_key:
        values[API_KEY_KEY] = api_key
    return Configuration(values)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _render_weather(weather: WeatherModel) -> None:
    table = Table(
        title=weather.location.name,
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    table.add_column("Reading")
    table.add_column("Value", justify="right")
    current = weather.current
    table.add_row("Temperature (°C)", format_reading(current.temp_c))
    table.add_row("Feels like (°C)", format_reading(current.feelslike_c))
    table.add_row("Humidity (%)", str(current.humidity))
    table.add_row("UV", format_reading(current.uv))
    table.add_row("Icon", current.condition.large_icon_url)
    console.print(table)


def _handle_error(exc: Exception) -> None:
    message = f"Request failed: {exc}"
    status_code = getattr(exc, "status_code", None)
    if status_code is not None:
        message = f"Request failed (status {status_code}): {exc}"
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


_HOST_OPTION = typer.Option(
    None, "--host", envvar="WEATHER_BASE_URL", help="Weather API host (without scheme)."
)
_API_KEY_OPTION = typer.Option(
    None, "--api-key", envvar="WEATHER_API_KEY", help="Weather API key."
)


@app.command("current")
def current(
    query: str = typer.Argument(..., help="City name, postcode or coordinates."),
    host: str | None = _HOST_OPTION,
    api_key: str | None = _API_KEY_OPTION,
    timeout: float = typer.Option(30.0, help="Request timeout (seconds).", show_default=True),
    verify_ssl: bool = typer.Option(
        True,
        "--verify/--no-verify",
        help="Enable or disable TLS certificate verification.",
        show_default=True,
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Return raw JSON instead of rendering a table.",
    ),
) -> None:
    """Show current conditions for QUERY."""

    configuration = _build_configuration(host, api_key)
    with APIClient(verify_ssl=verify_ssl, timeout=timeout) as client:
        service = WeatherService(client, configuration)
        try:
            weather = asyncio.run(service.fetch_weather(query))
        except (WeatherClientError, requests.RequestException) as exc:
            _handle_error(exc)
            return
    if output_json:
        _echo_json(weather.model_dump(mode="json", by_alias=True))
        return
    _render_weather(weather)


@app.command("curl")
def curl(
    query: str = typer.Argument(..., help="City name, postcode or coordinates."),
    host: str | None = _HOST_OPTION,
    api_key: str | None = _API_KEY_OPTION,
) -> None:
    """Print the curl command equivalent to `current QUERY`."""

    configuration = _build_configuration(host, api_key)
    with APIClient() as client:
        try:
            request = client.prepare(weather_endpoint(query, configuration))
        except WeatherClientError as exc:
            _handle_error(exc)
            return
    typer.echo(curl_command(request))


def main() -> None:  # pragma: no cover - console entrypoint
    app()

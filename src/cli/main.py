"""CLI principal (Typer).

Comandos:
- `request`: ejecuta una llamada y muestra el sobre de respuesta.
- `doctor`: diagnóstico de configuración y conectividad.

La CLI es el único sitio que configura logging (RichHandler); los módulos del
Core solo usan `logging.getLogger(__name__)`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli import doctor
from cli.ui_components import build_envelope_panel, print_banner
from core.config import AppSettings
from core.domain.models import ApiResponse, BodyMode, HttpMethod
from core.services.api_client import ApiClient, create_client

app = typer.Typer(no_args_is_help=True, help="Generic client for the backend API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _parse_params(raw: list[str]) -> dict[str, list[str]]:
    params: dict[str, list[str]] = {}
    for item in raw:
        if "=" not in item:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint="--param")
        key, value = item.split("=", 1)
        params.setdefault(key, []).append(value)
    return params


def _parse_data(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc}", param_hint="--data") from exc


async def _dispatch(
    client: ApiClient,
    method: HttpMethod,
    path: str,
    params: dict[str, list[str]],
    body: Any,
    token: str | None,
    timeout_ms: int | None,
) -> ApiResponse:
    async with client:
        if method is HttpMethod.GET:
            return await client.get(path, params or None, token, timeout_ms=timeout_ms)
        if method is HttpMethod.DELETE:
            if body is None:
                return await client.delete(path, token, timeout_ms=timeout_ms)
            return await client.delete_with_body(path, body, token, timeout_ms=timeout_ms)
        verb = getattr(client, method.value.lower())
        return await verb(path, body, token, timeout_ms=timeout_ms)


@app.command()
def request(
    method: HttpMethod = typer.Argument(..., case_sensitive=False, help="HTTP verb."),
    path: str = typer.Argument(..., help="Path appended to the configured base URL."),
    param: List[str] = typer.Option([], "--param", "-p", help="Query parameter key=value (repeatable)."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON body."),
    token: Optional[str] = typer.Option(None, "--token", envvar="API_CLIENT_TOKEN", help="Bearer token."),
    mode: Optional[BodyMode] = typer.Option(None, "--mode", "-m", help="Body serialization mode."),
    timeout_ms: Optional[int] = typer.Option(None, "--timeout-ms", help="Per-call timeout; <= 0 disables it."),
    raw: bool = typer.Option(False, "--raw", help="Print the envelope as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Send one request and render the response envelope."""

    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    params = _parse_params(param)
    body = _parse_data(data)

    client = create_client(mode, settings)
    envelope = asyncio.run(_dispatch(client, method, path, params, body, token, timeout_ms))

    if raw:
        typer.echo(envelope.model_dump_json(indent=2))
    else:
        print_banner(_console)
        _console.print(build_envelope_panel(envelope))

    if not envelope.success:
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()

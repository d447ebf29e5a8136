"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from cli.ui_components import build_settings_table
from core.config import AppSettings, write_user_env_vars
from core.domain.models import BodyMode
from core.services.api_client import create_client

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings, path: str) -> tuple[bool, str]:
    """Check the backend with a GET; any HTTP answer counts as reachable."""

    async with create_client(settings=settings) as client:
        envelope = await client.get(path)
    if envelope.success:
        return True, f"{envelope.message}"
    if envelope.error.status == 0:
        return False, envelope.error.message
    return True, f"HTTP {envelope.error.status} ({envelope.error.message})"


@app.command()
def run(
    path: str = typer.Option("/", "--path", help="Path used for the connectivity check."),
) -> None:
    """Show effective configuration and check the backend."""

    settings = AppSettings()
    _console.print(build_settings_table(settings))

    if not settings.base_url:
        _console.print(
            "[yellow]No base URL configured.[/yellow] Set API_CLIENT_BASE_URL or run `doctor setup`."
        )
        raise typer.Exit(code=1)

    ok, detail = asyncio.run(_check_api(settings, path))
    status = "[green]OK[/green]" if ok else "[red]FAIL[/red]"
    _console.print(f"API connectivity: {status} {detail}")
    if not ok:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    current = AppSettings()
    base_url = typer.prompt("API base URL", default=current.base_url or "", show_default=True).strip()
    mode = typer.prompt("Default body mode", default=current.default_mode.value, show_default=True).strip().lower()
    timeout_ms = typer.prompt("Request timeout (ms)", default=current.request_timeout_ms, type=int)

    if not base_url:
        raise typer.BadParameter("base_url is required")
    try:
        BodyMode(mode)
    except ValueError as exc:
        raise typer.BadParameter(f"mode must be one of: {', '.join(m.value for m in BodyMode)}") from exc

    env_path = write_user_env_vars(
        {
            "API_CLIENT_BASE_URL": base_url,
            "API_CLIENT_DEFAULT_MODE": mode,
            "API_CLIENT_REQUEST_TIMEOUT_MS": str(timeout_ms),
        }
    )

    _console.print(f"[green]Saved API config to:[/green] {env_path}")

"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar paneles en múltiples comandos.
"""

from __future__ import annotations

import json

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from core.config import AppSettings
from core.domain.models import ApiResponse


def print_banner(console: Console) -> None:
    title = Text("backend-api-client", style="bold cyan")
    subtitle = Text("Requests • Envelopes • Diagnostics", style="dim")
    console.print(Panel(Text.assemble(title, "\n", subtitle), border_style="cyan", padding=(0, 2)))


def build_settings_table(settings: AppSettings) -> Table:
    """Tabla con la configuración efectiva."""

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("base_url", settings.base_url or "[red](empty)[/red]")
    table.add_row("default_mode", settings.default_mode.value)
    table.add_row("request_timeout_ms", str(settings.request_timeout_ms))
    table.add_row("user_agent", settings.user_agent)
    table.add_row("log_level", settings.log_level)
    return table


def build_envelope_panel(envelope: ApiResponse) -> Panel:
    """Panel para presentar un `ApiSuccess` / `ApiFailure`."""

    if envelope.success:
        label = f"OK • {envelope.message}" if envelope.message else "OK"
        title = Text(label, style="bold green")
        payload = envelope.data
        border = "green"
    else:
        title = Text(f"HTTP {envelope.error.status} • {envelope.error.message}", style="bold red")
        payload = envelope.error.detail
        border = "red"

    if isinstance(payload, str):
        body: Text | Syntax = Text(payload)
    else:
        rendered = json.dumps(payload, ensure_ascii=False, indent=2, default=str)
        body = Syntax(rendered, "json", word_wrap=True)
    return Panel(body, title=title, border_style=border)

"""Headers de salida.

Precedencia fija: defaults del modo < headers del caller < no-cache forzado.
"""

from __future__ import annotations

from typing import Mapping

import httpx

from core.domain.models import BodyMode

NO_STORE_HEADERS: dict[str, str] = {"Cache-Control": "no-store, max-age=0"}


def build_base_headers(mode: BodyMode) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    content_type = mode.content_type()
    if content_type:
        headers["Content-Type"] = content_type
    return headers


def build_headers(
    mode: BodyMode,
    token: str | None = None,
    overrides: Mapping[str, str] | None = None,
) -> httpx.Headers:
    """Combina headers del modo, bearer token y overrides del caller.

    `httpx.Headers` es case-insensitive: un `cache-control` del caller queda
    reemplazado por el valor forzado.
    """

    headers = httpx.Headers(build_base_headers(mode))
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if overrides:
        for key, value in overrides.items():
            headers[key] = value
    for key, value in NO_STORE_HEADERS.items():
        headers[key] = value
    return headers

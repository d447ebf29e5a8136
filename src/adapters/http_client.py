"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza headers y el ciclo de vida del `httpx.AsyncClient` compartido.
- Implementa el contrato `HttpTransport`: la request corre contra el token de
  cancelación compuesto y, si el token gana la carrera, se aborta.
- Facilita testeo: se puede inyectar un `httpx.AsyncClient` con
  `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.requests import Blob, MultipartBody, OutboundRequest, UploadFile
from core.services.cancellation import CancellationToken, RequestAborted, run_cancellable

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué sin timeout de httpx:
    - El límite de cada llamada lo impone el token de cancelación compuesto;
      un segundo timeout daría errores de red en vez de "Request aborted".
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(None),
        headers=headers,
        transport=transport,
    )


def _multipart_files(body: MultipartBody) -> list[tuple[str, Any]]:
    files: list[tuple[str, Any]] = []
    for part in body.parts:
        value = part.value
        if isinstance(value, UploadFile):
            files.append((part.name, (value.filename, value.content, value.content_type)))
        elif isinstance(value, Blob):
            files.append((part.name, ("blob", value.content, value.content_type or "application/octet-stream")))
        else:
            # Campo simple: sin filename, httpx lo emite como form-data normal.
            files.append((part.name, (None, value)))
    return files


def _empty_multipart() -> tuple[bytes, str]:
    # httpx trata `files=[]` como "sin body"; se emite solo el delimitador final.
    boundary = os.urandom(16).hex()
    return f"--{boundary}--\r\n".encode("ascii"), f"multipart/form-data; boundary={boundary}"


def _request_kwargs(request: OutboundRequest) -> dict[str, Any]:
    body = request.body
    if body is None:
        return {"headers": request.headers}
    if isinstance(body, MultipartBody):
        if not body.parts:
            content, content_type = _empty_multipart()
            headers = httpx.Headers(request.headers)
            headers["Content-Type"] = content_type
            return {"headers": headers, "content": content}
        return {"headers": request.headers, "files": _multipart_files(body)}
    return {"headers": request.headers, "content": body}


class HttpxTransport:
    """Transporte por defecto sobre `httpx.AsyncClient`."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or build_async_client(settings)

    async def send(
        self,
        request: OutboundRequest,
        cancellation: CancellationToken,
    ) -> httpx.Response:
        if cancellation.cancelled:
            raise RequestAborted(cancellation.reason)

        logger.debug("%s %s", request.method.value, request.url)
        return await run_cancellable(
            self._client.request(request.method.value, request.url, **_request_kwargs(request)),
            cancellation,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

"""Cliente HTTP genérico hacia el backend.

Responsabilidad:
- Exponer un método por verbo (`get`, `post`, `put`, `patch`, `delete`,
  `delete_with_body`).
- Orquestar por llamada: headers, serialización, cancelación compuesta,
  transporte y normalización de la respuesta.

Regla de oro:
- Ningún método de verbo lanza excepciones (salvo la cancelación de la propia
  tarea asyncio del caller). Todo resultado es un `ApiSuccess` o `ApiFailure`.

Por qué factorías y no instancias globales:
- Quien crea el cliente es dueño de su ciclo de vida (y del `httpx.AsyncClient`
  que hay debajo); no hay estado mutable a nivel de proceso.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from adapters.http_client import HttpxTransport
from core.config import AppSettings
from core.domain.models import (
    DEFAULT_TIMEOUT_MS,
    ApiResponse,
    BodyMode,
    ClientConfig,
    HttpMethod,
)
from core.domain.requests import OutboundRequest, RequestDescriptor
from core.interfaces.transport import HttpTransport
from core.services.body_serializer import serialize_body
from core.services.cancellation import CancellationToken, composite_cancellation, run_cancellable
from core.services.headers import build_headers
from core.services.query import QueryParams, build_query_string
from core.services.response_normalizer import failure_from_exception, normalize_response

logger = logging.getLogger(__name__)


class ApiClient:
    """Fachada con un método por verbo HTTP."""

    def __init__(
        self,
        base_url: str,
        mode: BodyMode | str = BodyMode.JSON,
        *,
        timeout_ms: int | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._config = ClientConfig(
            base_url=base_url,
            mode=BodyMode(mode),
            default_timeout_ms=DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms,
        )
        self._transport: HttpTransport = transport or HttpxTransport()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def mode(self) -> BodyMode:
        return self._config.mode

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, descriptor: RequestDescriptor) -> ApiResponse:
        timeout_ms = descriptor.timeout_ms
        if timeout_ms is None:
            timeout_ms = self._config.default_timeout_ms
        url = f"{self._config.base_url}{descriptor.path}"
        method = descriptor.method.value

        try:
            async with composite_cancellation(descriptor.cancellation, timeout_ms) as cancellation:
                outbound = OutboundRequest(
                    method=descriptor.method,
                    url=url,
                    headers=build_headers(self._config.mode, descriptor.token, descriptor.headers),
                    body=serialize_body(descriptor.body, self._config.mode),
                )
                response = await self._transport.send(outbound, cancellation)
                # El transporte puede devolver un body en streaming sin leer.
                if response.status_code != 204:
                    await run_cancellable(response.aread(), cancellation)
                envelope = normalize_response(response)
        except Exception as exc:
            envelope = failure_from_exception(exc)
            logger.warning("%s %s failed without response: %s", method, url, envelope.error.message)
            return envelope

        if not envelope.success:
            logger.warning(
                "%s %s -> HTTP %s: %s",
                method,
                url,
                envelope.error.status,
                envelope.error.message,
            )
        return envelope

    async def get(
        self,
        path: str,
        params: QueryParams | None = None,
        token: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ApiResponse:
        return await self._request(
            RequestDescriptor(
                path=f"{path}{build_query_string(params)}",
                method=HttpMethod.GET,
                headers=headers,
                token=token,
                timeout_ms=timeout_ms,
                cancellation=cancellation,
            )
        )

    async def post(
        self,
        path: str,
        body: Any,
        token: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ApiResponse:
        return await self._send_body(HttpMethod.POST, path, body, token, headers, timeout_ms, cancellation)

    async def put(
        self,
        path: str,
        body: Any,
        token: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ApiResponse:
        return await self._send_body(HttpMethod.PUT, path, body, token, headers, timeout_ms, cancellation)

    async def patch(
        self,
        path: str,
        body: Any,
        token: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ApiResponse:
        return await self._send_body(HttpMethod.PATCH, path, body, token, headers, timeout_ms, cancellation)

    async def delete(
        self,
        path: str,
        token: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ApiResponse:
        return await self._send_body(HttpMethod.DELETE, path, None, token, headers, timeout_ms, cancellation)

    async def delete_with_body(
        self,
        path: str,
        body: Any,
        token: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ApiResponse:
        return await self._send_body(HttpMethod.DELETE, path, body, token, headers, timeout_ms, cancellation)

    async def _send_body(
        self,
        method: HttpMethod,
        path: str,
        body: Any,
        token: str | None,
        headers: Mapping[str, str] | None,
        timeout_ms: int | None,
        cancellation: CancellationToken | None,
    ) -> ApiResponse:
        return await self._request(
            RequestDescriptor(
                path=path,
                method=method,
                body=body,
                headers=headers,
                token=token,
                timeout_ms=timeout_ms,
                cancellation=cancellation,
            )
        )

    def __repr__(self) -> str:
        return f"<ApiClient base_url={self.base_url!r} mode={self.mode.value}>"


def create_client(
    mode: BodyMode | str | None = None,
    settings: AppSettings | None = None,
    *,
    transport: HttpTransport | None = None,
) -> ApiClient:
    """Crea un cliente a partir de `AppSettings`.

    El transporte por defecto usa el User-Agent de la configuración.
    """

    settings = settings or AppSettings()
    return ApiClient(
        settings.base_url,
        mode if mode is not None else settings.default_mode,
        timeout_ms=settings.request_timeout_ms,
        transport=transport or HttpxTransport(settings=settings),
    )


def create_json_client(settings: AppSettings | None = None, *, transport: HttpTransport | None = None) -> ApiClient:
    return create_client(BodyMode.JSON, settings, transport=transport)


def create_form_client(settings: AppSettings | None = None, *, transport: HttpTransport | None = None) -> ApiClient:
    return create_client(BodyMode.FORM, settings, transport=transport)


def create_urlencoded_client(
    settings: AppSettings | None = None,
    *,
    transport: HttpTransport | None = None,
) -> ApiClient:
    return create_client(BodyMode.URLENCODED, settings, transport=transport)

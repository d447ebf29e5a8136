"""Contrato del transporte HTTP.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir httpx por un stub en tests sin tocar el cliente.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import httpx

    from core.domain.requests import OutboundRequest
    from core.services.cancellation import CancellationToken


@runtime_checkable
class HttpTransport(Protocol):
    """Contrato mínimo para ejecutar una request.

    Reglas de diseño:
    - `send` es asíncrono y debe observar `cancellation`: si el token se
      dispara antes de tener respuesta, lanza `RequestAborted`.
    - Devuelve la respuesta con el body ya leído.
    """

    async def send(
        self,
        request: OutboundRequest,
        cancellation: CancellationToken,
    ) -> httpx.Response:
        ...

    async def aclose(self) -> None:
        ...

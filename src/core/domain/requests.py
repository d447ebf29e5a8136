"""Estructuras por llamada: descriptor de request, body multipart y binarios.

Por qué dataclasses y no Pydantic:
- Viven solo durante una llamada y transportan objetos arbitrarios (bytes,
  tokens de cancelación, headers de httpx) que no tiene sentido validar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Union

from core.domain.models import HttpMethod

if TYPE_CHECKING:
    import httpx

    from core.services.cancellation import CancellationToken


@dataclass(frozen=True)
class UploadFile:
    """Valor binario con nombre de archivo (equivalente a un `File`)."""

    content: bytes
    filename: str | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class Blob:
    """Valor binario crudo; se adjunta tal cual, sin nombre propio."""

    content: bytes
    content_type: str | None = None


FormValue = Union[str, UploadFile, Blob]


@dataclass(frozen=True)
class FormPart:
    name: str
    value: FormValue


@dataclass
class MultipartBody:
    """Body multipart ya construido (campos y archivos en orden)."""

    parts: list[FormPart] = field(default_factory=list)

    def append(self, name: str, value: FormValue) -> None:
        self.parts.append(FormPart(name=name, value=value))

    def field_names(self) -> list[str]:
        return [part.name for part in self.parts]


SerializedBody = Union[str, bytes, MultipartBody, None]


@dataclass
class RequestDescriptor:
    """Lo que el caller pide en una llamada, antes de serializar."""

    path: str
    method: HttpMethod
    body: Any = None
    headers: Mapping[str, str] | None = None
    token: str | None = None
    timeout_ms: int | None = None
    cancellation: CancellationToken | None = None


@dataclass
class OutboundRequest:
    """Request final que recibe el transporte."""

    method: HttpMethod
    url: str
    headers: httpx.Headers
    body: SerializedBody = None

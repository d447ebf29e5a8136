"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- El sobre de respuesta (`ApiSuccess` / `ApiFailure`) es el único canal por el
  que el cliente comunica resultados; modelarlo aquí lo hace serializable y
  fácil de inspeccionar en tests y en la CLI.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

T = TypeVar("T")


class BodyMode(str, Enum):
    """Modo de serialización del body, fijo por instancia de cliente."""

    JSON = "json"
    URLENCODED = "urlencoded"
    FORM = "form"

    def content_type(self) -> str | None:
        """Content-Type declarado para el modo.

        `FORM` (multipart) devuelve None: el transporte debe fijar su propio
        boundary.
        """

        if self is BodyMode.JSON:
            return "application/json"
        if self is BodyMode.URLENCODED:
            return "application/x-www-form-urlencoded"
        return None


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


DEFAULT_TIMEOUT_MS = 30_000


class ClientConfig(BaseModel):
    """Configuración inmutable de un cliente.

    Se crea una vez (normalmente desde `AppSettings`) y se comparte por
    referencia entre todas las llamadas concurrentes.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        default="",
        description="Prefijo que se concatena a cada path (sin normalizar barras).",
    )
    mode: BodyMode = Field(
        default=BodyMode.JSON,
        description="Modo de serialización del body.",
    )
    default_timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        description="Timeout por defecto (ms). Un valor <= 0 desactiva el temporizador.",
    )


class ApiError(BaseModel):
    """Error normalizado de una llamada fallida.

    `status` es 0 cuando no se recibió respuesta HTTP (red o cancelación).
    """

    model_config = ConfigDict(frozen=True)

    status: int = Field(..., ge=0, description="Status HTTP, o 0 si no hubo respuesta.")
    message: str = Field(..., description="Mensaje legible para mostrar.")
    detail: Any = Field(
        default=None,
        description="Detalle crudo extraído del payload de error (uso programático).",
    )


class ApiSuccess(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    data: T
    message: str | None = None


class ApiFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    error: ApiError
    message: str | None = None


# Hay que comprobar `success` antes de leer `data` o `error`.
ApiResponse = Union[ApiSuccess[Any], ApiFailure]


class Pagination(BaseModel):
    """Bloque de paginación que devuelven los endpoints de listado."""

    model_config = ConfigDict(extra="ignore")

    current_page: int = Field(..., ge=0)
    last_page: int = Field(..., ge=0)
    per_page: int = Field(..., ge=0)
    total: int = Field(..., ge=0)

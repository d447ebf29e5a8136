"""Serialización del body según el modo del cliente.

Modos:
- `json`: un único texto JSON (fechas en ISO-8601, modelos Pydantic volcados).
- `urlencoded`: aplanado recursivo a pares `clave=valor` con notación de
  corchetes (`a[b]=1`, `c[]=1&c[]=2`). Un `str`/`bytes` se considera ya
  codificado y pasa sin tocar.
- `form` (multipart): mismo aplanado, pero `UploadFile`/`Blob`/`bytes` se
  adjuntan como archivos. Un `MultipartBody` pasa sin tocar.

Por qué el mismo aplanado para ambos modos:
- El caller puede cambiar de formato de cable sin reestructurar el body.

None se serializa como `clave=` (presente y vacío), a diferencia de la query
string, que lo omite.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any, Iterator, Mapping
from urllib.parse import urlencode

from pydantic import BaseModel

from core.domain.models import BodyMode
from core.domain.requests import Blob, FormValue, MultipartBody, SerializedBody, UploadFile
from core.services.query import scalar_text

DEFAULT_UPLOAD_FILENAME = "file"

_BINARY_TYPES = (UploadFile, Blob, bytes, bytearray)


def _iso(value: date) -> str:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    return value.isoformat()


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return _iso(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _as_mapping(body: Any) -> Mapping[str, Any]:
    if isinstance(body, BaseModel):
        return body.model_dump()
    if isinstance(body, Mapping):
        return body
    raise TypeError(f"Form bodies must be mappings, got {type(body).__name__}")


def _attach_binary(value: Any) -> FormValue:
    if isinstance(value, UploadFile):
        if value.filename:
            return value
        return UploadFile(
            content=value.content,
            filename=DEFAULT_UPLOAD_FILENAME,
            content_type=value.content_type,
        )
    if isinstance(value, Blob):
        return value
    return Blob(content=bytes(value))


def _flatten(key: str, value: Any, *, allow_binary: bool) -> Iterator[tuple[str, FormValue]]:
    if value is None:
        yield key, ""
        return
    if isinstance(value, _BINARY_TYPES):
        if not allow_binary:
            raise TypeError(f"Binary value for {key!r} requires multipart mode")
        yield key, _attach_binary(value)
        return
    if isinstance(value, (datetime, date)):
        yield key, _iso(value)
        return
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            yield from _flatten(f"{key}[{sub_key}]", sub_value, allow_binary=allow_binary)
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            yield from _flatten(f"{key}[]", item, allow_binary=allow_binary)
        return
    yield key, scalar_text(value)


def flatten_form_pairs(body: Any, *, allow_binary: bool = False) -> list[tuple[str, FormValue]]:
    """Aplana un body anidado en pares con claves de corchetes."""

    pairs: list[tuple[str, FormValue]] = []
    for key, value in _as_mapping(body).items():
        pairs.extend(_flatten(str(key), value, allow_binary=allow_binary))
    return pairs


def serialize_body(body: Any, mode: BodyMode) -> SerializedBody:
    """Convierte `body` al formato de cable de `mode` (None si no hay body)."""

    if body is None:
        return None

    if mode is BodyMode.JSON:
        return json.dumps(body, default=_json_default, ensure_ascii=False)

    if mode is BodyMode.URLENCODED:
        if isinstance(body, (str, bytes)):
            return body
        return urlencode(flatten_form_pairs(body))

    if isinstance(body, MultipartBody):
        return body
    multipart = MultipartBody()
    for name, value in flatten_form_pairs(body, allow_binary=True):
        multipart.append(name, value)
    return multipart

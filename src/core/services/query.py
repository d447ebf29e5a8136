"""Construcción de query strings para GET.

Reglas:
- Valores None se omiten por completo.
- Listas se expanden como claves repetidas (`tag=a&tag=b`), sin `[]`.
- None dentro de una lista se salta; el resto de elementos se mantiene.
"""

from __future__ import annotations

from typing import Mapping, Sequence, Union
from urllib.parse import urlencode

QueryPrimitive = Union[str, int, float, bool, None]
QueryParams = Mapping[str, Union[QueryPrimitive, Sequence[QueryPrimitive]]]


def scalar_text(value: object) -> str:
    """Conversión textual por defecto de un escalar (bools en minúscula)."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query_string(params: QueryParams | None = None) -> str:
    """Devuelve "" o un string que empieza por `?`."""

    if not params:
        return ""

    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, scalar_text(item)) for item in value if item is not None)
            continue
        pairs.append((key, scalar_text(value)))

    qs = urlencode(pairs)
    return f"?{qs}" if qs else ""

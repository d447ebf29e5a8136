"""Normalización de respuestas a `ApiSuccess` / `ApiFailure`.

Flujo:
- Sin respuesta (red/cancelación) -> `failure_from_exception`, status 0.
- 204 -> éxito con `{}` y "No Content"; el body no se lee.
- Content-Type JSON -> `response.json()` (si falla, `None`); resto -> texto.
- 2xx -> éxito; el mensaje es `payload["message"]` si existe, si no "OK".
- No 2xx -> `extract_error_message` sobre el payload parseado.

Precedencia del mensaje de error:
1. `detail` (lista unida con "; ", string, u objeto con `msg`).
2. `message`.
3. Texto plano no vacío, recortado a `TEXT_ERROR_MAX_CHARS`.
4. Reason phrase del status, o "Request failed".
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from core.domain.models import ApiError, ApiFailure, ApiResponse, ApiSuccess
from core.services.cancellation import RequestAborted

# Longitud máxima del mensaje cuando el error llega como texto plano.
TEXT_ERROR_MAX_CHARS = 300

ABORTED_MESSAGE = "Request aborted"
NETWORK_ERROR_MESSAGE = "Network error"
FALLBACK_ERROR_MESSAGE = "Request failed"


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def _message_from_item(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict) and item.get("msg"):
        return str(item["msg"])
    return _compact_json(item)


def extract_error_message(parsed: Any, fallback: str) -> tuple[str, Any]:
    """Devuelve `(mensaje, detail)` para un payload de error ya parseado."""

    if isinstance(parsed, dict):
        if "detail" in parsed:
            detail = parsed["detail"]
            if isinstance(detail, list):
                return "; ".join(_message_from_item(item) for item in detail), detail
            if isinstance(detail, str):
                return detail, detail
            if isinstance(detail, dict):
                return _message_from_item(detail), detail
            return fallback, detail
        if "message" in parsed:
            return str(parsed["message"]), None
        return fallback, None

    if isinstance(parsed, str) and parsed.strip():
        return parsed[:TEXT_ERROR_MAX_CHARS], None

    return fallback, None


def parse_body(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "").lower()
    try:
        if "application/json" in content_type:
            return response.json()
        return response.text
    except (ValueError, UnicodeDecodeError):
        return None


def normalize_response(response: httpx.Response) -> ApiResponse:
    if response.status_code == 204:
        return ApiSuccess(data={}, message="No Content")

    parsed = parse_body(response)

    if not response.is_success:
        fallback = response.reason_phrase or FALLBACK_ERROR_MESSAGE
        message, detail = extract_error_message(parsed, fallback)
        return ApiFailure(
            error=ApiError(status=response.status_code, message=message, detail=detail),
            message=message,
        )

    message = "OK"
    if isinstance(parsed, dict) and parsed.get("message"):
        message = str(parsed["message"])
    return ApiSuccess(data=parsed, message=message)


def failure_from_exception(exc: BaseException) -> ApiFailure:
    """Convierte un fallo sin respuesta HTTP en un `ApiFailure` con status 0."""

    if isinstance(exc, RequestAborted):
        reason = exc.reason
        detail = str(reason) if reason is not None and str(reason) else None
        error = ApiError(status=0, message=ABORTED_MESSAGE, detail=detail)
        return ApiFailure(error=error, message=ABORTED_MESSAGE)

    message = str(exc) or NETWORK_ERROR_MESSAGE
    return ApiFailure(error=ApiError(status=0, message=message), message=message)

"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Las factorías del cliente leen la config una sola vez y la congelan en un
  `ClientConfig`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import DEFAULT_TIMEOUT_MS, BodyMode

APP_DIR_NAME = "api-client"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# api-client user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI y factorías del cliente.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_CLIENT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="",
        description="URL base del backend; se antepone a cada path.",
    )
    default_mode: BodyMode = Field(
        default=BodyMode.JSON,
        description="Modo de serialización por defecto (json/form/urlencoded).",
    )
    request_timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        description="Timeout por request (milisegundos). Un valor <= 0 lo desactiva.",
    )
    user_agent: str = Field(
        default="backend-api-client/0.1",
        min_length=1,
        description="User-Agent para las peticiones.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging de la CLI.",
    )

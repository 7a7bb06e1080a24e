"""Configuración de where-in-the-world.

Todo se lee de variables `WITW_*` (pydantic-settings): primero un `.env` del
directorio actual y después el `.env` de usuario que escribe `doctor configure`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "where-in-the-world"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario según la plataforma."""

    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA", str(Path.home()))) / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
    xdg = os.environ.get("XDG_CONFIG_HOME")
    return (Path(xdg) if xdg else Path.home() / ".config") / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for line in (raw.strip() for raw in text.splitlines()):
        if line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if sep and key.strip():
            pairs[key.strip()] = value.strip().strip("'\"")
    return pairs


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Fusiona `values` con el `.env` de usuario y lo reescribe ordenado."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    merged = _parse_env_lines(env_path.read_text(encoding="utf-8")) if env_path.exists() else {}
    merged.update({k: v for k, v in values.items() if v is not None})

    body = "".join(f"{key}={merged[key]}\n" for key in sorted(merged))
    env_path.write_text("# where-in-the-world user config (.env)\n" + body, encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Ajustes de red, límites de resultados y almacenamiento local.

    Las variables vacías se ignoran, así `WITW_REGION_RESULT_CAP=` deja el
    valor por defecto en lugar de fallar la validación.
    """

    model_config = SettingsConfigDict(
        env_prefix="WITW_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    api_base_url: str = Field(
        default="https://restcountries.com/v3.1",
        min_length=8,
        description="Base URL de la API REST Countries.",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="where-in-the-world/0.1",
        min_length=1,
        description="User-Agent para peticiones a la API.",
    )

    result_cap: int = Field(
        default=250,
        ge=1,
        description="Máximo de países mostrados en los modos ALL/NAME.",
    )
    region_result_cap: int | None = Field(
        default=None,
        ge=1,
        description="Máximo de países en modo REGION (None = sin límite).",
    )
    exact_first_search: bool = Field(
        default=True,
        description="La primera búsqueda tras el listado completo usa coincidencia exacta.",
    )
    borders_degrade_on_error: bool = Field(
        default=False,
        description="Si falla la consulta de fronteras, mostrar el detalle sin vecinos.",
    )

    storage_path: Path | None = Field(
        default=None,
        description="Ruta del almacenamiento local de preferencias (JSON).",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    def resolved_storage_path(self) -> Path:
        return self.storage_path or get_user_config_dir() / "local_storage.json"

"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la API/CLI.
- Permite que adaptadores (HTTP/DNS/cache) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_cache_dir() -> Path:
    """Directorio de cache por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("LOCALAPPDATA", str(Path.home())))
        return base / "up-down" / "cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / "up-down"

    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg) / "up-down"
    return Path.home() / ".cache" / "up-down"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para API/CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="UPDOWN_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # `API_KEY` y `CACHE_TTL_SECONDS` se aceptan también sin prefijo.
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("UPDOWN_API_KEY", "API_KEY", "api_key"),
        description="Secreto esperado en el header `x-api-key`.",
    )
    cache_ttl_seconds: int = Field(
        default=600,
        ge=0,
        validation_alias=AliasChoices(
            "UPDOWN_CACHE_TTL_SECONDS", "CACHE_TTL_SECONDS", "cache_ttl_seconds"
        ),
        description="TTL de las respuestas cacheadas (segundos).",
    )
    cache_enabled: bool = Field(
        default=True,
        description="Usar la cache de respuestas.",
    )
    cache_dir: Path = Field(
        default_factory=lambda: get_user_cache_dir() / "responses",
        description="Directorio de la cache en disco (diskcache).",
    )

    probe_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Tiempo máximo por probe antes de declararlo DOWN (segundos).",
    )
    user_agent: str = Field(
        default="up-down-workers/1.0",
        min_length=1,
        description="User-Agent de los probes.",
    )
    record_duration: bool = Field(
        default=True,
        description="Registrar `duration_ms` en cada resultado.",
    )

    dns_check_enabled: bool = Field(
        default=False,
        description="Consultar DNS-over-HTTPS antes de probar el host.",
    )
    dns_resolver_url: str = Field(
        default="https://cloudflare-dns.com/dns-query",
        min_length=8,
        description="Endpoint DoH con API JSON (application/dns-json).",
    )
    dns_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout de la consulta DoH; si vence, se sigue sin check.",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING...).",
    )
    host: str = Field(default="127.0.0.1", description="Host de `serve`.")
    port: int = Field(default=8787, ge=1, le=65535, description="Puerto de `serve`.")

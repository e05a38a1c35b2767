"""Contrato del almacén de respuestas cacheadas."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import CachedResponse


@runtime_checkable
class ResponseStore(Protocol):
    """Almacén clave/valor con TTL, opaco para la aplicación.

    Las implementaciones pueden lanzar; quien las usa trata cualquier error de
    lectura como un miss y descarta los errores de escritura.
    """

    def get(self, key: str) -> CachedResponse | None:
        ...

    def put(self, key: str, entry: CachedResponse, ttl_seconds: int) -> None:
        ...

    def close(self) -> None:
        ...

"""Cache de respuestas sobre diskcache.

Por qué diskcache:
- TTL por entrada (`expire`) y seguro entre procesos/threads (SQLite), así que
  varios workers WSGI pueden compartir el mismo directorio.
- Se guarda el dict serializado del modelo, no el objeto pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path

import diskcache

from core.domain.models import CachedResponse

logger = logging.getLogger(__name__)

NAMESPACE = "response"


class DiskResponseCache:
    """Implementación de `ResponseStore` sobre `diskcache.Cache`."""

    def __init__(self, cache_dir: Path, timeout: float = 5.0) -> None:
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(str(self.cache_dir), timeout=timeout)

    def _make_key(self, key: str) -> str:
        return f"{NAMESPACE}:{key}"

    def get(self, key: str) -> CachedResponse | None:
        raw = self._cache.get(self._make_key(key))
        if raw is None:
            return None
        return CachedResponse.model_validate(raw)

    def put(self, key: str, entry: CachedResponse, ttl_seconds: int) -> None:
        self._cache.set(self._make_key(key), entry.model_dump(mode="json"), expire=ttl_seconds)

    def delete(self, key: str) -> bool:
        return bool(self._cache.delete(self._make_key(key)))

    def clear(self) -> int:
        return self._cache.clear()

    def close(self) -> None:
        self._cache.close()


class NullResponseCache:
    """Cache desactivada: siempre miss, descarta escrituras."""

    def get(self, key: str) -> CachedResponse | None:
        return None

    def put(self, key: str, entry: CachedResponse, ttl_seconds: int) -> None:
        return None

    def close(self) -> None:
        return None

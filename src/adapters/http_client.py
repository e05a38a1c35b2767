"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza headers y redirects para probes y consultas DoH.
- Facilita testeo: se puede inyectar un `transport` (p.ej. `httpx.MockTransport`).

Sin timeout propio: el único límite de un probe es la carrera de
`adapters.prober`, y el gate DNS aplica el suyo.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con el User-Agent de los probes.

    Por qué un builder:
    - Centraliza headers para que probes y gate DNS se comporten igual.
    - Un cliente por petición: se cierra al terminar y no comparte estado.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(None),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )

"""Gate de seguridad DNS-over-HTTPS.

Consulta la API JSON de un resolver DoH (`?name=<host>`,
`Accept: application/dns-json`) y lee el campo numérico `Status` (RCODE).

Política asimétrica:
- la consulta no se pudo completar (red, timeout, JSON inválido, sin `Status`)
  => fail-open: se prueba igual, como si no hubiera check
- `Status` != 0 => fail-closed: `DomainCheckFailed` antes de cualquier probe
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.errors import DomainCheckFailed

logger = logging.getLogger(__name__)

DNS_JSON = "application/dns-json"


class DomainSafetyGate:
    def __init__(self, client: httpx.AsyncClient, settings: AppSettings | None = None) -> None:
        self._client = client
        self._settings = settings or AppSettings()

    async def _query(self, host: str) -> Any:
        resp = await self._client.get(
            self._settings.dns_resolver_url,
            params={"name": host},
            headers={"Accept": DNS_JSON},
        )
        return resp.json()

    async def lookup_status(self, host: str) -> int | None:
        """Devuelve el `Status` DNS, o None si la consulta no fue concluyente."""

        try:
            payload = await asyncio.wait_for(
                self._query(host), timeout=self._settings.dns_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning("DNS check for %s timed out; probing anyway", host)
            return None
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.warning("DNS check for %s failed (%s); probing anyway", host, exc)
            return None

        status = payload.get("Status") if isinstance(payload, dict) else None
        if not isinstance(status, int) or isinstance(status, bool):
            logger.warning("DNS check for %s returned no usable Status; probing anyway", host)
            return None
        return status

    async def check(self, host: str) -> None:
        """Lanza `DomainCheckFailed` si el resolver responde con Status != 0."""

        status = await self.lookup_status(host.strip("[]"))
        if status is not None and status != 0:
            logger.info("DNS check vetoed %s (Status=%s)", host, status)
            raise DomainCheckFailed(status, host)

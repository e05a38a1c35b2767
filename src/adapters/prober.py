"""Ejecutor de probes HTTP.

Implementación:
- `GET` con el User-Agent fijo; la respuesta se abre en modo stream y se
  cierra sin leer el body (solo interesa el código).
- Carrera contra `probe_timeout_seconds` con `asyncio.wait_for`: si vence el
  timer, la tarea HTTP se cancela y httpx libera la conexión.

Resultados posibles (exactamente uno):
- respuesta recibida => UP si el código está en [200, 400), si no DOWN
- error de transporte => DOWN, "Network Error: ..."
- timeout            => DOWN, "Request to origin timed-out after N secs."
"""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from core.config import AppSettings
from core.domain.models import Candidate, ProbeResult, ProbeStatus

logger = logging.getLogger(__name__)


def classify_status(status_code: int) -> ProbeStatus:
    return ProbeStatus.UP if 200 <= status_code < 400 else ProbeStatus.DOWN


def timeout_text(timeout_seconds: float) -> str:
    return f"Request to origin timed-out after {timeout_seconds:g} secs."


def _describe(exc: Exception) -> str:
    # Algunos errores de httpcore llegan sin mensaje.
    return str(exc) or type(exc).__name__


class HttpProber:
    """Prueba candidatos con un `httpx.AsyncClient` compartido.

    El cliente pertenece a quien crea el prober (normalmente el pipeline),
    que es quien lo cierra.
    """

    def __init__(self, client: httpx.AsyncClient, settings: AppSettings | None = None) -> None:
        self._client = client
        self._settings = settings or AppSettings()

    async def _fetch_status(self, url: str) -> int:
        request = self._client.build_request("GET", url)
        response = await self._client.send(request, stream=True)
        try:
            return response.status_code
        finally:
            await response.aclose()

    async def probe(self, candidate: Candidate) -> ProbeResult:
        timeout = self._settings.probe_timeout_seconds
        status_code: int | None = None
        status_text = ""

        start = time.perf_counter()
        try:
            status_code = await asyncio.wait_for(self._fetch_status(candidate.url), timeout=timeout)
            status = classify_status(status_code)
        except asyncio.TimeoutError:
            status = ProbeStatus.DOWN
            status_text = timeout_text(timeout)
        except httpx.TransportError as exc:
            status = ProbeStatus.DOWN
            status_text = f"Network Error: {_describe(exc)}"
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            status = ProbeStatus.DOWN
            status_text = f"Fetch to origin error: {_describe(exc)}"
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        logger.debug(
            "Probe %s %s -> %s (%s) in %sms",
            candidate.kind.value,
            candidate.url,
            status.value,
            status_code if status_code is not None else status_text,
            elapsed_ms,
        )

        return ProbeResult(
            kind=candidate.kind,
            url=candidate.url,
            status=status,
            status_code=status_code,
            status_text=status_text,
            duration_ms=elapsed_ms if self._settings.record_duration else None,
        )

"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- La serialización JSON de la respuesta sale directamente de los modelos.

Nota:
- Estos modelos describen *qué* es un resultado, no *cómo* se obtiene.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


CACHE_HEADER = "X-Worker-Cache"


class CandidateKind(str, Enum):
    """Origen de un candidato: el host tal cual o su dominio registrable."""

    HOST = "host"
    DOMAIN = "domain"


class ProbeStatus(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


class CheckRequest(BaseModel):
    """Entrada de la API (query `?url=` o body JSON `{"url": ...}`)."""

    url: str = Field(
        ...,
        description="URL a comprobar; puede venir sin esquema.",
    )


class Candidate(BaseModel):
    """URL a probar, derivada de la entrada normalizada.

    Inmutable: se genera una vez y el agregador la consume una sola vez.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="`scheme://host` a probar.")
    kind: CandidateKind = Field(..., description="Host original o dominio registrable.")


class ProbeResult(BaseModel):
    """Resultado de un único probe.

    Un fallo del probe (status >= 400, error de red, timeout) es un dato del
    dominio (`DOWN`), no un error de la petición.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: CandidateKind = Field(
        ...,
        serialization_alias="type",
        validation_alias="type",
        description="Tipo del candidato probado.",
    )
    url: str = Field(..., description="URL probada.")
    status: ProbeStatus = Field(..., description="UP si el código está en [200, 400).")
    status_code: int | None = Field(
        default=None,
        ge=0,
        description="Código HTTP recibido; ausente si no hubo respuesta.",
    )
    status_text: str = Field(
        default="",
        description="Motivo legible cuando no hubo respuesta HTTP.",
    )
    duration_ms: int | None = Field(
        default=None,
        ge=0,
        description="Tiempo transcurrido (ms). Telemetría, no se usa para decidir.",
    )

    @property
    def is_up(self) -> bool:
        return self.status is ProbeStatus.UP


class FinalResponse(BaseModel):
    """Cuerpo de la respuesta: la traza de probes hasta el primer UP."""

    requested_url: str = Field(..., description="URL normalizada (clave de cache).")
    results: list[ProbeResult] = Field(
        default_factory=list,
        description="Resultados en orden de probe, truncados tras el primer UP.",
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class CachedResponse(BaseModel):
    """Respuesta serializada tal y como se guarda en la cache."""

    status_code: int = Field(default=200, ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = Field(..., description="FinalResponse serializada (JSON).")

    def with_cache_marker(self, value: str) -> "CachedResponse":
        """Copia con `X-Worker-Cache` sobrescrito (sin tocar el resto)."""

        headers = {
            k: v for k, v in self.headers.items() if k.lower() != CACHE_HEADER.lower()
        }
        headers[CACHE_HEADER] = value
        return self.model_copy(update={"headers": headers})

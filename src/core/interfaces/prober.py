"""Contratos del probe HTTP.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el agregador sea testeable con probers falsos, sin red.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Candidate, ProbeResult


@runtime_checkable
class Prober(Protocol):
    """Contrato mínimo para un ejecutor de probes.

    Reglas de diseño:
    - `probe` es asíncrono porque hace I/O (HTTP).
    - Nunca lanza por fallos del origen: los devuelve como `DOWN`.
    """

    async def probe(self, candidate: Candidate) -> ProbeResult:
        """Prueba un candidato y devuelve el resultado normalizado."""

        ...

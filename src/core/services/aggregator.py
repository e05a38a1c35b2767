"""Agregación secuencial de probes con corte en el primer UP."""

from __future__ import annotations

import logging
from typing import Iterable

from core.domain.models import Candidate, ProbeResult
from core.interfaces.prober import Prober

logger = logging.getLogger(__name__)


async def run_probes(candidates: Iterable[Candidate], prober: Prober) -> list[ProbeResult]:
    """Prueba los candidatos en orden, uno a uno.

    El dominio solo aporta información si el host falló, así que nunca se
    prueban en paralelo: en cuanto uno está UP se deja de probar.
    """

    results: list[ProbeResult] = []
    for candidate in candidates:
        result = await prober.probe(candidate)
        results.append(result)
        if result.is_up:
            logger.debug("Short-circuit on %s (%s)", candidate.url, candidate.kind.value)
            break
    return results

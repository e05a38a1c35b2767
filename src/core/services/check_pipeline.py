"""Orquestación de una comprobación UP/DOWN.

This module wires the probing engine for a single request so that every
entry-point (the WSGI API, the CLI, tests) runs the exact same flow:

1. normalize the raw input (the normalized string is the cache key)
2. cache lookup; a HIT returns the stored response with `X-Worker-Cache: HIT`
3. optional DNS-over-HTTPS safety gate
4. candidates (host, registrable domain) probed sequentially
5. the MISS response is returned together with a deferred cache write

The cache write is *not* executed here. The caller runs
`CheckOutcome.pending_write` once the response has been delivered; its
failures are logged and never reach the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable

import httpx

from adapters.dns_gate import DomainSafetyGate
from adapters.http_client import build_async_client
from adapters.prober import HttpProber
from core.config import AppSettings
from core.domain.models import CACHE_HEADER, CachedResponse, FinalResponse
from core.interfaces.cache import ResponseStore
from core.services.aggregator import run_probes
from core.services.candidates import build_candidates, extract_host, normalize_url

logger = logging.getLogger(__name__)

CACHE_HIT = "HIT"
CACHE_MISS = "MISS"


@dataclass
class CheckOutcome:
    """Output of a pipeline invocation."""

    cache_key: str
    response: CachedResponse
    pending_write: Callable[[], None] | None = None

    @property
    def cache_status(self) -> str:
        return self.response.headers.get(CACHE_HEADER, CACHE_MISS)

    @property
    def final(self) -> FinalResponse:
        return FinalResponse.model_validate_json(self.response.body)


def _cache_get(cache: ResponseStore, key: str) -> CachedResponse | None:
    try:
        return cache.get(key)
    except Exception as exc:
        # Un error de lectura se trata igual que un miss.
        logger.warning("Cache read failed for %s: %s", key, exc)
        return None


def _cache_put(cache: ResponseStore, key: str, entry: CachedResponse, ttl_seconds: int) -> None:
    try:
        cache.put(key, entry, ttl_seconds)
        logger.debug("Cached %s for %ss", key, ttl_seconds)
    except Exception as exc:
        logger.warning("Cache write failed for %s: %s", key, exc)


def build_miss_response(final: FinalResponse, ttl_seconds: int) -> CachedResponse:
    return CachedResponse(
        status_code=200,
        headers={
            "Content-Type": "application/json",
            "Cache-Control": f"max-age={ttl_seconds}",
            CACHE_HEADER: CACHE_MISS,
        },
        body=final.to_json(),
    )


async def run_check(
    raw_url: str,
    *,
    settings: AppSettings | None = None,
    cache: ResponseStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CheckOutcome:
    """Run the full check for `raw_url`.

    Raises `InvalidUrl`, `MissingHost` or `DomainCheckFailed`; probe failures
    are returned as `DOWN` results instead.
    """

    settings = settings or AppSettings()
    target = normalize_url(raw_url)

    if cache is not None:
        cached = _cache_get(cache, target)
        if cached is not None:
            logger.info("Cache %s %s", CACHE_HIT, target)
            return CheckOutcome(cache_key=target, response=cached.with_cache_marker(CACHE_HIT))

    host = extract_host(target)
    candidates = build_candidates(target)

    async with build_async_client(settings, transport=transport) as client:
        if settings.dns_check_enabled:
            await DomainSafetyGate(client, settings).check(host)
        results = await run_probes(candidates, HttpProber(client, settings))

    final = FinalResponse(requested_url=target, results=results)
    ttl = settings.cache_ttl_seconds
    response = build_miss_response(final, ttl)
    logger.info(
        "Cache %s %s -> %s",
        CACHE_MISS,
        target,
        ", ".join(f"{r.kind.value}={r.status.value}" for r in results),
    )

    pending_write: Callable[[], None] | None = None
    if cache is not None:
        pending_write = partial(_cache_put, cache, target, response, ttl)

    return CheckOutcome(cache_key=target, response=response, pending_write=pending_write)

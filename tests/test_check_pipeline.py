"""
Tests for the end-to-end check pipeline (cache, DNS gate, probes).
"""

import asyncio
import json

import httpx
import pytest

from adapters.response_cache import DiskResponseCache
from core.domain.errors import DomainCheckFailed, MissingHost
from core.services.check_pipeline import run_check


def _run(settings, fake, url, cache=None):
    return asyncio.run(run_check(url, settings=settings, cache=cache, transport=fake.transport()))


class BrokenCache:
    """A store whose reads and writes always fail."""

    def __init__(self):
        self.put_calls = 0

    def get(self, key):
        raise OSError("disk on fire")

    def put(self, key, entry, ttl_seconds):
        self.put_calls += 1
        raise OSError("disk on fire")


def test_end_to_end_bare_host(settings, origins):
    fake = origins({"example.com": 200})

    outcome = _run(settings, fake, "example.com")

    body = json.loads(outcome.response.body)
    assert body["requested_url"] == "https://example.com/"
    assert len(body["results"]) == 1
    result = body["results"][0]
    assert result["type"] == "host"
    assert result["url"] == "https://example.com"
    assert result["status"] == "UP"
    assert result["status_code"] == 200
    assert result["status_text"] == ""
    assert isinstance(result["duration_ms"], int)
    assert outcome.cache_status == "MISS"
    assert outcome.response.headers["Cache-Control"] == "max-age=600"


def test_body_field_order(settings, origins):
    fake = origins({"example.com": 200})

    outcome = _run(settings, fake, "example.com")

    result = json.loads(outcome.response.body)["results"][0]
    assert list(result) == ["type", "url", "status", "status_code", "status_text", "duration_ms"]


def test_host_up_never_probes_domain(settings, origins):
    fake = origins({"sub.example.co.uk": 200, "example.co.uk": 200})

    outcome = _run(settings, fake, "https://sub.example.co.uk/page")

    assert fake.hosts() == ["sub.example.co.uk"]
    assert len(outcome.final.results) == 1


def test_host_down_probes_domain(settings, origins):
    fake = origins({"sub.example.co.uk": httpx.ConnectError("refused"), "example.co.uk": 200})

    outcome = _run(settings, fake, "sub.example.co.uk")

    results = outcome.final.results
    assert [r.kind.value for r in results] == ["host", "domain"]
    assert [r.status.value for r in results] == ["DOWN", "UP"]
    assert results[0].status_text == "Network Error: refused"


def test_probe_failures_are_data_not_errors(settings, origins):
    fake = origins({})

    outcome = _run(settings, fake, "www.example.com")

    assert outcome.response.status_code == 200
    assert [r.status.value for r in outcome.final.results] == ["DOWN", "DOWN"]


def test_missing_host_is_fatal(settings, origins):
    fake = origins({})

    with pytest.raises(MissingHost):
        _run(settings, fake, "https://")
    assert fake.requests == []


def test_second_request_hits_cache(settings, origins):
    cache = DiskResponseCache(settings.cache_dir)
    fake = origins({"example.com": 200})

    first = _run(settings, fake, "example.com", cache=cache)
    assert first.cache_status == "MISS"
    assert cache.get(first.cache_key) is None
    first.pending_write()

    second = _run(settings, fake, "https://example.com/", cache=cache)

    assert second.cache_status == "HIT"
    assert second.response.body == first.response.body
    assert second.response.headers["Cache-Control"] == "max-age=600"
    assert fake.hosts() == ["example.com"]
    cache.close()


def test_cache_key_is_normalized_url(settings, origins):
    cache = DiskResponseCache(settings.cache_dir)
    fake = origins({"example.com": 200})

    outcome = _run(settings, fake, "EXAMPLE.com", cache=cache)
    outcome.pending_write()

    assert outcome.cache_key == "https://example.com/"
    assert cache.get("https://example.com/") is not None
    assert cache.get("EXAMPLE.com") is None
    cache.close()


def test_ttl_comes_from_settings(settings, origins):
    fake = origins({"example.com": 200})
    short = settings.model_copy(update={"cache_ttl_seconds": 30})

    outcome = _run(short, fake, "example.com")

    assert outcome.response.headers["Cache-Control"] == "max-age=30"


def test_broken_cache_is_treated_as_miss(settings, origins):
    cache = BrokenCache()
    fake = origins({"example.com": 200})

    outcome = _run(settings, fake, "example.com", cache=cache)
    outcome.pending_write()

    assert outcome.cache_status == "MISS"
    assert outcome.final.results[0].status.value == "UP"
    assert cache.put_calls == 1


def test_no_cache_means_no_pending_write(settings, origins):
    fake = origins({"example.com": 200})

    outcome = _run(settings, fake, "example.com")

    assert outcome.pending_write is None


def test_dns_veto_blocks_every_probe(settings, origins):
    async def nxdomain(request):
        return httpx.Response(200, json={"Status": 3})

    fake = origins({"cloudflare-dns.com": nxdomain, "example.com": 200})
    gated = settings.model_copy(update={"dns_check_enabled": True})

    with pytest.raises(DomainCheckFailed) as excinfo:
        _run(gated, fake, "example.com")

    assert excinfo.value.status == 3
    assert fake.hosts() == ["cloudflare-dns.com"]


def test_dns_transport_error_still_probes(settings, origins):
    fake = origins({"cloudflare-dns.com": httpx.ConnectError("down"), "example.com": 200})
    gated = settings.model_copy(update={"dns_check_enabled": True})

    outcome = _run(gated, fake, "example.com")

    assert fake.hosts() == ["cloudflare-dns.com", "example.com"]
    assert outcome.final.results[0].status.value == "UP"


def test_dns_gate_skipped_when_disabled(settings, origins):
    fake = origins({"example.com": 200})

    _run(settings, fake, "example.com")

    assert "cloudflare-dns.com" not in fake.hosts()

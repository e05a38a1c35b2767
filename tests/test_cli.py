"""
Tests for the Typer CLI (`check` command).
"""

import json

from typer.testing import CliRunner

from cli.main import app
from core.domain.errors import DomainCheckFailed
from core.domain.models import CandidateKind, FinalResponse, ProbeResult, ProbeStatus
from core.services.check_pipeline import CheckOutcome, build_miss_response

runner = CliRunner()


def _outcome(url="https://example.com/"):
    final = FinalResponse(
        requested_url=url,
        results=[
            ProbeResult(
                kind=CandidateKind.HOST,
                url="https://example.com",
                status=ProbeStatus.UP,
                status_code=200,
                duration_ms=12,
            )
        ],
    )
    return CheckOutcome(cache_key=url, response=build_miss_response(final, 600))


def test_check_json_output(monkeypatch):
    seen = {}

    async def fake_run_check(url, *, settings=None, cache=None, transport=None):
        seen["url"] = url
        seen["cache"] = cache
        return _outcome()

    monkeypatch.setattr("cli.main.run_check", fake_run_check)

    result = runner.invoke(app, ["check", "example.com", "--json", "--no-cache"])

    assert result.exit_code == 0, result.output
    body = json.loads(result.stdout)
    assert body["requested_url"] == "https://example.com/"
    assert body["results"][0]["type"] == "host"
    assert seen == {"url": "example.com", "cache": None}


def test_check_table_output(monkeypatch):
    async def fake_run_check(url, *, settings=None, cache=None, transport=None):
        return _outcome()

    monkeypatch.setattr("cli.main.run_check", fake_run_check)

    result = runner.invoke(app, ["check", "example.com", "--quiet", "--no-cache"])

    assert result.exit_code == 0, result.output
    assert "UP" in result.stdout
    assert "host" in result.stdout


def test_check_dns_veto_exits_nonzero(monkeypatch):
    async def fake_run_check(url, *, settings=None, cache=None, transport=None):
        assert settings.dns_check_enabled is True
        raise DomainCheckFailed(3, "example.com")

    monkeypatch.setattr("cli.main.run_check", fake_run_check)

    result = runner.invoke(app, ["check", "example.com", "--json", "--no-cache", "--dns-check"])

    assert result.exit_code == 2


class RecordingCache:
    def __init__(self):
        self.writes = []
        self.closed = False

    def get(self, key):
        return None

    def put(self, key, entry, ttl_seconds):
        self.writes.append(key)

    def close(self):
        self.closed = True


def test_check_writes_and_closes_cache(monkeypatch):
    cache = RecordingCache()

    async def fake_run_check(url, *, settings=None, cache=None, transport=None):
        outcome = _outcome()
        outcome.pending_write = lambda: cache.put(outcome.cache_key, outcome.response, 600)
        return outcome

    monkeypatch.setattr("cli.main.build_cache", lambda settings: cache)
    monkeypatch.setattr("cli.main.run_check", fake_run_check)

    result = runner.invoke(app, ["check", "example.com", "--json"])

    assert result.exit_code == 0, result.output
    assert cache.writes == ["https://example.com/"]
    assert cache.closed is True


def test_check_closes_cache_on_error(monkeypatch):
    cache = RecordingCache()

    async def fake_run_check(url, *, settings=None, cache=None, transport=None):
        raise DomainCheckFailed(3, "example.com")

    monkeypatch.setattr("cli.main.build_cache", lambda settings: cache)
    monkeypatch.setattr("cli.main.run_check", fake_run_check)

    result = runner.invoke(app, ["check", "example.com", "--json"])

    assert result.exit_code == 2
    assert cache.closed is True

"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import uuid

import typer
from rich.console import Console
from rich.table import Table

from adapters.dns_gate import DomainSafetyGate
from adapters.http_client import build_async_client
from adapters.response_cache import DiskResponseCache
from core.config import AppSettings
from core.domain.models import CachedResponse
from core.services.candidates import registrable_domain

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


async def _check_dns(host: str, settings: AppSettings) -> tuple[bool, str]:
    async with build_async_client(settings) as client:
        status = await DomainSafetyGate(client, settings).lookup_status(host)
    if status is None:
        return False, "no usable answer (gate would fail open)"
    return status == 0, f"Status {status}"


def _check_cache(settings: AppSettings) -> tuple[bool, str]:
    """Round-trip a throwaway entry to detect permission/SQLite issues."""

    try:
        cache = DiskResponseCache(settings.cache_dir)
        key = f"doctor:{uuid.uuid4().hex}"
        cache.put(key, CachedResponse(body="{}"), ttl_seconds=5)
        ok = cache.get(key) is not None
        cache.delete(key)
        cache.close()
        return ok, str(settings.cache_dir)
    except Exception as exc:
        return False, str(exc)


def _check_psl() -> tuple[bool, str]:
    domain = registrable_domain("sub.example.co.uk")
    return domain == "example.co.uk", f"sub.example.co.uk -> {domain}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="UP-DOWN Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.api_key:
        table.add_row("API key", "OK", "x-api-key required on every request")
    else:
        table.add_row("API key", "FAIL", "No API_KEY set -> every request gets 401")
    table.add_row("Cache TTL", "OK", f"{settings.cache_ttl_seconds}s")
    table.add_row("Probe timeout", "OK", f"{settings.probe_timeout_seconds:g}s")

    # Cache
    if settings.cache_enabled:
        ok_cache, detail_cache = _check_cache(settings)
        table.add_row("Response cache", "OK" if ok_cache else "FAIL", detail_cache)
    else:
        table.add_row("Response cache", "OFF", "UPDOWN_CACHE_ENABLED=false")

    # Public Suffix List (snapshot local)
    ok_psl, detail_psl = _check_psl()
    table.add_row("Public Suffix List", "OK" if ok_psl else "FAIL", detail_psl)

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http("https://example.com", settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    if settings.dns_check_enabled:
        ok_dns, detail_dns = asyncio.run(_check_dns("example.com", settings))
        table.add_row("DNS-over-HTTPS", "OK" if ok_dns else "FAIL", detail_dns)
    else:
        table.add_row("DNS-over-HTTPS", "OFF", "UPDOWN_DNS_CHECK_ENABLED=false")

    _console.print(table)

    if not settings.api_key:
        _console.print("\n[yellow]Note:[/yellow] Set `API_KEY` (or `UPDOWN_API_KEY`) before `serve`.")


@app.command(name="clear-cache")
def clear_cache() -> None:
    """Drop every cached response."""

    settings = AppSettings()
    cache = DiskResponseCache(settings.cache_dir)
    removed = cache.clear()
    cache.close()
    _console.print(f"[green]Removed {removed} cached responses from:[/green] {settings.cache_dir}")

"""
Pytest configuration and shared fixtures for up-down tests.
"""

from __future__ import annotations

import httpx
import pytest

from core.config import AppSettings

API_KEY = "test-secret"


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and the user's `.env`."""
    return AppSettings(
        _env_file=None,
        api_key=API_KEY,
        cache_dir=tmp_path / "cache",
        cache_ttl_seconds=600,
        probe_timeout_seconds=60.0,
        dns_check_enabled=False,
    )


class FakeOrigins:
    """Routes requests by host to a status code, an exception or a handler.

    Records every request it sees so tests can assert what was (not) probed.
    """

    def __init__(self, routes: dict):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def hosts(self) -> list[str]:
        return [r.url.host for r in self.requests]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.host)
        if route is None:
            raise httpx.ConnectError("Name or service not known", request=request)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, int):
            return httpx.Response(route)
        return await route(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def origins():
    def build(routes: dict) -> FakeOrigins:
        return FakeOrigins(routes)

    return build

"""Shared pytest fixtures.

Outbound HTTP never leaves the process: tools get an `httpx.AsyncClient`
backed by `httpx.MockTransport` routed through `StubUpstream`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from mcp import types

from jokes_mcp.config import get_settings


class StubUpstream:
    """Canned responses keyed by `scheme://host/path` (query string ignored)."""

    def __init__(self) -> None:
        self.routes: Dict[str, Tuple[int, Any]] = {}
        self.failures: Dict[str, Exception] = {}
        self.requests: List[httpx.Request] = []

    def add(self, url: str, payload: Any = None, status_code: int = 200) -> None:
        self.routes[url] = (status_code, payload)

    def fail(self, url: str, error: Optional[Exception] = None) -> None:
        self.failures[url] = error or httpx.ConnectError("connection refused")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        if key in self.failures:
            raise self.failures[key]
        if key not in self.routes:
            return httpx.Response(500, json={"error": f"no stub for {key}"})
        status_code, payload = self.routes[key]
        if isinstance(payload, (bytes, str)):
            return httpx.Response(status_code, content=payload)
        return httpx.Response(status_code, json=payload)


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def http_client(upstream: StubUpstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def texts_of(result: types.CallToolResult) -> List[str]:
    return [item.text for item in result.content if isinstance(item, types.TextContent)]

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import settings  # noqa: E402
from clients.matrimony import MatrimonyClient  # noqa: E402
from memory.store import clear_sessions  # noqa: E402

BASE_URL = "https://api.test/api"


@pytest.fixture(autouse=True)
def _isolated_telemetry(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep telemetry writes inside the test's temp dir."""

    monkeypatch.setattr(settings, "TELEMETRY_DB_PATH", str(tmp_path / "telemetry.sqlite3"))
    monkeypatch.setattr(settings, "TELEMETRY_ENABLED", True)


@pytest.fixture(autouse=True)
def _clear_wizard_sessions() -> None:
    clear_sessions()
    yield
    clear_sessions()


class FakeAPI:
    """
    Route table for httpx.MockTransport.

    Routes are keyed by (METHOD, path) where path excludes the base URL's
    `/api` prefix. Values are a JSON body, a (status, body) tuple, an
    exception instance to raise, or a callable(request) returning either.
    """

    def __init__(self, routes: Dict[Tuple[str, str], Any] | None = None):
        self.routes: Dict[Tuple[str, str], Any] = dict(routes or {})
        self.calls: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        route = self.routes.get((request.method, path))
        if callable(route):
            route = route(request)
        if isinstance(route, httpx.Response):
            return route
        if route is None:
            return httpx.Response(404, json={"status": "error", "message": "not found"})
        if isinstance(route, Exception):
            raise route
        if isinstance(route, tuple):
            status, body = route
            return httpx.Response(status, json=body)
        return httpx.Response(200, json=route)

    def paths(self, method: str | None = None) -> List[str]:
        out = []
        for r in self.calls:
            if method and r.method != method:
                continue
            p = r.url.path
            out.append(p[len("/api"):] if p.startswith("/api") else p)
        return out

    def client(self, token: str | None = "tok-123") -> MatrimonyClient:
        return MatrimonyClient(base_url=BASE_URL, token=token, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def make_fake_api() -> Callable[..., FakeAPI]:
    return FakeAPI

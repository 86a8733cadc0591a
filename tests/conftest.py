from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from leaseright.core.config import settings
from leaseright.main import app
from leaseright.services import backend_client, otp_service
from leaseright.services.local_store import AUTH_TOKENS, LocalStore

# (role, user id) pairs the header fixtures below sign in as
STANDARD_SESSIONS = (("company", "7"), ("vendor", "42"), ("admin", "1"))


class FakeBackend:
    """Answers backend calls from a table of ``(METHOD, path) -> response`` and records them."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response] | httpx.Response] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, json_body=None, text: str | None = None,
           content: bytes | None = None, headers: dict | None = None) -> None:
        if json_body is not None:
            response = httpx.Response(status, json=json_body, headers=headers)
        elif content is not None:
            response = httpx.Response(status, content=content, headers=headers)
        else:
            response = httpx.Response(status, text=text or "", headers=headers)
        self.routes[(method.upper(), path)] = response

    def on_call(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method.upper(), path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": f"no fake route for {request.method} {request.url.path}"})
        if callable(route):
            return route(request)
        return route

    def last(self, method: str, path: str) -> httpx.Request:
        for request in reversed(self.calls):
            if request.method == method and request.url.path == path:
                return request
        raise AssertionError(f"{method} {path} was never called")

    def last_json(self, method: str, path: str):
        return json.loads(self.last(method, path).content)


@pytest.fixture()
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    fake = FakeBackend()
    monkeypatch.setattr(settings, "USE_BACKEND_API", True)
    monkeypatch.setattr(
        backend_client,
        "_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(fake.handle), base_url=settings.BACKEND_BASE_URL),
    )
    return fake


@pytest.fixture()
def local_store(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    store_path = tmp_path / "store.json"
    monkeypatch.setattr(settings, "USE_BACKEND_API", False)
    monkeypatch.setattr(settings, "LOCAL_STORE_PATH", str(store_path))
    LocalStore(store_path).set(AUTH_TOKENS, {
        f"tok-{role}-{user_id}": {"userId": user_id, "role": role}
        for role, user_id in STANDARD_SESSIONS
    })
    return store_path


@pytest.fixture(autouse=True)
def _reset_pending_signups():
    otp_service.pending_signups.clear()
    yield
    otp_service.pending_signups.clear()


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def session_headers(role: str, user_id: str = "7", token: str | None = None, name: str | None = None) -> dict:
    token = token or f"tok-{role}-{user_id}"
    headers = {"Authorization": f"Bearer {token}", "X-User-Role": role, "X-User-Id": user_id}
    if name:
        headers["X-User-Name"] = name
    return headers


@pytest.fixture()
def company_headers() -> dict:
    return session_headers("company", "7")


@pytest.fixture()
def vendor_headers() -> dict:
    return session_headers("vendor", "42", name="Premium Auto Leasing")


@pytest.fixture()
def admin_headers() -> dict:
    return session_headers("admin", "1")

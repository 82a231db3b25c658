from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
import pytest

from loyalty_admin.app.application.notifications import NotificationChannel
from loyalty_admin.app.session_store import SessionStore
from loyalty_admin.clients.loyalty_sdk.config import SDKConfig
from loyalty_admin.clients.loyalty_sdk.http_client import HttpClient
from loyalty_admin.clients.loyalty_sdk.token_store import MemoryTokenStore, TokenStore

BASE_URL = "http://loyalty.test"
ADMIN = {"id": 7, "email": "owner@cafe.test", "firstName": "Ada", "lastName": "Lovelace", "isActive": True}

Responder = Callable[[httpx.Request], httpx.Response]


@dataclass
class RecordedCall:
    method: str
    path: str
    params: dict[str, str]
    body: Any
    headers: httpx.Headers


class FakeApi:
    """Routes requests by method and path to queued canned responses.

    Each route replays its responses in order and keeps repeating the last one.
    A response is a ``(status, json)`` tuple, a callable taking the request, or
    an exception instance to raise from the transport.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.calls: list[RecordedCall] = []

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes[(method.upper(), path)] = list(responses)

    def calls_to(self, method: str, path: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.method == method.upper() and call.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        try:
            body = json.loads(request.content) if request.content else None
        except ValueError:
            body = request.content
        self.calls.append(
            RecordedCall(
                method=request.method,
                path=request.url.path,
                params=dict(request.url.params),
                body=body,
                headers=request.headers,
            )
        )

        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            raise AssertionError(f"Unexpected call: {request.method} {request.url.path}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(request)
        status, payload = response
        return httpx.Response(status, json=payload)

    def http(self, token: str | None = None, token_store: TokenStore | None = None) -> HttpClient:
        client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))
        return HttpClient(
            config=SDKConfig(base_url=BASE_URL),
            token_store=token_store or MemoryTokenStore(token),
            client=client,
        )


@dataclass
class SignedIn:
    api: FakeApi
    http: HttpClient
    session: SessionStore
    notifications: NotificationChannel


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def signed_in(fake_api: FakeApi) -> SignedIn:
    fake_api.add("POST", "/api/auth/login", (200, {"success": True, "token": "tok-1", "admin": ADMIN}))
    http = fake_api.http()
    session = SessionStore(http)
    assert session.login(ADMIN["email"], "secret") is True
    return SignedIn(api=fake_api, http=http, session=session, notifications=NotificationChannel())


@pytest.fixture
def admin() -> dict[str, Any]:
    return dict(ADMIN)

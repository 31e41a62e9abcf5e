from __future__ import annotations

import itertools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from portfolio_admin.config import AdminSettings
from portfolio_admin.constants.resource_schemas import COUNTED_KINDS
from portfolio_admin.models.cards import Card
from portfolio_admin.services.context import UIContext
from portfolio_admin.services.modal import ModalBody

AUTH_PATHS = {"/api/auth/check", "/api/auth/login", "/api/auth/logout"}


@pytest.fixture
def anyio_backend() -> str:
    """Run async tests on asyncio only; the gateway schedules with loop.call_later."""
    return "asyncio"


# ---------------------------------------------------------------------------
# Fake views
# ---------------------------------------------------------------------------


class FakeRegion:
    """Records every list rendered into it, newest last."""

    def __init__(self) -> None:
        self.renders: list[list[Card]] = []
        self.kinds: list[str] = []

    def show_cards(self, kind: str, cards: list[Card]) -> None:
        self.kinds.append(kind)
        self.renders.append(list(cards))


class FakeCountsView:
    def __init__(self) -> None:
        self.rendered: list[dict[str, int]] = []

    def render_counts(self, counts: Mapping[str, int]) -> None:
        self.rendered.append(dict(counts))


class FakeProfileView:
    def __init__(self) -> None:
        self.values: dict[str, Any] | None = None
        self.image: str | None = None
        self.resume: str | None = "unset"

    def populate(self, values: dict[str, Any]) -> None:
        self.values = dict(values)

    def set_image(self, url: str) -> None:
        self.image = url

    def set_resume(self, url: str | None) -> None:
        self.resume = url


class FakeNotificationView:
    def __init__(self) -> None:
        self.shown: list[tuple[str, str]] = []
        self.cleared = 0

    def show_notification(self, message: str, kind: str) -> None:
        self.shown.append((message, kind))

    def clear_notification(self) -> None:
        self.cleared += 1


class FakeModalView:
    def __init__(self) -> None:
        self.shown: list[tuple[str, ModalBody]] = []
        self.hidden = 0

    def show(self, title: str, body: ModalBody) -> None:
        self.shown.append((title, body))

    def hide(self) -> None:
        self.hidden += 1


class FakeNavigator:
    def __init__(self) -> None:
        self.redirects = 0

    def redirect_to_login(self) -> None:
        self.redirects += 1


class FakeConfirm:
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    async def __call__(self, message: str) -> bool:
        self.prompts.append(message)
        return self.answer


@dataclass
class Harness:
    """A UIContext wired to fake views, plus handles to inspect them."""

    context: UIContext
    notifications: FakeNotificationView
    modal_view: FakeModalView
    navigator: FakeNavigator
    confirm: FakeConfirm

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.notifications.shown]

    @property
    def last_notification(self) -> tuple[str, str] | None:
        return self.notifications.shown[-1] if self.notifications.shown else None


def build_harness(
    transport: httpx.AsyncBaseTransport,
    *,
    confirm_answer: bool = True,
    redirect_delay: float = 0.0,
    **settings: Any,
) -> Harness:
    notifications = FakeNotificationView()
    modal_view = FakeModalView()
    navigator = FakeNavigator()
    confirm = FakeConfirm(confirm_answer)
    context = UIContext.create(
        AdminSettings(
            api_base_url="http://backend.test",
            redirect_delay_seconds=redirect_delay,
            **settings,
        ),
        navigator,
        confirm,
        notification_view=notifications,
        modal_view=modal_view,
        transport=transport,
    )
    return Harness(context, notifications, modal_view, navigator, confirm)


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------


@dataclass
class FakeBackend:
    """Minimal stand-in for the portfolio backend, served over ASGI."""

    collections: dict[str, list[dict[str, Any]]] = field(
        default_factory=lambda: {kind: [] for kind in COUNTED_KINDS}
    )
    profile: dict[str, Any] = field(default_factory=dict)
    authenticated: bool = True
    broken: set[str] = field(default_factory=set)
    received: list[tuple[str, str, Any]] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def seed(self, kind: str, *records: dict[str, Any]) -> None:
        self.collections[kind].extend(dict(record) for record in records)

    def calls(self, method: str | None = None, path: str | None = None) -> list[tuple[str, str, Any]]:
        return [
            call
            for call in self.received
            if (method is None or call[0] == method) and (path is None or call[1] == path)
        ]

    @staticmethod
    async def _read_body(request: Request) -> Any:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("multipart/form-data"):
            form = await request.form()
            return {
                key: value if isinstance(value, str) else f"file:{value.filename}"
                for key, value in form.multi_items()
            }
        if content_type.startswith("application/json"):
            return await request.json()
        return None

    def build_app(self) -> FastAPI:
        app = FastAPI()

        @app.middleware("http")
        async def require_session(request: Request, call_next: Callable[..., Any]) -> Any:
            if not self.authenticated and request.url.path not in AUTH_PATHS:
                return JSONResponse({"error": "Unauthorized"}, status_code=401)
            return await call_next(request)

        @app.get("/api/auth/check")
        async def auth_check() -> dict[str, Any]:
            return {"isAuthenticated": self.authenticated}

        @app.post("/api/auth/login")
        async def login(request: Request) -> Any:
            body = await request.json()
            self.received.append(("POST", "/api/auth/login", body))
            if body == {"username": "admin", "password": "secret"}:
                self.authenticated = True
                return {"success": True}
            return JSONResponse({"success": False, "error": "Invalid credentials"}, 401)

        @app.post("/api/auth/logout")
        async def logout() -> dict[str, Any]:
            self.received.append(("POST", "/api/auth/logout", None))
            self.authenticated = False
            return {"success": True}

        @app.get("/api/profile")
        async def get_profile() -> dict[str, Any]:
            return self.profile

        @app.put("/api/profile")
        async def put_profile(request: Request) -> dict[str, Any]:
            body = await request.json()
            self.received.append(("PUT", "/api/profile", body))
            self.profile = dict(body)
            return {"success": True}

        @app.post("/api/profile/{asset}")
        async def upload_asset(asset: str, request: Request) -> dict[str, Any]:
            body = await self._read_body(request)
            self.received.append(("POST", f"/api/profile/{asset}", body))
            filename = str(body.get(asset, "")).removeprefix("file:")
            path = f"/uploads/{filename}"
            self.profile[asset] = path
            return {"success": True, f"{asset}Path": path}

        @app.get("/api/{kind}")
        async def list_records(kind: str) -> Any:
            self.received.append(("GET", f"/api/{kind}", None))
            if kind in self.broken:
                return JSONResponse({"error": "boom"}, status_code=500)
            return self.collections.get(kind, [])

        @app.post("/api/{kind}")
        async def create_record(kind: str, request: Request) -> dict[str, Any]:
            body = await self._read_body(request)
            self.received.append(("POST", f"/api/{kind}", body))
            record_id = str(next(self._ids))
            self.collections.setdefault(kind, []).append({"id": record_id, **body})
            return {"success": True, "id": record_id}

        @app.put("/api/{kind}/{record_id}")
        async def update_record(kind: str, record_id: str, request: Request) -> Any:
            body = await self._read_body(request)
            self.received.append(("PUT", f"/api/{kind}/{record_id}", body))
            for record in self.collections.get(kind, []):
                if str(record.get("id")) == record_id:
                    record.update(body)
                    return {"success": True}
            return JSONResponse({"success": False, "error": "Not found"}, status_code=404)

        @app.delete("/api/{kind}/{record_id}")
        async def delete_record(kind: str, record_id: str) -> Any:
            self.received.append(("DELETE", f"/api/{kind}/{record_id}", None))
            records = self.collections.get(kind, [])
            remaining = [r for r in records if str(r.get("id")) != record_id]
            if len(remaining) == len(records):
                return JSONResponse({"success": False, "error": "Not found"}, status_code=404)
            self.collections[kind] = remaining
            return {"success": True}

        return app


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def harness(backend: FakeBackend) -> Harness:
    """Harness talking to the in-memory backend."""
    return build_harness(httpx.ASGITransport(app=backend.build_app()))


@pytest.fixture
def make_harness() -> Callable[..., Harness]:
    """Factory for harnesses over a custom transport (e.g. httpx.MockTransport)."""
    return build_harness


@pytest.fixture
def make_region() -> Callable[[], FakeRegion]:
    """Factory for fresh list regions; one per controller under test."""
    return FakeRegion


@pytest.fixture
def counts_view() -> FakeCountsView:
    return FakeCountsView()


@pytest.fixture
def profile_view() -> FakeProfileView:
    return FakeProfileView()


@pytest.fixture
def modal_view() -> FakeModalView:
    return FakeModalView()

"""Session-aware gateway for every backend call.

All requests share one ``httpx.AsyncClient`` so the session cookie set at
login rides along on every call. A 401 from any call starts the
session-expired flow exactly once: one notification, then one redirect to
the login surface after a short delay so the message can be read.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)

__all__ = [
    "SESSION_EXPIRED_MESSAGE",
    "ApiGateway",
    "Navigator",
    "Notifier",
    "error_message",
    "read_json_safe",
]

SESSION_EXPIRED_MESSAGE = "Your session has expired. Redirecting to login…"


class Notifier(Protocol):
    def notify(self, message: str, kind: str = "success") -> None: ...


class Navigator(Protocol):
    """Moves the operator to the login surface."""

    def redirect_to_login(self) -> None: ...


def read_json_safe(response: httpx.Response | None) -> Any:
    """Parse a JSON body, returning None when it is absent or malformed."""
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def error_message(response: httpx.Response | None, body: Any, fallback: str) -> str:
    """Best human-readable error for a failed call.

    Prefers a non-empty string ``error`` in the body, then the fallback
    tagged with the HTTP status, then the bare fallback.
    """
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, str) and error.strip():
            return error
    status = getattr(response, "status_code", None)
    if isinstance(status, int) and status:
        return f"{fallback} (HTTP {status})"
    return fallback


class ApiGateway:
    """Wraps the HTTP client, attaches the session and detects expiry."""

    def __init__(
        self,
        base_url: str,
        notifier: Notifier,
        navigator: Navigator,
        *,
        redirect_delay: float = 1.2,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._notifier = notifier
        self._navigator = navigator
        self._redirect_delay = redirect_delay
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )
        self._expired = False
        self._redirected = False
        self._redirect_handle: asyncio.TimerHandle | None = None

    @property
    def session_expired(self) -> bool:
        return self._expired

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    def url_for(self, path: str | None) -> str:
        """Absolute URL for an asset path served by the backend."""
        if not path:
            return ""
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return self.base_url + path

    async def request(
        self,
        path: str,
        method: str = "GET",
        *,
        json: Any = None,
        files: Any = None,
        headers: dict[str, str] | None = None,
        detect_expiry: bool = True,
    ) -> httpx.Response:
        """Issue one call. Transport errors propagate; HTTP statuses never raise.

        Args:
            path: Path under the backend origin, e.g. ``/api/skills``.
            method: HTTP method.
            json: JSON body.
            files: Multipart parts, in any shape httpx accepts.
            headers: Extra request headers.
            detect_expiry: Treat a 401 as an expired session. Off for the
                login call itself, where 401 just means bad credentials.

        Returns:
            The raw response, including 401 responses.
        """
        response = await self._client.request(
            method, path, json=json, files=files, headers=headers
        )
        logger.debug("%s %s -> %d", method, path, response.status_code)
        if detect_expiry and response.status_code == httpx.codes.UNAUTHORIZED:
            self._start_expiry_flow()
        return response

    def _start_expiry_flow(self) -> None:
        if self._expired:
            return
        self._expired = True
        logger.warning("Session expired; redirecting to login in %.1fs", self._redirect_delay)
        self._notifier.notify(SESSION_EXPIRED_MESSAGE, "error")
        loop = asyncio.get_running_loop()
        self._redirect_handle = loop.call_later(self._redirect_delay, self._fire_redirect)

    def _fire_redirect(self) -> None:
        self._redirect_handle = None
        self.redirect_to_login()

    def redirect_to_login(self) -> None:
        """Go to the login surface now; later calls are no-ops until restored."""
        if self._redirect_handle is not None:
            self._redirect_handle.cancel()
            self._redirect_handle = None
        self._expired = True
        if self._redirected:
            return
        self._redirected = True
        self._navigator.redirect_to_login()

    def session_restored(self) -> None:
        """Re-arm expiry detection after a successful login."""
        if self._redirect_handle is not None:
            self._redirect_handle.cancel()
            self._redirect_handle = None
        self._expired = False
        self._redirected = False

    async def aclose(self) -> None:
        await self._client.aclose()

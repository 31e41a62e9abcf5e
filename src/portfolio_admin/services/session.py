"""Session guard plus the login/logout calls behind the login surface."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from portfolio_admin.api.gateway import error_message, read_json_safe
from portfolio_admin.api.schemas import AuthStatus, parse_envelope
from portfolio_admin.constants.messages import LOGIN_FAILED, LOGOUT_FAILED, UNREACHABLE
from portfolio_admin.services.context import UIContext

logger = logging.getLogger(__name__)

__all__ = ["SessionGuard"]


class SessionGuard:
    """Fails closed: anything short of ``isAuthenticated: true`` redirects."""

    def __init__(self, context: UIContext) -> None:
        self._ctx = context

    async def check(self) -> bool:
        """One auth check. Redirects immediately when not authenticated."""
        try:
            response = await self._ctx.gateway.request("/api/auth/check")
            body = read_json_safe(response)
            status = AuthStatus.model_validate(body if isinstance(body, dict) else {})
        except httpx.RequestError:
            logger.warning("Auth check failed; treating session as invalid", exc_info=True)
            status = AuthStatus()
        except ValidationError:
            status = AuthStatus()

        if not status.is_authenticated:
            logger.info("No valid session; redirecting to login")
            self._ctx.gateway.redirect_to_login()
            return False
        return True

    async def login(self, username: str, password: str) -> bool:
        try:
            response = await self._ctx.gateway.request(
                "/api/auth/login",
                "POST",
                json={"username": username, "password": password},
                detect_expiry=False,
            )
        except httpx.RequestError:
            logger.warning("Login request failed", exc_info=True)
            self._ctx.notify(UNREACHABLE, "error")
            return False

        data = read_json_safe(response)
        if not parse_envelope(data).ok:
            self._ctx.notify(error_message(response, data, LOGIN_FAILED), "error")
            return False

        self._ctx.gateway.session_restored()
        return True

    async def logout(self) -> bool:
        try:
            await self._ctx.gateway.request("/api/auth/logout", "POST")
        except httpx.RequestError:
            logger.warning("Logout request failed", exc_info=True)
            self._ctx.notify(LOGOUT_FAILED, "error")
            return False
        self._ctx.gateway.redirect_to_login()
        return True

"""The shared UI context handed to every controller at construction."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from portfolio_admin.api.gateway import ApiGateway, Navigator
from portfolio_admin.config import AdminSettings
from portfolio_admin.services.modal import ModalController, ModalView
from portfolio_admin.services.notifications import NotificationCenter, NotificationView

__all__ = ["ConfirmPrompt", "UIContext"]

ConfirmPrompt = Callable[[str], Awaitable[bool]]


@dataclass(slots=True)
class UIContext:
    """Process-wide singletons: gateway, notification slot, modal slot, confirm prompt.

    Created once at startup and kept for the life of the app.
    """

    settings: AdminSettings
    gateway: ApiGateway
    notifications: NotificationCenter
    modal: ModalController
    confirm: ConfirmPrompt

    @classmethod
    def create(
        cls,
        settings: AdminSettings,
        navigator: Navigator,
        confirm: ConfirmPrompt,
        *,
        notification_view: NotificationView | None = None,
        modal_view: ModalView | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> UIContext:
        notifications = NotificationCenter(notification_view, settings.notification_seconds)
        gateway = ApiGateway(
            settings.api_base_url,
            notifications,
            navigator,
            redirect_delay=settings.redirect_delay_seconds,
            timeout=settings.request_timeout,
            transport=transport,
        )
        return cls(
            settings=settings,
            gateway=gateway,
            notifications=notifications,
            modal=ModalController(modal_view),
            confirm=confirm,
        )

    def notify(self, message: str, kind: str = "success") -> None:
        self.notifications.notify(message, kind)

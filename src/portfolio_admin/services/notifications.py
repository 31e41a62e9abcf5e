"""Single-slot, self-dismissing status notifications."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

__all__ = ["NOTIFICATION_KINDS", "Notification", "NotificationCenter", "NotificationView"]

NOTIFICATION_KINDS = ("success", "error")


class NotificationView(Protocol):
    def show_notification(self, message: str, kind: str) -> None: ...

    def clear_notification(self) -> None: ...


@dataclass(slots=True, frozen=True)
class Notification:
    message: str
    kind: str


class NotificationCenter:
    """Shows at most one notification; the latest one wins and restarts the timer."""

    def __init__(self, view: NotificationView | None = None, duration: float = 3.0) -> None:
        self._view = view
        self._duration = duration
        self._current: Notification | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def current(self) -> Notification | None:
        return self._current

    def attach(self, view: NotificationView) -> None:
        self._view = view

    def notify(self, message: str, kind: str = "success") -> None:
        """Replace the visible notification and schedule its dismissal.

        Raises:
            ValueError: If ``kind`` is not ``success`` or ``error``.
        """
        if kind not in NOTIFICATION_KINDS:
            raise ValueError(f"Unknown notification kind: {kind!r}")

        self._cancel_timer()
        self._current = Notification(message, kind)
        if kind == "error":
            logger.info("Notification (error): %s", message)
        if self._view is not None:
            self._view.show_notification(message, kind)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (e.g. called from plain sync code): stays until replaced.
            return
        self._timer = loop.call_later(self._duration, self.dismiss)

    def dismiss(self) -> None:
        self._cancel_timer()
        self._current = None
        if self._view is not None:
            self._view.clear_notification()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

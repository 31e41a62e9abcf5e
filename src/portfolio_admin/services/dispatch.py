"""Routes card and toolbar actions to controller methods.

Views render plain ``(kind, action, record_id)`` data on their buttons and
hand presses here instead of binding one callback per record.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

__all__ = ["ActionDispatcher"]

Handler = Callable[..., Any]


class ActionDispatcher:
    def __init__(self) -> None:
        self._handlers: dict[tuple[str, str], Handler] = {}

    def register(self, kind: str, action: str, handler: Handler) -> None:
        self._handlers[(kind, action)] = handler

    def handles(self, kind: str, action: str) -> bool:
        return (kind, action) in self._handlers

    async def dispatch(
        self, kind: str, action: str, record_id: str | None = None, **payload: Any
    ) -> Any:
        """Run the handler for ``(kind, action)``; unknown pairs are logged and ignored."""
        handler = self._handlers.get((kind, action))
        if handler is None:
            logger.warning("No handler for %s/%s", kind, action)
            return None

        args = () if record_id is None else (record_id,)
        result = handler(*args, **payload)
        if inspect.isawaitable(result):
            result = await result
        return result

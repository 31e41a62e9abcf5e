"""The single reusable modal overlay.

Resource controllers hand it a title and a body (fields, initial values,
optional read-only markdown and button-bound actions). Persistence only
ever happens through those actions; the view suppresses native submits.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from portfolio_admin.models.schema import FieldSpec

logger = logging.getLogger(__name__)

__all__ = ["ModalAction", "ModalBody", "ModalController", "ModalView"]

ActionHandler = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass(slots=True, frozen=True)
class ModalAction:
    """A button in the modal and the coroutine it runs with the form values."""

    label: str
    handler: ActionHandler
    variant: str = "primary"


@dataclass(slots=True)
class ModalBody:
    fields: tuple[FieldSpec, ...] = ()
    values: dict[str, Any] = field(default_factory=dict)
    markdown: str | None = None
    actions: tuple[ModalAction, ...] = ()


class ModalView(Protocol):
    def show(self, title: str, body: ModalBody) -> None: ...

    def hide(self) -> None: ...


class ModalController:
    """Tracks the one open modal. Opening replaces; closing discards input."""

    def __init__(self, view: ModalView | None = None) -> None:
        self._view = view
        self._title = ""
        self._body: ModalBody | None = None
        self._token = 0

    def attach(self, view: ModalView) -> None:
        self._view = view

    @property
    def is_open(self) -> bool:
        return self._body is not None

    @property
    def title(self) -> str:
        return self._title

    @property
    def body(self) -> ModalBody | None:
        return self._body

    @property
    def token(self) -> int:
        return self._token

    def open(self, title: str, body: ModalBody) -> int:
        """Render ``body`` in the modal slot and activate it.

        Returns:
            A token identifying this opening, for :meth:`close`.
        """
        self._token += 1
        self._title = title
        self._body = body
        if self._view is not None:
            self._view.show(title, body)
        return self._token

    def close(self, token: int | None = None) -> None:
        """Deactivate the modal.

        Args:
            token: When given, only close if the modal still shows the
                content opened with this token. A late response for a form
                the operator already replaced must not close the new one.
        """
        if self._body is None:
            return
        if token is not None and token != self._token:
            logger.debug("Ignoring close for stale modal token %d", token)
            return
        self._body = None
        self._title = ""
        if self._view is not None:
            self._view.hide()

    async def submit(self, action_index: int, values: Mapping[str, Any]) -> Any:
        """Run the action bound to button ``action_index`` with the form values."""
        if self._body is None:
            return None
        try:
            action = self._body.actions[action_index]
        except IndexError:
            logger.warning("Modal has no action %d", action_index)
            return None
        return await action.handler(dict(values))

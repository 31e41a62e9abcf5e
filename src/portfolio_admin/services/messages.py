"""Inbox of contact messages: read-only detail view plus a read/unread flag."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from portfolio_admin.api.gateway import error_message, read_json_safe
from portfolio_admin.api.schemas import parse_envelope
from portfolio_admin.constants.messages import MESSAGE_UPDATE_FAILED, MESSAGE_UPDATED, UNREACHABLE
from portfolio_admin.constants.resource_schemas import MESSAGES, message_card
from portfolio_admin.models.cards import Card, CardAction
from portfolio_admin.services.context import UIContext
from portfolio_admin.services.modal import ModalAction, ModalBody
from portfolio_admin.services.resource_controller import (
    FETCH_ERRORS,
    ChangeCallback,
    CollectionController,
    ListRegion,
    find_record,
)
from portfolio_admin.tui_rendering import render_message_detail

logger = logging.getLogger(__name__)

__all__ = ["MessageInboxController"]


class MessageInboxController(CollectionController):
    """Messages can be viewed, marked read/unread and deleted, never edited."""

    def __init__(
        self,
        context: UIContext,
        region: ListRegion | None = None,
        on_changed: ChangeCallback | None = None,
    ) -> None:
        super().__init__(MESSAGES, context, region, on_changed)

    def card_actions(self, record: dict[str, Any]) -> list[CardAction]:
        read = bool(record.get("read"))
        return [
            CardAction("view", "View"),
            CardAction(
                "toggle",
                "Mark Unread" if read else "Mark Read",
                payload={"current_read": read},
            ),
            CardAction("delete", "Delete", variant="error"),
        ]

    def build_card(self, record: dict[str, Any]) -> Card:
        return Card(
            kind=self.kind,
            record_id=str(record.get("id", "")),
            content=message_card(record, self._ctx.settings.display_timezone),
            actions=self.card_actions(record),
        )

    async def list(self) -> list[dict[str, Any]] | None:
        """Render the inbox; a successful reload also refreshes dashboard counts."""
        records = await super().list()
        if records is not None and self._on_changed is not None:
            await self._on_changed()
        return records

    async def view(self, record_id: str) -> int | None:
        """Show a message and, if it is unread, silently mark it read first.

        Opening the detail is a read, but it also writes the read flag; an
        already-read message issues no update. The detail's action offers the
        opposite of the flag as it stands after that write, so a failed write
        leaves "Mark as Read" on offer.
        """
        try:
            records = await self.fetch_records()
        except FETCH_ERRORS:
            logger.warning("Failed to load message %s", record_id, exc_info=True)
            self._ctx.notify(UNREACHABLE, "error")
            return None

        message = find_record(records, record_id)
        if message is None:
            return None

        is_read = bool(message.get("read"))
        if not is_read:
            is_read = await self.toggle_read(record_id, False, silent=True)

        async def toggle(_values: dict[str, Any]) -> bool:
            return await self.toggle_read(record_id, is_read)

        body = ModalBody(
            markdown=render_message_detail(message, self._ctx.settings.display_timezone),
            actions=(ModalAction("Mark as Unread" if is_read else "Mark as Read", toggle),),
        )
        return self._ctx.modal.open("Message", body)

    async def toggle_read(self, record_id: str, current_read: bool, silent: bool = False) -> bool:
        """Flip the read flag.

        Unless ``silent``, notify and close any open modal. The inbox is
        always re-rendered afterwards.
        """
        try:
            response = await self._ctx.gateway.request(
                self.schema.item_path(str(record_id)),
                "PUT",
                json={"read": not current_read},
            )
        except httpx.RequestError:
            logger.warning("Failed to update message %s", record_id, exc_info=True)
            self._ctx.notify(UNREACHABLE, "error")
            return False

        data = read_json_safe(response)
        if not parse_envelope(data).ok:
            self._ctx.notify(error_message(response, data, MESSAGE_UPDATE_FAILED), "error")
            return False

        if not silent:
            self._ctx.notify(MESSAGE_UPDATED, "success")
            self._ctx.modal.close()
        await self.list()
        return True

    async def _after_change(self) -> None:
        await self.list()

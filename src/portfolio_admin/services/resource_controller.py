"""Generic list/create/edit/delete engine, parameterized by a ResourceSchema.

Every edit starts from a fresh read of the whole collection; the controller
keeps no local cache of records. ``CollectionController`` covers the
read-and-delete half shared with the message inbox; ``ResourceController``
adds forms and saves for the editable kinds.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

import httpx

from portfolio_admin.api.gateway import error_message, read_json_safe
from portfolio_admin.api.schemas import parse_envelope
from portfolio_admin.constants.messages import FILE_UNREADABLE, UNREACHABLE
from portfolio_admin.models.cards import Card, CardAction
from portfolio_admin.models.schema import ResourceSchema
from portfolio_admin.services.context import UIContext
from portfolio_admin.services.modal import ModalAction, ModalBody
from portfolio_admin.utils.forms import encode_body, populate_form, serialize_form

logger = logging.getLogger(__name__)

__all__ = [
    "ChangeCallback",
    "CollectionController",
    "ListRegion",
    "ResourceController",
    "UnreadableCollection",
    "as_records",
]

ChangeCallback = Callable[[], Awaitable[Any]]


class ListRegion(Protocol):
    """Where one kind's cards are drawn. An empty list means "no items"."""

    def show_cards(self, kind: str, cards: list[Card]) -> None: ...


class UnreadableCollection(Exception):
    """A collection GET answered with a body that is not JSON at all."""

    def __init__(self, kind: str, status_code: int) -> None:
        super().__init__(f"{kind}: unparseable body (HTTP {status_code})")
        self.kind = kind
        self.status_code = status_code


FETCH_ERRORS = (httpx.RequestError, UnreadableCollection)


def as_records(body: Any) -> list[dict[str, Any]]:
    """Collection payload as a list of records; anything else is empty."""
    if not isinstance(body, list):
        return []
    return [record for record in body if isinstance(record, dict)]


def find_record(records: list[dict[str, Any]], record_id: str) -> dict[str, Any] | None:
    for record in records:
        if str(record.get("id")) == str(record_id):
            return record
    return None


class CollectionController:
    """Listing and deletion for one resource kind."""

    def __init__(
        self,
        schema: ResourceSchema,
        context: UIContext,
        region: ListRegion | None = None,
        on_changed: ChangeCallback | None = None,
    ) -> None:
        self.schema = schema
        self._ctx = context
        self._region = region
        self._on_changed = on_changed

    @property
    def kind(self) -> str:
        return self.schema.kind

    def attach(self, region: ListRegion) -> None:
        self._region = region

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_records(self) -> list[dict[str, Any]]:
        """GET the full collection.

        Valid JSON that is not an array reads as no records. Transport errors
        propagate, and a body that is not JSON raises ``UnreadableCollection``.
        """
        response = await self._ctx.gateway.request(self.schema.collection_path)
        try:
            body = response.json()
        except ValueError as exc:
            raise UnreadableCollection(self.kind, response.status_code) from exc
        return as_records(body)

    def card_actions(self, record: dict[str, Any]) -> list[CardAction]:
        return [CardAction("delete", "Delete", variant="error")]

    def build_card(self, record: dict[str, Any]) -> Card:
        return Card(
            kind=self.kind,
            record_id=str(record.get("id", "")),
            content=self.schema.card(record),
            actions=self.card_actions(record),
        )

    async def list(self) -> list[dict[str, Any]] | None:
        """Fetch and render the collection.

        Returns:
            The rendered records, or None when the fetch failed and the
            previous rendering was left in place.
        """
        try:
            records = await self.fetch_records()
        except FETCH_ERRORS:
            logger.warning("Failed to load %s", self.kind, exc_info=True)
            # An expired session already has its own notice.
            if not self._ctx.gateway.session_expired:
                self._ctx.notify(f"Couldn't load {self._plural}. Please try again.", "error")
            return None

        if self._region is not None:
            self._region.show_cards(self.kind, [self.build_card(r) for r in records])
        return records

    @property
    def _plural(self) -> str:
        if self.schema.noun.endswith("entry"):
            return self.schema.noun[: -len("entry")] + "entries"
        return self.schema.noun + "s"

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def remove(self, record_id: str) -> bool:
        """Delete after explicit confirmation. Declining issues no request."""
        noun = self.schema.noun
        if not await self._ctx.confirm(f"Delete this {noun}? This can't be undone."):
            return False

        try:
            response = await self._ctx.gateway.request(
                self.schema.item_path(str(record_id)), "DELETE"
            )
        except httpx.RequestError:
            logger.warning("DELETE %s/%s failed", self.kind, record_id, exc_info=True)
            self._ctx.notify(UNREACHABLE, "error")
            return False

        data = read_json_safe(response)
        if not parse_envelope(data).ok:
            fallback = f"Couldn't delete that {noun}. Please try again."
            self._ctx.notify(error_message(response, data, fallback), "error")
            return False

        self._ctx.notify(f"{noun[0].upper()}{noun[1:]} deleted.", "success")
        await self._after_change()
        return True

    async def _after_change(self) -> None:
        await self.list()
        if self._on_changed is not None:
            await self._on_changed()


class ResourceController(CollectionController):
    """Full CRUD workflow for one editable resource kind."""

    def card_actions(self, record: dict[str, Any]) -> list[CardAction]:
        return [CardAction("edit", "Edit"), *super().card_actions(record)]

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def open_create_form(self) -> int:
        return self._open_form(None, None)

    async def open_edit_form(self, record_id: str) -> int | None:
        """Open the edit form for ``record_id`` from a fresh read.

        Does nothing if the record no longer exists.
        """
        try:
            records = await self.fetch_records()
        except FETCH_ERRORS:
            logger.warning("Failed to load %s for editing", self.kind, exc_info=True)
            self._ctx.notify(UNREACHABLE, "error")
            return None

        record = find_record(records, record_id)
        if record is None:
            logger.debug("%s %s is gone; edit skipped", self.kind, record_id)
            return None
        return self._open_form(record, str(record_id))

    def _open_form(self, record: dict[str, Any] | None, record_id: str | None) -> int:
        editing = record_id is not None
        token = 0

        async def submit(values: dict[str, Any]) -> bool:
            return await self.save(record_id, values, modal_token=token)

        body = ModalBody(
            fields=self.schema.fields,
            values=populate_form(self.schema.fields, record),
            actions=(ModalAction(self.schema.submit_label(editing), submit),),
        )
        token = self._ctx.modal.open(self.schema.modal_title(editing), body)
        return token

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def save(
        self,
        record_id: str | None,
        values: Mapping[str, Any],
        *,
        modal_token: int | None = None,
    ) -> bool:
        """Create (no id) or update (id) from raw form values.

        On failure the modal stays open so the input survives.
        """
        editing = bool(record_id)
        try:
            payload, attachments = serialize_form(self.schema, values)
            body = encode_body(self.schema, payload, attachments)
        except OSError:
            logger.warning("Could not read attachment for %s", self.kind, exc_info=True)
            self._ctx.notify(FILE_UNREADABLE, "error")
            return False

        if editing:
            method, path = "PUT", self.schema.item_path(str(record_id))
        else:
            method, path = "POST", self.schema.collection_path

        try:
            response = await self._ctx.gateway.request(path, method, **body)
        except httpx.RequestError:
            logger.warning("%s %s failed", method, path, exc_info=True)
            self._ctx.notify(UNREACHABLE, "error")
            return False

        data = read_json_safe(response)
        if not parse_envelope(data).ok:
            fallback = f"Couldn't save that {self.schema.noun}. Please try again."
            self._ctx.notify(error_message(response, data, fallback), "error")
            return False

        verb = "updated" if editing else "added"
        self._ctx.notify(f"{self.schema.title} {verb}.", "success")
        self._ctx.modal.close(modal_token)
        await self._after_change()
        return True

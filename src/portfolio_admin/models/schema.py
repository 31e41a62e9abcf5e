"""Declarative field schemas driving the generic resource controller."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from portfolio_admin.models.cards import CardContent


class Transport(str, Enum):
    """Body shape used when creating or updating a record."""

    JSON = "json"
    MULTIPART = "multipart"


class InputKind(str, Enum):
    """Form widget used for a field."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    MONTH = "month"
    DATE = "date"
    CHECKBOX = "checkbox"
    FILE = "file"


@dataclass(slots=True, frozen=True)
class FieldSpec:
    """A single editable field.

    Attributes:
        name: Key in the record and in the request body.
        label: Human-readable label.
        input: Widget kind.
        required: Marked as required in the form.
        array: Value is a list, edited as a comma-separated string.
    """

    name: str
    label: str
    input: InputKind = InputKind.TEXT
    required: bool = False
    array: bool = False

    @property
    def placeholder(self) -> str:
        if self.input is InputKind.MONTH:
            return "YYYY-MM"
        if self.input is InputKind.DATE:
            return "YYYY-MM-DD"
        if self.input is InputKind.FILE:
            return "Path to file (optional)"
        if self.array:
            return "Comma-separated"
        return ""


@dataclass(slots=True, frozen=True)
class ResourceSchema:
    """Everything the generic controller needs to know about one kind.

    Attributes:
        kind: Collection name, also the URL segment under ``/api``.
        title: Capitalised singular used in modal titles ("Skill").
        noun: Lower-case noun used in messages ("experience entry").
        fields: Editable fields, in form order.
        card: Builds the summary card for one record.
        transport: JSON or multipart request bodies.
        json_encoded_arrays: Send list fields as JSON strings in JSON bodies.
        normalize: Final adjustment of the serialized payload.
        create_label: Submit label in the create form.
        update_label: Submit label in the edit form.
    """

    kind: str
    title: str
    noun: str
    fields: tuple[FieldSpec, ...]
    card: Callable[[dict[str, Any]], CardContent]
    transport: Transport = Transport.JSON
    json_encoded_arrays: bool = False
    normalize: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    create_label: str = ""
    update_label: str = ""
    create_title: str = ""

    @property
    def collection_path(self) -> str:
        return f"/api/{self.kind}"

    def item_path(self, record_id: str) -> str:
        return f"/api/{self.kind}/{record_id}"

    @property
    def file_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.input is InputKind.FILE)

    def submit_label(self, editing: bool) -> str:
        if editing:
            return self.update_label or f"Update {self.title}"
        return self.create_label or f"Add {self.title}"

    def modal_title(self, editing: bool) -> str:
        if editing:
            return f"Edit {self.title}"
        return self.create_title or f"Add New {self.title}"

"""Form population and request-body serialization shared by all resource kinds."""

from __future__ import annotations

import json
import mimetypes
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from portfolio_admin.models.schema import FieldSpec, InputKind, ResourceSchema, Transport

__all__ = [
    "encode_body",
    "file_part",
    "join_list",
    "populate_form",
    "serialize_form",
    "split_list",
]


def split_list(raw: object) -> list[str]:
    """Split a comma-separated input into trimmed, non-empty tokens.

    Lists are accepted too, so values that already went through the form
    layer are normalised the same way.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        tokens: Iterable[object] = raw.split(",")
    elif isinstance(raw, Iterable):
        tokens = raw
    else:
        tokens = [raw]
    return [token for token in (str(t).strip() for t in tokens) if token]


def join_list(values: object) -> str:
    """Render a list field for editing: ``["a", "b"]`` -> ``"a, b"``."""
    if isinstance(values, str):
        return ", ".join(split_list(values))
    if not isinstance(values, list):
        return ""
    return ", ".join(split_list(values))


def _parse_int(raw: object) -> int | None:
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def populate_form(fields: Iterable[FieldSpec], record: Mapping[str, Any] | None) -> dict[str, Any]:
    """Initial widget values for a create (``record=None``) or edit form."""
    record = record or {}
    values: dict[str, Any] = {}
    for spec in fields:
        raw = record.get(spec.name)
        if spec.input is InputKind.FILE:
            # Existing attachments are never re-sent; the picker starts empty.
            values[spec.name] = ""
        elif spec.input is InputKind.CHECKBOX:
            values[spec.name] = bool(raw)
        elif spec.array:
            values[spec.name] = join_list(raw)
        elif spec.input is InputKind.NUMBER:
            number = _parse_int(raw) if raw not in (None, "") else None
            values[spec.name] = str(number or 0) if record else ""
        else:
            values[spec.name] = "" if raw is None else str(raw)
    return values


def serialize_form(
    schema: ResourceSchema, values: Mapping[str, Any]
) -> tuple[dict[str, Any], dict[str, Path]]:
    """Turn raw form input into a payload plus any chosen file attachments.

    Args:
        schema: Resource schema describing the fields.
        values: Widget values keyed by field name.

    Returns:
        ``(payload, attachments)``. Attachments only contain file fields the
        user actually picked.
    """
    payload: dict[str, Any] = {}
    attachments: dict[str, Path] = {}

    for spec in schema.fields:
        raw = values.get(spec.name)
        if spec.input is InputKind.FILE:
            if raw and str(raw).strip():
                attachments[spec.name] = Path(str(raw).strip()).expanduser()
        elif spec.input is InputKind.CHECKBOX:
            payload[spec.name] = bool(raw)
        elif spec.array:
            payload[spec.name] = split_list(raw)
        elif spec.input is InputKind.NUMBER:
            payload[spec.name] = _parse_int(raw)
        else:
            payload[spec.name] = "" if raw is None else str(raw)

    if schema.normalize is not None:
        payload = schema.normalize(payload)
    return payload, attachments


def _form_value(value: Any) -> str:
    if isinstance(value, list):
        return json.dumps(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def file_part(field_name: str, path: Path) -> tuple[str, tuple[str, bytes, str]]:
    """Multipart part for a file on disk. Raises OSError if it cannot be read."""
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return field_name, (path.name, path.read_bytes(), content_type)


def encode_body(
    schema: ResourceSchema,
    payload: Mapping[str, Any],
    attachments: Mapping[str, Path] | None = None,
) -> dict[str, Any]:
    """Keyword arguments for ``ApiGateway.request`` in the kind's transport shape."""
    if schema.transport is Transport.JSON:
        body = {
            key: json.dumps(value)
            if schema.json_encoded_arrays and isinstance(value, list)
            else value
            for key, value in payload.items()
        }
        return {"json": body}

    # Plain fields go in as filename-less parts so the body is always
    # multipart/form-data, even with no attachment.
    parts: list[tuple[str, Any]] = [
        (key, (None, _form_value(value))) for key, value in payload.items()
    ]
    for name, path in (attachments or {}).items():
        parts.append(file_part(name, path))
    return {"files": parts}

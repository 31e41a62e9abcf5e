"""Summary-card models rendered by list regions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class CardContent:
    """Kind-specific summary of one record.

    Attributes:
        title: Heading line (name, title, subject...).
        lines: Body lines, markdown allowed.
        badges: Short labels shown under the body.
    """

    title: str
    lines: list[str] = field(default_factory=list)
    badges: list[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class CardAction:
    """One affordance on a card, dispatched by ``(kind, action, record_id)``.

    Attributes:
        action: Dispatch key such as ``edit``, ``delete``, ``view`` or ``toggle``.
        label: Button text.
        variant: Button style hint (``default``, ``primary``, ``error``...).
        payload: Extra keyword arguments forwarded to the handler.
    """

    action: str
    label: str
    variant: str = "default"
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Card:
    """A rendered record: its id, kind, content and actions."""

    kind: str
    record_id: str
    content: CardContent
    actions: list[CardAction] = field(default_factory=list)

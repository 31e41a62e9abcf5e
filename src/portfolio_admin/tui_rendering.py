from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from portfolio_admin.models.cards import Card
from portfolio_admin.utils.display import format_timestamp

# Dashboard tile labels, in display order
COUNT_LABELS = {
    "skills": "Skills",
    "projects": "Projects",
    "experience": "Experience",
    "blogs": "Blog Posts",
    "education": "Education",
    "messages": "Unread Messages",
}

EMPTY_LABELS = {
    "skills": "skills",
    "projects": "projects",
    "experience": "experience entries",
    "blogs": "blog posts",
    "education": "education entries",
    "messages": "messages",
}


def render_empty_state(kind: str) -> str:
    return f"(No {EMPTY_LABELS.get(kind, kind)} yet)"


def render_card_markdown(card: Card) -> str:
    """Markdown for one summary card: heading, body lines, then badges."""
    content = card.content
    parts: list[str] = [f"### {content.title or '(untitled)'}"]
    parts.extend(line for line in content.lines if line)

    badges = [b for b in content.badges if b]
    if badges:
        parts.append(" ".join(f"`{badge}`" for badge in badges))

    return "\n\n".join(parts)


def render_message_detail(message: Mapping[str, Any], timezone: str = "Asia/Kolkata") -> str:
    """Read-only detail of one contact message."""
    name = message.get("name") or ""
    email = message.get("email") or ""
    subject = message.get("subject") or "No subject"
    body = str(message.get("message") or "")

    parts = [
        "**From**",
        f"{name} ({email})",
        "**Subject**",
        str(subject),
    ]
    received = format_timestamp(message.get("createdAt"), timezone)
    if received:
        parts.extend(["**Received**", received])
    parts.append("**Message**")
    # Hard line breaks so the sender's own line structure survives.
    parts.append("  \n".join(body.splitlines()) if body else "—")
    return "\n\n".join(parts)


def render_counts_markdown(counts: Mapping[str, int]) -> str:
    """Render the dashboard counts as a markdown table."""
    lines = ["| Collection | Count |", "|---|---:|"]
    for kind, label in COUNT_LABELS.items():
        lines.append(f"| {label} | {counts.get(kind, 0)} |")
    return "\n".join(lines)

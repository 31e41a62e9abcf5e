"""Display helpers: timestamps, previews and native file pickers."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

PREVIEW_LENGTH = 90

IMAGE_FILETYPES = ["*.png", "*.jpg", "*.jpeg", "*.gif", "*.webp"]
RESUME_FILETYPES = ["*.pdf", "*.doc", "*.docx"]


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # Backend timestamps are JavaScript epoch milliseconds.
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def format_timestamp(value: object, timezone: str = "Asia/Kolkata") -> str:
    """Format a timestamp as ``"05 Mar 2025, 02:30 PM"`` in ``timezone``.

    Naive timestamps are treated as UTC. Missing or unparseable values give "".
    """
    parsed = _parse_timestamp(value)
    if parsed is None:
        return ""
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    try:
        zone = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        zone = UTC
    return parsed.astimezone(zone).strftime("%d %b %Y, %I:%M %p")


def preview_text(text: object, length: int = PREVIEW_LENGTH) -> str:
    """First ``length`` characters, with an ellipsis when truncated."""
    body = "" if text is None else str(text)
    if len(body) > length:
        return body[:length] + "…"
    return body


def _prompt_for_file(msg: str, title: str, filetypes: list[str]) -> Path | None:
    # Imported lazily: easygui needs a working Tk install.
    import easygui as eg

    selected = eg.fileopenbox(msg=msg, title=title, default="*", filetypes=filetypes)
    return Path(selected) if selected else None


def prompt_for_image_file() -> Path | None:
    """Display file picker dialog for an image upload.

    Returns:
        Path to the selected image, or None if cancelled.
    """
    return _prompt_for_file("Select an image", "Select Image", IMAGE_FILETYPES)


def prompt_for_resume_file() -> Path | None:
    """Display file picker dialog for a resume upload.

    Returns:
        Path to the selected document, or None if cancelled.
    """
    return _prompt_for_file("Select your resume", "Select Resume", RESUME_FILETYPES)

"""Pydantic models for backend response envelopes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class Envelope(BaseModel):
    """``{success, error?, ...}`` returned by every mutating endpoint.

    Only ``success`` decides the outcome. The other fields are informational
    and never fail validation: ``id`` is whatever the backend uses, and an
    asset path that is not a string is dropped.
    """

    model_config = ConfigDict(extra="allow")

    success: bool = False
    error: Any = None
    id: Any = None
    image_path: str | None = Field(default=None, alias="imagePath")
    resume_path: str | None = Field(default=None, alias="resumePath")

    @field_validator("image_path", "resume_path", mode="before")
    @classmethod
    def _drop_non_string_path(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @property
    def ok(self) -> bool:
        return self.success is True


class AuthStatus(BaseModel):
    """Response of ``GET /api/auth/check``."""

    model_config = ConfigDict(extra="ignore")

    # Strict: only a JSON true authenticates, never "yes" or 1.
    is_authenticated: bool = Field(default=False, alias="isAuthenticated", strict=True)


def parse_envelope(body: Any) -> Envelope:
    """Interpret a parsed body as an envelope; anything malformed is a failure.

    A missing or non-object body yields ``Envelope(success=False)`` so callers
    fall back to their generic error message. An object whose ``success`` is
    a literal ``true`` is a success whatever else it carries.
    """
    if not isinstance(body, dict):
        return Envelope()
    try:
        envelope = Envelope.model_validate(body)
    except ValidationError:
        # Only ``success`` can still fail here; keep the error text.
        return Envelope(error=body.get("error"))
    # Only a literal ``true`` counts, not truthy strings coerced by pydantic.
    if body.get("success") is not True:
        envelope.success = False
    return envelope

"""The singleton profile: one form, no list, no delete, two upload flows."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import httpx

from portfolio_admin.api.gateway import error_message, read_json_safe
from portfolio_admin.api.schemas import Envelope, parse_envelope
from portfolio_admin.constants import messages as msg
from portfolio_admin.constants.resource_schemas import PROFILE_FIELDS
from portfolio_admin.services.context import UIContext
from portfolio_admin.utils.forms import file_part, populate_form

logger = logging.getLogger(__name__)

__all__ = ["ProfileController", "ProfileView"]


class ProfileView(Protocol):
    def populate(self, values: dict[str, Any]) -> None: ...

    def set_image(self, url: str) -> None: ...

    def set_resume(self, url: str | None) -> None:
        """Show the resume link, or hide it when ``url`` is None."""


class ProfileController:
    """Loads, saves and uploads assets for the singleton profile."""

    path = "/api/profile"

    def __init__(self, context: UIContext, view: ProfileView | None = None) -> None:
        self._ctx = context
        self._view = view

    def attach(self, view: ProfileView) -> None:
        self._view = view

    async def load(self) -> dict[str, Any] | None:
        """GET the profile and populate the form and both previews."""
        try:
            response = await self._ctx.gateway.request(self.path)
        except httpx.RequestError:
            logger.warning("Failed to load profile", exc_info=True)
            self._ctx.notify(msg.PROFILE_LOAD_FAILED, "error")
            return None

        profile = read_json_safe(response)
        if not isinstance(profile, dict):
            self._ctx.notify(msg.PROFILE_LOAD_FAILED, "error")
            return None

        if self._view is not None:
            gateway = self._ctx.gateway
            self._view.populate(populate_form(PROFILE_FIELDS, profile))
            self._view.set_image(gateway.url_for(profile.get("image")))
            resume = profile.get("resume")
            self._view.set_resume(gateway.url_for(resume) if resume else None)
        return profile

    async def save(self, values: Mapping[str, Any]) -> bool:
        """PUT the whole profile object; there is no partial update."""
        payload = {
            spec.name: "" if values.get(spec.name) is None else str(values.get(spec.name))
            for spec in PROFILE_FIELDS
        }
        try:
            response = await self._ctx.gateway.request(self.path, "PUT", json=payload)
        except httpx.RequestError:
            logger.warning("Failed to save profile", exc_info=True)
            self._ctx.notify(msg.UNREACHABLE, "error")
            return False

        data = read_json_safe(response)
        if not parse_envelope(data).ok:
            self._ctx.notify(error_message(response, data, msg.PROFILE_SAVE_FAILED), "error")
            return False
        self._ctx.notify(msg.PROFILE_UPDATED, "success")
        return True

    async def upload_image(self, path: Path) -> bool:
        envelope = await self._upload(path, "image", msg.IMAGE_UPLOAD_FAILED)
        if envelope is None:
            return False
        if self._view is not None:
            self._view.set_image(self._ctx.gateway.url_for(envelope.image_path))
        self._ctx.notify(msg.IMAGE_UPDATED, "success")
        return True

    async def upload_resume(self, path: Path) -> bool:
        envelope = await self._upload(path, "resume", msg.RESUME_UPLOAD_FAILED)
        if envelope is None:
            return False
        if self._view is not None:
            self._view.set_resume(self._ctx.gateway.url_for(envelope.resume_path))
        self._ctx.notify(msg.RESUME_UPDATED, "success")
        return True

    async def _upload(self, path: Path, field_name: str, fallback: str) -> Envelope | None:
        """POST one file to ``/api/profile/<field_name>``; None on any failure."""
        try:
            part = file_part(field_name, Path(path).expanduser())
        except OSError:
            logger.warning("Could not read %s", path, exc_info=True)
            self._ctx.notify(msg.FILE_UNREADABLE, "error")
            return None

        try:
            response = await self._ctx.gateway.request(
                f"{self.path}/{field_name}", "POST", files=[part]
            )
        except httpx.RequestError:
            logger.warning("Upload of %s failed", field_name, exc_info=True)
            self._ctx.notify(msg.UNREACHABLE, "error")
            return None

        data = read_json_safe(response)
        envelope = parse_envelope(data)
        if not envelope.ok:
            self._ctx.notify(error_message(response, data, fallback), "error")
            return None
        return envelope

"""Runtime configuration for the admin client.

Values come from environment variables (optionally via a ``.env`` file) and
can be overridden by CLI flags.
"""

from __future__ import annotations

import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

__all__ = ["AdminSettings", "load_settings"]

DEFAULT_API_BASE_URL = "http://127.0.0.1:3000"

# Environment variable for each settings field
_ENV_VARS = {
    "api_base_url": "ADMIN_API_BASE_URL",
    "frontend_url": "ADMIN_FRONTEND_URL",
    "notification_seconds": "ADMIN_NOTIFICATION_SECONDS",
    "redirect_delay_seconds": "ADMIN_REDIRECT_DELAY_SECONDS",
    "request_timeout": "ADMIN_REQUEST_TIMEOUT",
    "display_timezone": "ADMIN_DISPLAY_TIMEZONE",
    "log_file": "ADMIN_LOG_FILE",
}


class AdminSettings(BaseModel):
    """Settings shared by the gateway, the notification center and the TUI."""

    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, description="Backend origin")
    frontend_url: str | None = Field(default=None, description="Public portfolio site")
    notification_seconds: float = Field(default=3.0, gt=0)
    redirect_delay_seconds: float = Field(default=1.2, ge=0)
    request_timeout: float = Field(default=15.0, gt=0)
    display_timezone: str = "Asia/Kolkata"
    log_file: str | None = None

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/") or DEFAULT_API_BASE_URL

    @field_validator("frontend_url", "log_file")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


def load_settings(**overrides: object) -> AdminSettings:
    """Build settings from the environment, then apply non-None overrides.

    Args:
        **overrides: Field values (e.g. from CLI flags) that win over env vars.

    Returns:
        Validated AdminSettings.
    """
    load_dotenv(find_dotenv(usecwd=True))

    values: dict[str, object] = {}
    for field, env_var in _ENV_VARS.items():
        env_value = os.getenv(env_var)
        if env_value is not None:
            values[field] = env_value

    values.update({key: value for key, value in overrides.items() if value is not None})
    return AdminSettings.model_validate(values)

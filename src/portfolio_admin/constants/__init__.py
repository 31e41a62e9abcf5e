from __future__ import annotations

from portfolio_admin.constants.messages import (
    LOGOUT_FAILED,
    PROFILE_LOAD_FAILED,
    UNREACHABLE,
)
from portfolio_admin.constants.resource_schemas import (
    BLOGS,
    COUNTED_KINDS,
    EDITABLE_SCHEMAS,
    EDUCATION,
    EXPERIENCE,
    MESSAGES,
    PROFILE_FIELDS,
    PROJECTS,
    SKILLS,
)

__all__ = [
    "BLOGS",
    "COUNTED_KINDS",
    "EDITABLE_SCHEMAS",
    "EDUCATION",
    "EXPERIENCE",
    "LOGOUT_FAILED",
    "MESSAGES",
    "PROFILE_FIELDS",
    "PROFILE_LOAD_FAILED",
    "PROJECTS",
    "SKILLS",
    "UNREACHABLE",
]

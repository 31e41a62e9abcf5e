"""Backend access: the session-aware gateway and response envelopes."""

from portfolio_admin.api.gateway import (
    ApiGateway,
    Navigator,
    error_message,
    read_json_safe,
)
from portfolio_admin.api.schemas import AuthStatus, Envelope, parse_envelope

__all__ = [
    "ApiGateway",
    "AuthStatus",
    "Envelope",
    "Navigator",
    "error_message",
    "parse_envelope",
    "read_json_safe",
]

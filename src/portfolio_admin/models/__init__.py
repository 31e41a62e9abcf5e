"""Data models and type definitions"""

from portfolio_admin.models.cards import Card, CardAction, CardContent
from portfolio_admin.models.schema import FieldSpec, InputKind, ResourceSchema, Transport

__all__ = [
    "Card",
    "CardAction",
    "CardContent",
    "FieldSpec",
    "InputKind",
    "ResourceSchema",
    "Transport",
]

"""Summary counts for every collection, fetched concurrently."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Protocol

from portfolio_admin.api.gateway import read_json_safe
from portfolio_admin.constants.resource_schemas import COUNTED_KINDS
from portfolio_admin.services.context import UIContext
from portfolio_admin.services.resource_controller import as_records

logger = logging.getLogger(__name__)

__all__ = ["CountsView", "DashboardAggregator"]


class CountsView(Protocol):
    def render_counts(self, counts: Mapping[str, int]) -> None: ...


class DashboardAggregator:
    """Counts each collection; one failing fetch only zeroes its own count."""

    def __init__(self, context: UIContext, view: CountsView | None = None) -> None:
        self._ctx = context
        self._view = view
        self.counts: dict[str, int] = dict.fromkeys(COUNTED_KINDS, 0)

    def attach(self, view: CountsView) -> None:
        self._view = view

    async def _count(self, kind: str) -> int:
        response = await self._ctx.gateway.request(f"/api/{kind}")
        records = as_records(read_json_safe(response))
        if kind == "messages":
            return sum(1 for record in records if not record.get("read"))
        return len(records)

    async def refresh(self) -> dict[str, int]:
        """Fetch all collections at once and render whatever counts succeeded."""
        results = await asyncio.gather(
            *(self._count(kind) for kind in COUNTED_KINDS), return_exceptions=True
        )

        counts: dict[str, int] = {}
        for kind, result in zip(COUNTED_KINDS, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning("Count for %s unavailable: %s", kind, result)
                counts[kind] = 0
            else:
                counts[kind] = result

        self.counts = counts
        if self._view is not None:
            self._view.render_counts(counts)
        return counts

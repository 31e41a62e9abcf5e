"""Wires controllers together and runs the startup sequence.

Startup order: bind UI affordances, run the session guard, then load every
collection, the profile and the dashboard counts concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from portfolio_admin.constants.resource_schemas import EDITABLE_SCHEMAS
from portfolio_admin.services.context import UIContext
from portfolio_admin.services.dashboard import CountsView, DashboardAggregator
from portfolio_admin.services.dispatch import ActionDispatcher
from portfolio_admin.services.messages import MessageInboxController
from portfolio_admin.services.profile import ProfileController, ProfileView
from portfolio_admin.services.resource_controller import (
    CollectionController,
    ListRegion,
    ResourceController,
)
from portfolio_admin.services.session import SessionGuard

logger = logging.getLogger(__name__)

__all__ = ["AdminServices", "build_services"]


@dataclass
class AdminServices:
    context: UIContext
    resources: dict[str, ResourceController]
    inbox: MessageInboxController
    profile: ProfileController
    dashboard: DashboardAggregator
    session: SessionGuard
    dispatcher: ActionDispatcher = field(default_factory=ActionDispatcher)
    ready: bool = False

    @property
    def controllers(self) -> list[CollectionController]:
        return [*self.resources.values(), self.inbox]

    async def start(self, bind_ui: Callable[[], None] | None = None) -> bool:
        """Bind the UI, check the session, then run all initial loads.

        Returns:
            True once every load has settled, False if the session guard
            redirected to login instead.
        """
        self.ready = False
        if bind_ui is not None:
            bind_ui()

        if not await self.session.check():
            return False

        await self.load_all()
        self.ready = True
        return True

    async def load_all(self) -> None:
        """Fire every initial load and wait for all; none can cancel another."""
        loads = [
            self.dashboard.refresh(),
            self.profile.load(),
            *(controller.list() for controller in self.controllers),
        ]
        results = await asyncio.gather(*loads, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("Initial load failed", exc_info=result)

    async def login(self, username: str, password: str) -> bool:
        if not await self.session.login(username, password):
            return False
        return await self.start()

    async def logout(self) -> bool:
        self.ready = False
        return await self.session.logout()

    async def aclose(self) -> None:
        await self.context.gateway.aclose()


def build_services(
    context: UIContext,
    *,
    regions: Mapping[str, ListRegion] | None = None,
    counts_view: CountsView | None = None,
    profile_view: ProfileView | None = None,
) -> AdminServices:
    """Create one controller per kind and register their actions."""
    regions = regions or {}
    dashboard = DashboardAggregator(context, counts_view)
    resources = {
        schema.kind: ResourceController(
            schema, context, regions.get(schema.kind), dashboard.refresh
        )
        for schema in EDITABLE_SCHEMAS
    }
    inbox = MessageInboxController(context, regions.get("messages"), dashboard.refresh)

    services = AdminServices(
        context=context,
        resources=resources,
        inbox=inbox,
        profile=ProfileController(context, profile_view),
        dashboard=dashboard,
        session=SessionGuard(context),
    )

    dispatcher = services.dispatcher
    for kind, controller in resources.items():
        dispatcher.register(kind, "add", controller.open_create_form)
        dispatcher.register(kind, "edit", controller.open_edit_form)
        dispatcher.register(kind, "delete", controller.remove)
    dispatcher.register(inbox.kind, "view", inbox.view)
    dispatcher.register(inbox.kind, "toggle", inbox.toggle_read)
    dispatcher.register(inbox.kind, "delete", inbox.remove)
    dispatcher.register(inbox.kind, "refresh", inbox.list)
    return services

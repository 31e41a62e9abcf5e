"""Controllers and process-wide UI singletons."""

from portfolio_admin.services.bootstrap import AdminServices, build_services
from portfolio_admin.services.context import UIContext
from portfolio_admin.services.dashboard import DashboardAggregator
from portfolio_admin.services.dispatch import ActionDispatcher
from portfolio_admin.services.messages import MessageInboxController
from portfolio_admin.services.modal import ModalAction, ModalBody, ModalController
from portfolio_admin.services.notifications import NotificationCenter
from portfolio_admin.services.profile import ProfileController
from portfolio_admin.services.resource_controller import CollectionController, ResourceController
from portfolio_admin.services.session import SessionGuard

__all__ = [
    "ActionDispatcher",
    "AdminServices",
    "CollectionController",
    "DashboardAggregator",
    "MessageInboxController",
    "ModalAction",
    "ModalBody",
    "ModalController",
    "NotificationCenter",
    "ProfileController",
    "ResourceController",
    "SessionGuard",
    "UIContext",
    "build_services",
]

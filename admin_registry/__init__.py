"""In-memory extension registry for a pluggable admin shell.

Feature modules contribute navigation entries, dashboard cards, admin views
and quick actions; the shell queries sorted snapshots and re-renders when the
matching ``*_UPDATED`` event fires.
"""

from .errors import (
    DuplicateKeyError,
    OwnershipError,
    RegistryError,
    RegistryNotInitializedError,
    ValidationError,
)
from .events import EventBus, RegistryEvent
from .reactive import LiveQuery
from .registry import AdminRegistry, get_registry, init_registry, reset_registry
from .schemas import (
    AdminView,
    Category,
    DashboardCard,
    ExtensionType,
    NavChild,
    NavItem,
    QuickAction,
    Registration,
    WidgetKind,
)

__all__ = [
    "AdminRegistry",
    "AdminView",
    "Category",
    "DashboardCard",
    "DuplicateKeyError",
    "EventBus",
    "ExtensionType",
    "LiveQuery",
    "NavChild",
    "NavItem",
    "OwnershipError",
    "QuickAction",
    "Registration",
    "RegistryError",
    "RegistryEvent",
    "RegistryNotInitializedError",
    "ValidationError",
    "WidgetKind",
    "get_registry",
    "init_registry",
    "reset_registry",
]

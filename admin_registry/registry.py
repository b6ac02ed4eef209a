from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, Union

from pydantic import BaseModel

from .config import Settings, settings as default_settings
from .errors import OwnershipError, RegistryNotInitializedError
from .events import EventBus, RegistryEvent, Subscriber, Unsubscribe
from .queries import categorize, filter_by_permission, sort_registrations, sorted_items
from .schemas import (
    AdminView,
    Category,
    DashboardCard,
    ExtensionType,
    NavItem,
    QuickAction,
    Registration,
    ShellManifest,
)
from .store import RegistryStore
from .validation import coerce_item, require_module_id, validate_paths

if TYPE_CHECKING:
    from .reactive import LiveQuery

logger = logging.getLogger(__name__)

ItemInput = Union[BaseModel, Mapping[str, Any]]


class AdminRegistry:
    """Write and read surface over the four extension-point collections.

    Feature modules call the ``register_*`` methods from their init code;
    the shell reads sorted snapshots through the ``get_*`` accessors and
    listens for the matching :class:`RegistryEvent` to re-render.
    """

    def __init__(self, settings: Optional[Settings] = None, bus: Optional[EventBus] = None):
        self._settings = settings or default_settings
        self._bus = bus or EventBus()
        self._store = RegistryStore(self._bus)
        self._loaded_modules: set[str] = set()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def store(self) -> RegistryStore:
        return self._store

    @property
    def loaded_modules(self) -> frozenset[str]:
        return frozenset(self._loaded_modules)

    def mark_module_loaded(self, name: str) -> None:
        self._loaded_modules.add(name)

    # Registration API

    def register_nav_item(self, module_id: str, item: ItemInput) -> Registration:
        return self._register(ExtensionType.NAV_ITEM, module_id, item)

    def register_dashboard_card(self, module_id: str, card: ItemInput) -> Registration:
        return self._register(ExtensionType.DASHBOARD_CARD, module_id, card)

    def register_admin_view(self, module_id: str, view: ItemInput) -> Registration:
        return self._register(ExtensionType.ADMIN_VIEW, module_id, view)

    def register_quick_action(self, module_id: str, action: ItemInput) -> Registration:
        return self._register(ExtensionType.QUICK_ACTION, module_id, action)

    def unregister_nav_item(self, label_or_path: str, module_id: Optional[str] = None) -> bool:
        """Remove a nav item by path, or every nav item carrying a label.

        Keys starting with ``/`` are paths; anything else is matched against
        labels. Returns ``False`` when nothing matched.
        """
        key = (label_or_path or "").strip()
        module_id = _normalize_owner(module_id)
        if key.startswith("/"):
            return self._unregister(ExtensionType.NAV_ITEM, key, module_id)

        def _matches(entry: Registration) -> bool:
            return getattr(entry.item, "label", None) == key

        with self._store.lock:
            matches = [entry for entry in self._store.get_all(ExtensionType.NAV_ITEM) if _matches(entry)]
            if not matches:
                return False
            if module_id is not None:
                for entry in matches:
                    self._check_owner(entry, module_id)
            self._store.remove_where(ExtensionType.NAV_ITEM, _matches)
        return True

    def unregister_dashboard_card(self, card_id: str, module_id: Optional[str] = None) -> bool:
        return self._unregister(ExtensionType.DASHBOARD_CARD, card_id, module_id)

    def unregister_admin_view(self, path: str, module_id: Optional[str] = None) -> bool:
        return self._unregister(ExtensionType.ADMIN_VIEW, path, module_id)

    def unregister_quick_action(self, action_id: str, module_id: Optional[str] = None) -> bool:
        return self._unregister(ExtensionType.QUICK_ACTION, action_id, module_id)

    def unregister_module(self, module_id: str) -> int:
        """Remove every registration owned by ``module_id``; returns the count."""
        module_id = require_module_id(module_id)
        removed = 0
        for extension_type in ExtensionType:
            removed += len(
                self._store.remove_where(
                    extension_type, lambda entry: entry.module_id == module_id
                )
            )
        if removed:
            logger.info("Removed %d registration(s) owned by module %r", removed, module_id)
        return removed

    # Accessors

    def get_nav_items(self) -> list[NavItem]:
        return sorted_items(self._store.get_all(ExtensionType.NAV_ITEM))

    def get_categorized_nav_items(self) -> dict[Category, list[NavItem]]:
        return categorize(self.get_nav_items())

    def get_dashboard_cards(self) -> list[DashboardCard]:
        return sorted_items(self._store.get_all(ExtensionType.DASHBOARD_CARD))

    def get_admin_views(self) -> list[AdminView]:
        return sorted_items(self._store.get_all(ExtensionType.ADMIN_VIEW))

    def get_quick_actions(self) -> list[QuickAction]:
        return sorted_items(self._store.get_all(ExtensionType.QUICK_ACTION))

    def get_registrations(self, extension_type: ExtensionType) -> list[Registration]:
        return sort_registrations(self._store.get_all(extension_type))

    def snapshot(self, granted: Optional[Iterable[str]] = None) -> ShellManifest:
        """All four collections at once, optionally permission-filtered."""
        with self._store.lock:
            nav_items = self.get_nav_items()
            cards = self.get_dashboard_cards()
            views = self.get_admin_views()
            actions = self.get_quick_actions()
        if granted is not None:
            granted = frozenset(granted)
            nav_items = filter_by_permission(nav_items, granted)
            cards = filter_by_permission(cards, granted)
            views = filter_by_permission(views, granted)
            actions = filter_by_permission(actions, granted)
        return ShellManifest(
            nav_items=nav_items,
            categorized_nav_items=categorize(nav_items),
            dashboard_cards=cards,
            admin_views=views,
            quick_actions=actions,
        )

    # Notifications

    def subscribe(self, event: RegistryEvent, callback: Subscriber) -> Unsubscribe:
        return self._bus.subscribe(event, callback)

    def live(self, accessor: Callable[[], Any], event: RegistryEvent) -> "LiveQuery":
        from .reactive import LiveQuery

        return LiveQuery(self, accessor, event)

    def live_nav_items(self) -> "LiveQuery":
        return self.live(self.get_nav_items, RegistryEvent.NAV_UPDATED)

    def live_categorized_nav_items(self) -> "LiveQuery":
        return self.live(self.get_categorized_nav_items, RegistryEvent.NAV_UPDATED)

    def live_dashboard_cards(self) -> "LiveQuery":
        return self.live(self.get_dashboard_cards, RegistryEvent.DASHBOARD_UPDATED)

    def live_admin_views(self) -> "LiveQuery":
        return self.live(self.get_admin_views, RegistryEvent.VIEWS_UPDATED)

    def live_quick_actions(self) -> "LiveQuery":
        return self.live(self.get_quick_actions, RegistryEvent.ACTIONS_UPDATED)

    def reset(self) -> None:
        self._store.clear()
        self._bus.clear()
        self._loaded_modules.clear()

    # Internals

    def _register(
        self, extension_type: ExtensionType, module_id: str, item: ItemInput
    ) -> Registration:
        module_id = require_module_id(module_id)
        model = coerce_item(extension_type, item)
        validate_paths(model, self._settings.admin_path_prefix)
        with self._store.lock:
            if getattr(model, "order", None) is None:
                model = model.model_copy(update={"order": self._default_order(extension_type)})
            return self._store.add(extension_type, module_id, model)

    def _default_order(self, extension_type: ExtensionType) -> int:
        if self._settings.default_order_policy == "first":
            return 0
        orders = [
            entry.item.order
            for entry in self._store.get_all(extension_type)
            if entry.item.order is not None
        ]
        if not orders:
            return 0
        return max(orders) + self._settings.default_order_step

    def _unregister(
        self, extension_type: ExtensionType, key: str, module_id: Optional[str]
    ) -> bool:
        key = (key or "").strip()
        module_id = _normalize_owner(module_id)
        with self._store.lock:
            existing = self._store.get(extension_type, key)
            if existing is None:
                return False
            if module_id is not None:
                self._check_owner(existing, module_id)
            self._store.remove(extension_type, key)
        return True

    @staticmethod
    def _check_owner(entry: Registration, module_id: str) -> None:
        if entry.module_id != module_id:
            raise OwnershipError(entry.type, entry.key, entry.module_id, module_id)


def _normalize_owner(module_id: Optional[str]) -> Optional[str]:
    if module_id is None:
        return None
    return require_module_id(module_id)


_registry: Optional[AdminRegistry] = None


def init_registry(settings: Optional[Settings] = None) -> AdminRegistry:
    """Create the application-scoped registry once; later calls return it."""
    global _registry
    if _registry is None:
        _registry = AdminRegistry(settings)
        logger.info("Admin extension registry initialized")
    return _registry


def get_registry() -> AdminRegistry:
    if _registry is None:
        raise RegistryNotInitializedError(
            "init_registry() must run before the registry is used"
        )
    return _registry


def set_registry(registry: AdminRegistry) -> None:
    global _registry
    _registry = registry


def reset_registry() -> None:
    global _registry
    if _registry is not None:
        _registry.reset()
    _registry = None

from __future__ import annotations

from typing import Iterable, Optional, Sequence, TypeVar

from .schemas import CATEGORY_DISPLAY_ORDER, Category, NavItem, Registration

ItemT = TypeVar("ItemT")


def _order_value(registration: Registration) -> int:
    # Orders are resolved at registration time; None only appears for
    # registrations created outside AdminRegistry.
    order = registration.item.order
    return 0 if order is None else order


def sort_registrations(registrations: Iterable[Registration]) -> list[Registration]:
    return sorted(
        registrations,
        key=lambda entry: (_order_value(entry), entry.sequence),
    )


def sorted_items(registrations: Iterable[Registration]) -> list:
    return [entry.item for entry in sort_registrations(registrations)]


def categorize(nav_items: Sequence[NavItem]) -> dict[Category, list[NavItem]]:
    buckets: dict[Category, list[NavItem]] = {
        category: [] for category in CATEGORY_DISPLAY_ORDER
    }
    for item in nav_items:
        buckets[item.category or Category.OTHER].append(item)
    return buckets


def is_permitted(permission: Optional[str], granted: Optional[Iterable[str]]) -> bool:
    if not permission:
        return True
    if granted is None:
        return False
    return permission in set(granted)


def filter_by_permission(items: Iterable[ItemT], granted: Optional[Iterable[str]]) -> list[ItemT]:
    """Drop items whose ``permission`` is not in ``granted``.

    Items without a permission are always kept. Nav item children are
    filtered the same way and a copy of the parent is returned.
    """
    granted_set = None if granted is None else frozenset(granted)
    kept: list[ItemT] = []
    for item in items:
        if not is_permitted(getattr(item, "permission", None), granted_set):
            continue
        if isinstance(item, NavItem) and item.children:
            children = [
                child
                for child in item.children
                if is_permitted(child.permission, granted_set)
            ]
            if len(children) != len(item.children):
                item = item.model_copy(update={"children": children})  # type: ignore[assignment]
        kept.append(item)
    return kept

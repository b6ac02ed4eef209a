import pytest
from admin_registry import queries
from admin_registry.schemas import (
    Category,
    ExtensionType,
    NavChild,
    NavItem,
    QuickAction,
    Registration,
)

pytestmark = pytest.mark.unit


def _registration(item, sequence, extension_type=ExtensionType.NAV_ITEM):
    return Registration(type=extension_type, module_id="m", item=item, sequence=sequence)


def test_sort_registrations_orders_then_sequence():
    entries = [
        _registration(NavItem(label="c", path="/admin/c", order=1), 0),
        _registration(NavItem(label="a", path="/admin/a", order=0), 2),
        _registration(NavItem(label="b", path="/admin/b", order=0), 1),
    ]
    assert [item.label for item in queries.sorted_items(entries)] == ["b", "a", "c"]


def test_unresolved_order_sorts_as_zero():
    entries = [
        _registration(NavItem(label="late", path="/admin/late", order=1), 0),
        _registration(NavItem(label="none", path="/admin/none"), 1),
    ]
    assert [item.label for item in queries.sorted_items(entries)] == ["none", "late"]


def test_categorize_uses_display_order_and_keeps_relative_order():
    items = [
        NavItem(label="Sys", path="/admin/sys", category=Category.SYSTEM),
        NavItem(label="One", path="/admin/one"),
        NavItem(label="Dash", path="/admin", category=Category.DASHBOARD),
        NavItem(label="Two", path="/admin/two"),
    ]
    buckets = queries.categorize(items)

    assert list(buckets)[0] is Category.DASHBOARD
    assert list(buckets)[-1] is Category.SYSTEM
    assert [item.label for item in buckets[Category.OTHER]] == ["One", "Two"]
    assert sum(len(bucket) for bucket in buckets.values()) == len(items)


@pytest.mark.parametrize(
    "permission, granted, expected",
    [
        (None, None, True),
        ("", [], True),
        ("users:write", None, False),
        ("users:write", [], False),
        ("users:write", ["users:read"], False),
        ("users:write", ["users:read", "users:write"], True),
    ],
)
def test_is_permitted(permission, granted, expected):
    assert queries.is_permitted(permission, granted) is expected


def test_filter_by_permission_filters_children():
    item = NavItem(
        label="Users",
        path="/admin/users",
        children=[
            NavChild(label="List", path="/admin/users"),
            NavChild(label="Roles", path="/admin/users/roles", permission="roles:manage"),
        ],
    )
    locked = QuickAction(id="purge", label="Purge", permission="system:purge")

    kept = queries.filter_by_permission([item, locked], granted=["users:read"])

    assert len(kept) == 1
    assert [child.label for child in kept[0].children] == ["List"]
    # the registered item itself is untouched
    assert len(item.children) == 2


def test_filter_by_permission_returns_same_objects_when_nothing_dropped():
    item = NavItem(label="Users", path="/admin/users", children=[NavChild(label="List", path="/admin/users")])
    assert queries.filter_by_permission([item], granted=[])[0] is item

from __future__ import annotations

from ...registry import AdminRegistry
from ...schemas import Category, NavItem

MODULE_ID = "core"


def register(registry: AdminRegistry) -> None:
    registry.register_nav_item(
        MODULE_ID,
        NavItem(
            label="Dashboard",
            path=registry.settings.admin_path_prefix,
            order=0,
            category=Category.DASHBOARD,
            icon_ref="home",
        ),
    )

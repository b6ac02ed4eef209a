from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

NonEmptyStr = Annotated[str, Field(min_length=1, max_length=200)]
Order = Optional[int]


class ExtensionType(str, Enum):
    NAV_ITEM = "nav_item"
    DASHBOARD_CARD = "dashboard_card"
    ADMIN_VIEW = "admin_view"
    QUICK_ACTION = "quick_action"


class Category(str, Enum):
    DASHBOARD = "dashboard"
    USER_MANAGEMENT = "user_management"
    CONTENT = "content"
    EVENTS = "events"
    GAME = "game"
    SYSTEM = "system"
    OTHER = "other"


# Order in which the shell renders the sidebar sections.
CATEGORY_DISPLAY_ORDER: tuple[Category, ...] = (
    Category.DASHBOARD,
    Category.USER_MANAGEMENT,
    Category.EVENTS,
    Category.GAME,
    Category.CONTENT,
    Category.OTHER,
    Category.SYSTEM,
)


class WidgetKind(str, Enum):
    METRIC = "metric"
    CHART = "chart"
    TABLE = "table"
    ALERT = "alert"
    ACTION = "action"


class _ExtensionBase(BaseModel):
    order: Order = None
    permission: Optional[str] = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")


class NavChild(BaseModel):
    label: NonEmptyStr
    path: NonEmptyStr
    permission: Optional[str] = None
    icon_ref: Optional[str] = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")


class NavItem(_ExtensionBase):
    kind: Literal["nav_item"] = "nav_item"
    label: NonEmptyStr
    path: NonEmptyStr
    category: Category = Category.OTHER
    icon_ref: Optional[str] = None
    children: list[NavChild] = Field(default_factory=list)


class DashboardCard(_ExtensionBase):
    kind: Literal["dashboard_card"] = "dashboard_card"
    id: NonEmptyStr
    width: Annotated[int, Field(ge=1)] = 1
    height: Annotated[int, Field(ge=1)] = 1
    widget: WidgetKind = WidgetKind.METRIC
    title: Optional[str] = None
    component_ref: Optional[str] = None


class AdminView(_ExtensionBase):
    kind: Literal["admin_view"] = "admin_view"
    id: NonEmptyStr
    path: NonEmptyStr
    title: Optional[str] = None
    component_ref: Optional[str] = None


class QuickAction(_ExtensionBase):
    kind: Literal["quick_action"] = "quick_action"
    id: NonEmptyStr
    label: NonEmptyStr
    description: Optional[str] = None
    icon_ref: Optional[str] = None
    handler_ref: Optional[str] = None


ExtensionPoint = Annotated[
    Union[NavItem, DashboardCard, AdminView, QuickAction],
    Field(discriminator="kind"),
]

MODEL_FOR_TYPE: dict[ExtensionType, type[_ExtensionBase]] = {
    ExtensionType.NAV_ITEM: NavItem,
    ExtensionType.DASHBOARD_CARD: DashboardCard,
    ExtensionType.ADMIN_VIEW: AdminView,
    ExtensionType.QUICK_ACTION: QuickAction,
}

KEY_FIELD_FOR_TYPE: dict[ExtensionType, str] = {
    ExtensionType.NAV_ITEM: "path",
    ExtensionType.DASHBOARD_CARD: "id",
    ExtensionType.ADMIN_VIEW: "path",
    ExtensionType.QUICK_ACTION: "id",
}


def key_for(extension_type: ExtensionType, item: BaseModel) -> str:
    return str(getattr(item, KEY_FIELD_FOR_TYPE[extension_type]))


class Registration(BaseModel):
    type: ExtensionType
    module_id: str
    item: ExtensionPoint
    sequence: int

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return key_for(self.type, self.item)


class ShellManifest(BaseModel):
    nav_items: list[NavItem]
    categorized_nav_items: dict[Category, list[NavItem]]
    dashboard_cards: list[DashboardCard]
    admin_views: list[AdminView]
    quick_actions: list[QuickAction]

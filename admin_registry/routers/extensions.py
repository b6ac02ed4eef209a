from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, status

from .. import schemas
from ..registry import AdminRegistry

AdminCheck = Callable[[Request], bool]


def deny_all(_: Request) -> bool:
    return False


def get_app_registry(request: Request) -> AdminRegistry:
    return request.app.state.registry


def require_admin(request: Request) -> None:
    is_admin: AdminCheck = getattr(request.app.state, "is_admin", deny_all)
    if not is_admin(request):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "detail": "Administrator access required",
                "error_code": "admin_required",
            },
        )


router = APIRouter(
    prefix="/admin-extensions",
    tags=["Admin Extensions"],
    dependencies=[Depends(require_admin)],
)


@router.get("/nav", response_model=list[schemas.NavItem])
def list_nav_items(registry: AdminRegistry = Depends(get_app_registry)):
    return registry.get_nav_items()


@router.get(
    "/nav/categorized",
    response_model=dict[schemas.Category, list[schemas.NavItem]],
)
def list_categorized_nav_items(registry: AdminRegistry = Depends(get_app_registry)):
    return registry.get_categorized_nav_items()


@router.get("/dashboard-cards", response_model=list[schemas.DashboardCard])
def list_dashboard_cards(registry: AdminRegistry = Depends(get_app_registry)):
    return registry.get_dashboard_cards()


@router.get("/views", response_model=list[schemas.AdminView])
def list_admin_views(registry: AdminRegistry = Depends(get_app_registry)):
    return registry.get_admin_views()


@router.get("/quick-actions", response_model=list[schemas.QuickAction])
def list_quick_actions(registry: AdminRegistry = Depends(get_app_registry)):
    return registry.get_quick_actions()


@router.get("/manifest", response_model=schemas.ShellManifest)
def get_manifest(registry: AdminRegistry = Depends(get_app_registry)):
    return registry.snapshot()

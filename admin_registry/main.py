from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .config import Settings, settings as default_settings
from .errors import register_exception_handlers
from .loader import discover_modules
from .observability import configure_structured_logging
from .registry import AdminRegistry, init_registry
from .routers import extensions
from .routers.extensions import AdminCheck, deny_all
from .schemas import ExtensionType


def create_app(
    registry: Optional[AdminRegistry] = None,
    *,
    settings: Optional[Settings] = None,
    is_admin: AdminCheck = deny_all,
    load_modules: bool = True,
) -> FastAPI:
    """Compose the shell backend around a registry.

    ``is_admin`` is the host's upstream gate; the default denies every
    request. Without an explicit registry the application-scoped one is
    initialized and the feature modules are discovered into it.
    """
    settings = settings or default_settings
    configure_structured_logging(settings)

    if registry is None:
        registry = init_registry(settings)
    if load_modules:
        discover_modules(registry)

    app = FastAPI(title="Admin Extension Registry")
    app.state.registry = registry
    app.state.is_admin = is_admin
    register_exception_handlers(app)
    app.include_router(extensions.router, prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "registrations": {
                extension_type.value: registry.store.count(extension_type)
                for extension_type in ExtensionType
            },
        }

    return app


_app: Optional[FastAPI] = None


def __getattr__(name: str):
    # Built on first access; ``uvicorn admin_registry.main:app`` resolves it here.
    global _app
    if name == "app":
        if _app is None:
            _app = create_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

from __future__ import annotations

import logging
from importlib import import_module
from pkgutil import iter_modules
from typing import Callable, Optional

from .registry import AdminRegistry

logger = logging.getLogger(__name__)

RegisterHook = Callable[[AdminRegistry], None]


def discover_modules(
    registry: AdminRegistry, package_name: Optional[str] = None
) -> list[str]:
    """Run every feature module's ``register(registry)`` hook.

    Sub-packages are visited in name order. A module whose hook already ran
    against this registry is skipped. Returns the names of the modules whose
    hook ran on this call.
    """
    package_name = package_name or registry.settings.modules_package
    try:
        package = import_module(package_name)
    except ModuleNotFoundError as exc:
        if exc.name == package_name:
            return []
        raise

    package_paths = getattr(package, "__path__", None)
    if not package_paths:
        return []

    loaded: list[str] = []
    for module_info in sorted(iter_modules(package_paths), key=lambda item: item.name):
        if not module_info.ispkg:
            continue
        if module_info.name in registry.loaded_modules:
            continue
        module_path = f"{package_name}.{module_info.name}.extensions"
        hook = _load_register_hook(module_path)
        if hook is None:
            continue
        hook(registry)
        registry.mark_module_loaded(module_info.name)
        loaded.append(module_info.name)
        logger.info("Loaded admin extensions from %s", module_path)
    return loaded


def _load_register_hook(module_path: str) -> Optional[RegisterHook]:
    try:
        module = import_module(module_path)
    except ModuleNotFoundError as exc:
        if exc.name == module_path:
            return None
        raise
    hook = getattr(module, "register", None)
    if callable(hook):
        return hook
    return None

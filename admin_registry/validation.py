from __future__ import annotations

from typing import Any, Mapping, Union

import pydantic
from pydantic import BaseModel

from .errors import ValidationError
from .schemas import AdminView, ExtensionType, MODEL_FOR_TYPE, NavItem


def is_rooted_under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(f"{prefix}/")


def require_module_id(module_id: Any) -> str:
    if not isinstance(module_id, str) or not module_id.strip():
        raise ValidationError("module_id must be a non-empty string")
    return module_id.strip()


def coerce_item(
    extension_type: ExtensionType, item: Union[BaseModel, Mapping[str, Any]]
) -> BaseModel:
    model = MODEL_FOR_TYPE[extension_type]
    if isinstance(item, model):
        return item
    if isinstance(item, BaseModel):
        raise ValidationError(
            f"expected {model.__name__} for {extension_type.value}, "
            f"got {type(item).__name__}"
        )
    if not isinstance(item, Mapping):
        raise ValidationError(
            f"expected {model.__name__} or a mapping, got {type(item).__name__}"
        )
    try:
        return model.model_validate(dict(item))
    except pydantic.ValidationError as exc:
        raise ValidationError(
            f"invalid {extension_type.value}: {exc.error_count()} error(s)",
            errors=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


def validate_paths(item: BaseModel, admin_prefix: str) -> None:
    """Checks that need the configured admin prefix; schema checks already ran."""
    if isinstance(item, NavItem):
        _require_rooted("path", item.path, admin_prefix)
        for index, child in enumerate(item.children):
            _require_rooted(f"children[{index}].path", child.path, admin_prefix)
    elif isinstance(item, AdminView):
        _require_rooted("path", item.path, admin_prefix)


def _require_rooted(field: str, path: str, admin_prefix: str) -> None:
    if not is_rooted_under(path, admin_prefix):
        raise ValidationError(
            f"{field} {path!r} must be rooted under {admin_prefix!r}",
            errors=[{"loc": [field], "msg": f"must start with {admin_prefix}", "type": "path_prefix"}],
        )

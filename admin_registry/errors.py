from __future__ import annotations

from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class RegistryError(Exception):
    """Base class for failures surfaced to the contributing module."""

    error_code = "registry_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateKeyError(RegistryError):
    error_code = "duplicate_key"
    status_code = 409

    def __init__(self, extension_type: Any, key: str, owner: str | None = None):
        type_name = getattr(extension_type, "value", extension_type)
        message = f"{type_name} with key {key!r} is already registered"
        if owner:
            message = f"{message} by module {owner!r}"
        super().__init__(message)
        self.extension_type = extension_type
        self.key = key
        self.owner = owner


class ValidationError(RegistryError):
    error_code = "validation_error"
    status_code = 422

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class OwnershipError(RegistryError):
    error_code = "ownership_mismatch"
    status_code = 403

    def __init__(self, extension_type: Any, key: str, owner: str, requested_by: str):
        type_name = getattr(extension_type, "value", extension_type)
        super().__init__(
            f"{type_name} {key!r} belongs to module {owner!r}, "
            f"not {requested_by!r}"
        )
        self.extension_type = extension_type
        self.key = key
        self.owner = owner
        self.requested_by = requested_by


class RegistryNotInitializedError(RuntimeError):
    pass


def _status_title(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def _status_error_code(status_code: int) -> str:
    return f"http_{status_code}"


def _normalize_detail(detail: Any) -> tuple[str, str]:
    if isinstance(detail, dict):
        text = str(detail.get("detail", "Request failed"))
        code = str(detail.get("error_code", "request_failed"))
        return text, code
    if detail is None:
        return "Request failed", "request_failed"
    return str(detail), "request_failed"


def problem_document(
    *,
    request: Request,
    status_code: int,
    title: str,
    detail: str,
    error_code: str,
    type_uri: str = "about:blank",
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": type_uri,
        "title": title,
        "status": status_code,
        "detail": detail,
        "instance": str(request.url.path),
        "error_code": error_code,
    }
    if extra:
        payload.update(extra)
    return payload


def problem_response(
    *,
    request: Request,
    status_code: int,
    title: str,
    detail: str,
    error_code: str,
    type_uri: str = "about:blank",
    headers: dict[str, str] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=problem_document(
            request=request,
            status_code=status_code,
            title=title,
            detail=detail,
            error_code=error_code,
            type_uri=type_uri,
            extra=extra,
        ),
        headers=headers,
        media_type="application/problem+json",
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        request: Request, exc: HTTPException | StarletteHTTPException
    ) -> JSONResponse:
        detail, error_code = _normalize_detail(exc.detail)
        return problem_response(
            request=request,
            status_code=exc.status_code,
            title=_status_title(exc.status_code),
            detail=detail,
            error_code=error_code or _status_error_code(exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return problem_response(
            request=request,
            status_code=422,
            title=_status_title(422),
            detail="Request validation failed",
            error_code="validation_error",
            extra={"errors": exc.errors()},
        )

    @app.exception_handler(RegistryError)
    async def _registry_exception_handler(
        request: Request, exc: RegistryError
    ) -> JSONResponse:
        extra = None
        if isinstance(exc, ValidationError) and exc.errors:
            extra = {"errors": exc.errors}
        return problem_response(
            request=request,
            status_code=exc.status_code,
            title=_status_title(exc.status_code),
            detail=exc.message,
            error_code=exc.error_code,
            extra=extra,
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(
        request: Request, _: Exception
    ) -> JSONResponse:
        return problem_response(
            request=request,
            status_code=500,
            title=_status_title(500),
            detail="Internal Server Error",
            error_code=_status_error_code(500),
        )

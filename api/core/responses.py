"""
Response envelope shared by every endpoint.

Success: {"data": ..., "message": ..., "status": "success"}
Failure: {"error": ..., "message": ..., "status": "error"}
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)


def ok(data: Any, message: str) -> dict[str, Any]:
    return {"data": data, "message": message, "status": "success"}


def error_body(error: str, message: str) -> dict[str, str]:
    return {"error": error, "message": message, "status": "error"}


def api_error(status_code: int, error: str, message: str) -> HTTPException:
    """
    Build an HTTPException whose detail carries both envelope fields.
    """
    return HTTPException(status_code=status_code, detail={"error": error, "message": message})


def _summarize_validation(errors: list[dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = str(err.get("msg") or "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request."


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        error = str(detail.get("error") or "")
        message = str(detail.get("message") or error)
    else:
        error = message = str(detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(error, message),
        headers=getattr(exc, "headers", None),
    )


def _invalid_path_id(errors: list[dict[str, Any]]) -> str | None:
    """
    Entity name of a malformed `<entity>_id` path parameter, if any.
    """
    for err in errors:
        loc = tuple(err.get("loc", ()))
        if len(loc) == 2 and loc[0] == "path" and str(loc[1]).endswith("_id"):
            return str(loc[1])[: -len("_id")]
    return None


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = list(exc.errors())
    entity = _invalid_path_id(errors)
    if entity:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(f"Invalid {entity} ID", f"{entity.capitalize()} ID must be a number"),
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(_summarize_validation(errors), "Invalid request data"),
    )


async def not_found_handler(_: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_body(str(exc), "Resource not found"),
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("storage_error method=%s path=%s error=%s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(str(exc), "Storage operation failed"),
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)

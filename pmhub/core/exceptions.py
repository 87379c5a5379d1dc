# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Application exceptions and their JSON handlers.

Every error leaves the API in the same envelope: ``{"error": "<message>"}``.
Validation errors additionally carry a ``fields`` mapping so the client can
render messages inline next to the offending input.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

__all__ = [
    "CustomHTTPException",
    "ValidationException",
    "AuthException",
    "NotFoundException",
    "ForbiddenException",
    "ConflictException",
    "InternalException",
    "InvalidCredentials",
    "InvalidToken",
    "MissingToken",
    "DuplicateEmail",
    "RequestValidationError",
    "http_exception_handler",
    "validation_exception_handler",
    "python_exception_handler",
]


class CustomHTTPException(HTTPException):
    """HTTPException carrying an optional application error code."""

    def __init__(
        self,
        status_code: int,
        detail: Any = None,
        error_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationException(CustomHTTPException):
    """Missing or malformed required field."""

    def __init__(self, detail: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
        self.fields = fields or {}


class AuthException(CustomHTTPException):
    """Missing (401) or invalid/expired (403) bearer token."""

    def __init__(
        self,
        detail: str = "Invalid token",
        status_code: int = status.HTTP_403_FORBIDDEN,
    ):
        super().__init__(
            status_code=status_code,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundException(CustomHTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenException(CustomHTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictException(CustomHTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InternalException(CustomHTTPException):
    """Unexpected store or I/O failure. The message must stay generic."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
        )


class InvalidCredentials(AuthException):
    """Unknown email and wrong password are reported identically."""

    def __init__(self):
        super().__init__(
            detail="Invalid credentials", status_code=status.HTTP_401_UNAUTHORIZED
        )


class InvalidToken(AuthException):
    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail=detail, status_code=status.HTTP_403_FORBIDDEN)


class MissingToken(AuthException):
    def __init__(self):
        super().__init__(
            detail="Missing token", status_code=status.HTTP_401_UNAUTHORIZED
        )


class DuplicateEmail(ConflictException):
    def __init__(self):
        super().__init__(detail="Email already registered")


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render any HTTPException into the error envelope."""
    content: Dict[str, Any] = {"error": str(exc.detail)}
    fields = getattr(exc, "fields", None)
    if fields:
        content["fields"] = fields
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Convert request body/query validation failures into a 400 response with
    field-level detail.
    """
    fields: Dict[str, str] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body",)]
        key = ".".join(loc) if loc else "__root__"
        fields.setdefault(key, error.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Request validation failed", "fields": fields},
    )


async def python_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the detail, expose only a generic message."""
    path = request.url.path if request is not None else "-"
    logger.error(f"Unhandled exception on {path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )

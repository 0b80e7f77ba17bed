"""Pydantic request/response schemas."""

from cms.schemas.auth import (
    CurrentUser,
    ErrorResponse,
    FieldErrorItem,
    FieldErrorsResponse,
    LoginRequest,
    RegisterRequest,
    UserListItem,
)
from cms.schemas.health import HealthResponse
from cms.schemas.page import (
    PageAuthor,
    PageIdResponse,
    PageRequest,
    PageResponse,
    WebsiteName,
)

__all__ = [
    "CurrentUser",
    "ErrorResponse",
    "FieldErrorItem",
    "FieldErrorsResponse",
    "HealthResponse",
    "LoginRequest",
    "PageAuthor",
    "PageIdResponse",
    "PageRequest",
    "PageResponse",
    "RegisterRequest",
    "UserListItem",
    "WebsiteName",
]

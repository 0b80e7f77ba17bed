"""Request/response schemas for session and user endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., max_length=255, description="Account email")
    password: str = Field(..., max_length=1024, description="Password")


class RegisterRequest(BaseModel):
    """
    Sign-up payload. Fields default to empty so that missing values are reported by the
    registration rules as field errors instead of a generic schema error.
    """

    email: str = Field(default="", max_length=1024, description="Account email")
    name: str = Field(default="", max_length=1024, description="Display name")
    password: str = Field(default="", max_length=1024, description="Password")


class CurrentUser(BaseModel):
    """Authenticated user (id, email, name, admin flag) for dependency injection."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    name: str
    is_admin: bool = Field(default=False, alias="isAdmin")


class UserListItem(BaseModel):
    """User entry for admin list (no email, no credentials)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    is_admin: bool = Field(alias="isAdmin")


class FieldErrorItem(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error: str


class FieldErrorsResponse(BaseModel):
    """Response for rejected registrations: one entry per failed rule."""

    errors: list[FieldErrorItem]

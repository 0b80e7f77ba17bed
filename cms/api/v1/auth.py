"""Session cookie login/logout, registration, and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from cms.core.config import Settings, get_settings
from cms.core.database import get_db
from cms.core.errors import AuthenticationFailure, AuthorizationFailure
from cms.core.security import PasswordHasher, TokenService
from cms.schemas.auth import (
    CurrentUser,
    ErrorResponse,
    FieldErrorsResponse,
    LoginRequest,
    RegisterRequest,
)
from cms.services.auth_service import AuthService
from cms.services.revocation import RevocationList
from cms.services.user_store import CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter()


def get_token_service(settings: Annotated[Settings, Depends(get_settings)]) -> TokenService:
    return TokenService(
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        ttl_seconds=settings.ACCESS_TOKEN_TTL_SECONDS,
    )


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Dependency: AuthService wired to this request's DB session and the process settings."""
    return AuthService(
        CredentialStore(db),
        PasswordHasher(settings.BCRYPT_ROUNDS),
        tokens,
        RevocationList(db) if settings.TOKEN_REVOCATION_ENABLED else None,
    )


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_TTL_SECONDS,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def get_optional_user(
    request: Request,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser | None:
    """Dependency: the logged-in user, or None for guests and for any invalid/expired/revoked cookie."""
    user = auth.resolve_principal(request.cookies.get(settings.COOKIE_NAME))
    if user is None:
        return None
    return CurrentUser.model_validate(user)


def get_current_user(
    user: Annotated[CurrentUser | None, Depends(get_optional_user)],
) -> CurrentUser:
    """Dependency: require a valid session cookie. Raises 401 if missing or invalid."""
    if user is None:
        raise AuthenticationFailure("Not authenticated")
    return user


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require an authenticated admin. Non-admins get 401 like anonymous callers."""
    if not current_user.is_admin:
        logger.warning("Admin access denied: user_id=%s", current_user.id)
        raise AuthorizationFailure("Not authorized")
    return current_user


@router.post(
    "/sessions",
    response_model=CurrentUser,
    responses={400: {"model": ErrorResponse}},
)
def login(
    body: LoginRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """
    Authenticate with email and password; sets the HTTP-only session cookie.
    Unknown email and wrong password produce the same 400 response.
    """
    user, token = auth.login(body.email, body.password)
    _set_session_cookie(response, token, settings)
    return CurrentUser.model_validate(user)


@router.delete("/sessions/current", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    request: Request,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Clear the session cookie and deny-list its token. Works with or without a cookie."""
    auth.logout(request.cookies.get(settings.COOKIE_NAME))
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(
        settings.COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )
    return response


@router.get(
    "/sessions/current",
    response_model=CurrentUser,
    responses={401: {"model": ErrorResponse}},
)
def get_session(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Return the user behind the session cookie."""
    return current_user


@router.post(
    "/register",
    response_model=CurrentUser,
    responses={400: {"model": FieldErrorsResponse}},
)
def register(
    body: RegisterRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """
    Create a (non-admin) account and log it in.
    Rule violations return 400 with one entry per failed field rule; a taken email returns
    400 {"error": "User already exists."}.
    """
    user, token = auth.register(body.email, body.name, body.password)
    _set_session_cookie(response, token, settings)
    return CurrentUser.model_validate(user)

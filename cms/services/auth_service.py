"""Login, registration, logout and session resolution."""

import logging

from email_validator import EmailNotValidError, validate_email

from cms.core.errors import AuthenticationFailure, FieldError, FieldValidationError, InternalError
from cms.core.security import (
    EMAIL_MAX_LEN,
    NAME_MAX_LEN,
    PASSWORD_MAX_BYTES,
    PASSWORD_MIN_LEN,
    PasswordHasher,
    TokenService,
    Valid,
)
from cms.models import User
from cms.services.revocation import RevocationList
from cms.services.user_store import CredentialStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."


def validate_registration(email: str, name: str, password: str) -> list[FieldError]:
    """Collect every failed registration rule; an empty list means the input is acceptable."""
    errors: list[FieldError] = []

    email = (email or "").strip()
    if not email or len(email) > EMAIL_MAX_LEN:
        errors.append(FieldError("email", "A valid email is required"))
    else:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            errors.append(FieldError("email", "A valid email is required"))

    name = (name or "").strip()
    if not name:
        errors.append(FieldError("name", "Name cannot be empty"))
    elif len(name) > NAME_MAX_LEN:
        errors.append(FieldError("name", f"Name must be at most {NAME_MAX_LEN} characters long"))

    password = password or ""
    if not password:
        errors.append(FieldError("password", "Password cannot be empty"))
        return errors
    if len(password) < PASSWORD_MIN_LEN:
        errors.append(
            FieldError("password", f"Password must be at least {PASSWORD_MIN_LEN} characters long")
        )
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(
            FieldError("password", f"Password must be at most {PASSWORD_MAX_BYTES} bytes long")
        )
    if all(c.isalnum() for c in password):
        errors.append(FieldError("password", "Password must contain at least one special character"))
    if name and name.lower() in password.lower():
        errors.append(FieldError("password", "Don't include your name in the password"))
    return errors


class AuthService:
    """
    Orchestrates the credential store, the password hasher and the token service.

    revocations is None when TOKEN_REVOCATION_ENABLED is off; logout then only clears
    the cookie and tokens stay valid until they expire.
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenService,
        revocations: RevocationList | None = None,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.revocations = revocations

    def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Verify credentials and issue a session token.

        Unknown email and wrong password raise the same AuthenticationFailure, and an
        unknown email still pays for one hash so response time does not reveal it.
        """
        user = self.store.find_by_email(email)
        if user is None:
            self.hasher.burn(password or "")
            logger.info("Login rejected")
            raise AuthenticationFailure(INVALID_CREDENTIALS_MESSAGE, status_code=400)
        if not self.hasher.verify(password or "", user.password_hash, user.password_salt):
            logger.info("Login rejected")
            raise AuthenticationFailure(INVALID_CREDENTIALS_MESSAGE, status_code=400)

        if self.hasher.needs_rehash(user.password_salt):
            self._upgrade_hash(user, password)

        token = self.tokens.issue(user.id)
        logger.info("Login succeeded: user_id=%s", user.id)
        return user, token

    def _upgrade_hash(self, user: User, password: str) -> None:
        password_hash, password_salt = self.hasher.hash(password)
        try:
            self.store.update_password(user, password_hash, password_salt)
        except InternalError:
            logger.warning("Password rehash skipped for user_id=%s", user.id)
            return
        logger.info("Password rehashed with current cost: user_id=%s", user.id)

    def register(self, email: str, name: str, password: str) -> tuple[User, str]:
        """Validate, store and log in a new non-admin user. Nothing is written if validation fails."""
        errors = validate_registration(email, name, password)
        if errors:
            raise FieldValidationError(errors)

        try:
            password_hash, password_salt = self.hasher.hash(password)
        except (ValueError, TypeError) as e:
            logger.exception("Password hashing failed")
            raise InternalError("Unable to register the user into the database.", e) from e

        user_id = self.store.create(email, name, password_hash, password_salt)
        user = self.store.find_by_id(user_id)
        if user is None:
            raise InternalError("Unable to register the user into the database.")
        token = self.tokens.issue(user.id)
        logger.info("Registered user_id=%s", user.id)
        return user, token

    def logout(self, token: str | None) -> None:
        """Deny-list the token's id when revocation is enabled. Bad or missing tokens are ignored."""
        if self.revocations is None:
            return
        result = self.tokens.verify(token)
        if isinstance(result, Valid):
            self.revocations.revoke(result.claims.token_id, result.claims.expires_at)
            logger.info("Session revoked: user_id=%s", result.claims.user_id)

    def resolve_principal(self, token: str | None) -> User | None:
        """User for a valid, unrevoked token; None for absent, invalid, expired or revoked tokens."""
        if not token:
            return None
        result = self.tokens.verify(token)
        if not isinstance(result, Valid):
            logger.debug("Session token rejected: %s", type(result).__name__)
            return None
        if self.revocations is not None and self.revocations.is_revoked(result.claims.token_id):
            logger.debug("Session token rejected: revoked")
            return None
        return self.store.find_by_id(result.claims.user_id)

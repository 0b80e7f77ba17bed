"""Credential store: durable user lookups and creation on top of a SQLAlchemy session."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cms.core.errors import ConflictError, InternalError
from cms.models import User

logger = logging.getLogger(__name__)

USER_EXISTS_MESSAGE = "User already exists."


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class CredentialStore:
    """
    Users table access. No caching: every call reads or writes the database.

    Write methods commit on success and roll back on failure, so a failed call leaves
    no partial row behind.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        key = normalize_email(email)
        if not key:
            return None
        return self.db.query(User).filter(func.lower(User.email) == key).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def is_registered(self, user_id: int) -> bool:
        return self.find_by_id(user_id) is not None

    def create(
        self,
        email: str,
        name: str,
        password_hash: str,
        password_salt: str,
    ) -> int:
        """Insert a non-admin user and return its id. Raises ConflictError on duplicate email."""
        key = normalize_email(email)
        if self.find_by_email(key) is not None:
            raise ConflictError(USER_EXISTS_MESSAGE)
        user = User(
            email=key,
            name=name.strip(),
            password_hash=password_hash,
            password_salt=password_salt,
            is_admin=False,
        )
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email.
            self.db.rollback()
            raise ConflictError(USER_EXISTS_MESSAGE) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("User insert failed")
            raise InternalError("Unable to register the user into the database.", e) from e
        self.db.refresh(user)
        return user.id

    def update_password(self, user: User, password_hash: str, password_salt: str) -> None:
        user.password_hash = password_hash
        user.password_salt = password_salt
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Password update failed for user_id=%s", user.id)
            raise InternalError("Unable to update the user.", e) from e

    def set_admin(self, email: str, is_admin: bool) -> User | None:
        """Grant or revoke the admin flag. Out-of-band use only; no endpoint calls this."""
        user = self.find_by_email(email)
        if user is None:
            return None
        user.is_admin = is_admin
        self.db.commit()
        return user

    def list_all(self) -> list[User]:
        return self.db.query(User).order_by(User.id).all()

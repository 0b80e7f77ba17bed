"""ORM model for application users (credentials and admin flag)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func, false

from cms.models.base import Base


class User(Base):
    """
    User account for cookie session authentication.

    email is stored trimmed and lower-cased; the unique index is what prevents two
    concurrent registrations from creating the same account. is_admin is only changed
    out-of-band (see cms.scripts.set_admin).
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    password_salt = Column(String(64), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        # Never include credentials in reprs; they end up in logs and tracebacks.
        return f"<User id={self.id} admin={self.is_admin}>"

"""ORM model for the session token deny-list written at logout."""

from sqlalchemy import Column, DateTime, String, func

from cms.models.base import Base


class RevokedToken(Base):
    """
    Token id (jti) of a logged-out session.

    Rows are only meaningful until expires_at; after that the token is rejected as
    expired anyway and the row is purged by cms.services.retention.
    """

    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    revoked_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

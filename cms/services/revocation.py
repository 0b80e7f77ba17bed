"""Deny-list of logged-out session tokens, keyed by token id (jti)."""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cms.models import RevokedToken

logger = logging.getLogger(__name__)


class RevocationList:
    def __init__(self, db: Session) -> None:
        self.db = db

    def revoke(self, token_id: str, expires_at: datetime) -> None:
        """Record token_id until expires_at. Revoking the same token twice is a no-op."""
        if self.is_revoked(token_id):
            return
        self.db.add(RevokedToken(jti=token_id, expires_at=expires_at))
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent logout with the same cookie already recorded it.
            self.db.rollback()

    def is_revoked(self, token_id: str) -> bool:
        return self.db.get(RevokedToken, token_id) is not None

"""Retention: purge deny-list rows whose tokens have expired anyway."""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from cms.models import RevokedToken

if TYPE_CHECKING:
    from cms.core.config import Settings

logger = logging.getLogger(__name__)


def run_retention(session: Session, settings: "Settings") -> int:
    """
    Delete revoked-token rows past their expiry and return how many were removed.

    An expired token is rejected on expiry alone, so its deny-list row is dead weight.
    Idempotent: safe to run repeatedly.
    """
    if not settings.RETENTION_ENABLED:
        logger.info("Retention is disabled (RETENTION_ENABLED=false); skipping.")
        return 0

    now = datetime.now(timezone.utc)
    deleted_count = (
        session.query(RevokedToken)
        .filter(RevokedToken.expires_at < now)
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.info(
            "Retention run: now=%s, revoked_tokens_deleted=%s",
            now.isoformat(),
            deleted_count,
        )
    return deleted_count

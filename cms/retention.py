"""
CLI entrypoint for the revoked-token purge. Run from cron, e.g.:

  python -m cms.retention

Or daily: 0 3 * * * cd /path/to/cms && .venv/bin/python -m cms.retention
"""

import logging
import sys

from cms.core.config import get_settings
from cms.core.database import get_session_factory
from cms.core.logging_config import configure_logging
from cms.services.retention import run_retention

logger = logging.getLogger(__name__)


def main() -> int:
    """Run retention: delete deny-list rows for tokens that have expired."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    db = get_session_factory()()
    try:
        deleted = run_retention(db, settings)
        logger.info("Retention completed: revoked_tokens_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Retention job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

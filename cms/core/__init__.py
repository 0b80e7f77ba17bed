"""Core app configuration, database and security primitives."""

from cms.core.config import get_settings
from cms.core.database import get_db

__all__ = ["get_settings", "get_db"]

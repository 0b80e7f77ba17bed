"""SQLAlchemy ORM models."""

from cms.models.base import Base
from cms.models.page import Page
from cms.models.revoked_token import RevokedToken
from cms.models.user import User
from cms.models.website import Website

__all__ = ["Base", "Page", "RevokedToken", "User", "Website"]

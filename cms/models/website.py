"""ORM model for site-wide settings (a single row)."""

from sqlalchemy import Column, Integer, String

from cms.models.base import Base


class Website(Base):
    __tablename__ = "website"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)

"""ORM model for CMS pages (metadata only; page content lives elsewhere)."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from cms.models.base import Base


class Page(Base):
    """A page is published when publication_date is set and not in the future."""

    __tablename__ = "pages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    creation_date = Column(Date, nullable=False)
    publication_date = Column(Date, nullable=True, index=True)

    author = relationship("User", lazy="joined")

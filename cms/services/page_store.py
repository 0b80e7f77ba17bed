"""Page and website-name persistence, with the ownership rule applied on every mutation."""

import logging
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from cms.core.errors import AuthorizationFailure, FieldError, FieldValidationError, NotFoundError
from cms.core.security import can_modify
from cms.models import Page, Website
from cms.schemas.page import PageRequest
from cms.services.user_store import CredentialStore

if TYPE_CHECKING:
    from cms.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

PAGE_NOT_FOUND_MESSAGE = "Page not found!"


class PageStore:
    """
    Pages visible to a principal: guests (principal None) only see published pages.

    Edit and delete check ownership here, server-side, whatever the client displays.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _visible(self, principal: "CurrentUser | None"):
        query = self.db.query(Page)
        if principal is None:
            query = query.filter(
                Page.publication_date.is_not(None),
                Page.publication_date <= date.today(),
            )
        return query

    def list_pages(self, principal: "CurrentUser | None", search: str | None = None) -> list[Page]:
        query = self._visible(principal)
        if search:
            query = query.filter(Page.title.contains(search.strip(), autoescape=True))
        return query.order_by(Page.publication_date, Page.id).all()

    def get_page(self, page_id: int, principal: "CurrentUser | None") -> Page | None:
        return self._visible(principal).filter(Page.id == page_id).first()

    def _resolve_author(
        self, body: PageRequest, principal: "CurrentUser", default: int
    ) -> int:
        author_id = body.author if body.author is not None else default
        if author_id != principal.id and not principal.is_admin:
            raise FieldValidationError(
                [FieldError("author", "Only admins can set authors as a different user.")],
                status_code=422,
            )
        if not CredentialStore(self.db).is_registered(author_id):
            raise FieldValidationError(
                [FieldError("author", "The author must be a registered user.")],
                status_code=422,
            )
        return author_id

    def create_page(self, body: PageRequest, principal: "CurrentUser") -> Page:
        page = Page(
            title=body.title,
            author_id=self._resolve_author(body, principal, principal.id),
            creation_date=date.today(),
            publication_date=body.publication_date,
        )
        self.db.add(page)
        self.db.commit()
        self.db.refresh(page)
        logger.info("Page created: page_id=%s user_id=%s", page.id, principal.id)
        return page

    def _owned_page(self, page_id: int, principal: "CurrentUser", denied: str) -> Page:
        page = self.get_page(page_id, principal)
        if page is None:
            raise NotFoundError(PAGE_NOT_FOUND_MESSAGE)
        if not can_modify(principal, page.author_id):
            logger.warning("Page access denied: page_id=%s user_id=%s", page_id, principal.id)
            raise AuthorizationFailure(denied)
        return page

    def edit_page(self, page_id: int, body: PageRequest, principal: "CurrentUser") -> Page:
        page = self._owned_page(page_id, principal, "You cannot edit this page!")
        page.author_id = self._resolve_author(body, principal, page.author_id)
        page.title = body.title
        page.publication_date = body.publication_date
        self.db.commit()
        self.db.refresh(page)
        return page

    def delete_page(self, page_id: int, principal: "CurrentUser") -> None:
        page = self._owned_page(page_id, principal, "You cannot delete this page!")
        self.db.delete(page)
        self.db.commit()
        logger.info("Page deleted: page_id=%s user_id=%s", page_id, principal.id)

    def get_website_name(self, default: str) -> str:
        website = self.db.get(Website, 1)
        return website.name if website is not None else default

    def change_website_name(self, name: str) -> None:
        website = self.db.get(Website, 1)
        if website is None:
            self.db.add(Website(id=1, name=name))
        else:
            website.name = name
        self.db.commit()

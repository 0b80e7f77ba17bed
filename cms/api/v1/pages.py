"""Page endpoints. Guests read published pages; mutations require a session and ownership (or admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from cms.api.v1.auth import get_current_user, get_optional_user
from cms.core.database import get_db
from cms.core.errors import NotFoundError
from cms.schemas.auth import CurrentUser, ErrorResponse
from cms.schemas.page import PageIdResponse, PageRequest, PageResponse
from cms.services.page_store import PAGE_NOT_FOUND_MESSAGE, PageStore

router = APIRouter()


def get_page_store(db: Annotated[Session, Depends(get_db)]) -> PageStore:
    return PageStore(db)


@router.get("", response_model=list[PageResponse])
def list_pages(
    pages: Annotated[PageStore, Depends(get_page_store)],
    user: Annotated[CurrentUser | None, Depends(get_optional_user)],
    search: Annotated[str | None, Query(max_length=255)] = None,
) -> list[PageResponse]:
    """List pages; guests only get published ones."""
    return [PageResponse.model_validate(p) for p in pages.list_pages(user, search)]


@router.get(
    "/{page_id}",
    response_model=PageResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_page(
    page_id: int,
    pages: Annotated[PageStore, Depends(get_page_store)],
    user: Annotated[CurrentUser | None, Depends(get_optional_user)],
) -> PageResponse:
    page = pages.get_page(page_id, user)
    if page is None:
        raise NotFoundError(PAGE_NOT_FOUND_MESSAGE)
    return PageResponse.model_validate(page)


@router.post(
    "",
    response_model=PageIdResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}},
)
def create_page(
    body: PageRequest,
    pages: Annotated[PageStore, Depends(get_page_store)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PageIdResponse:
    """Create a page authored by the caller (admins may name another author)."""
    page = pages.create_page(body, user)
    return PageIdResponse(id=page.id)


@router.put(
    "/{page_id}",
    response_model=PageIdResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def edit_page(
    page_id: int,
    body: PageRequest,
    pages: Annotated[PageStore, Depends(get_page_store)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PageIdResponse:
    """Edit a page. Only its author or an admin may do so."""
    page = pages.edit_page(page_id, body, user)
    return PageIdResponse(id=page.id)


@router.delete(
    "/{page_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_page(
    page_id: int,
    pages: Annotated[PageStore, Depends(get_page_store)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Response:
    """Delete a page. Only its author or an admin may do so."""
    pages.delete_page(page_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

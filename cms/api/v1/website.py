"""Site-wide website name: public read, admin-only update."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from cms.api.v1.auth import require_admin
from cms.core.config import Settings, get_settings
from cms.core.database import get_db
from cms.schemas.auth import CurrentUser, ErrorResponse
from cms.schemas.page import WebsiteName
from cms.services.page_store import PageStore

router = APIRouter()


@router.get("/name", response_model=WebsiteName)
def get_website_name(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WebsiteName:
    return WebsiteName(name=PageStore(db).get_website_name(settings.DEFAULT_WEBSITE_NAME))


@router.put(
    "/name",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}},
)
def change_website_name(
    body: WebsiteName,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    PageStore(db).change_website_name(body.name.strip())
    return Response(status_code=status.HTTP_204_NO_CONTENT)

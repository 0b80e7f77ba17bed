"""Admin-only user listing."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cms.api.v1.auth import require_admin
from cms.core.database import get_db
from cms.schemas.auth import CurrentUser, ErrorResponse, UserListItem
from cms.services.user_store import CredentialStore

router = APIRouter()


@router.get(
    "",
    response_model=list[UserListItem],
    responses={401: {"model": ErrorResponse}},
)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserListItem]:
    """List all users as {id, name, isAdmin} (admin only). Emails and credentials are not exposed."""
    return [UserListItem.model_validate(u) for u in CredentialStore(db).list_all()]

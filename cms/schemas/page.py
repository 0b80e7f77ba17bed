"""Request/response schemas for page and website endpoints."""

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PageRequest(BaseModel):
    """Body for creating or editing a page. author defaults to the logged-in user."""

    title: str = Field(..., min_length=1, max_length=255)
    publication_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("publicationDate", "publication_date"),
    )
    author: int | None = Field(default=None, description="User id of the author")


class PageAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    is_admin: bool = Field(alias="isAdmin")


class PageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    author: PageAuthor
    creation_date: date = Field(alias="creationDate")
    publication_date: date | None = Field(default=None, alias="publicationDate")


class PageIdResponse(BaseModel):
    id: int


class WebsiteName(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)

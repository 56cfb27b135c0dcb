"""Pydantic schemas for recipe list requests."""

from pydantic import Field

from sufra.api.v1.schemas.base_schema import BaseSchema
from sufra.enums.bulk_action_enums import ListBulkActionEnum


class ListCreateRequest(BaseSchema):
    """Request schema for creating a list."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    cover_image: str | None = None


class ListUpdateRequest(BaseSchema):
    """Request schema for editing a list; only supplied fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    cover_image: str | None = None
    is_public: bool | None = None
    request_publish: bool = False


class ListRecipeRequest(BaseSchema):
    """Identifies the recipe to add to a list."""

    recipe_id: int


class ListBulkActionRequest(BaseSchema):
    """Bulk moderation over lists."""

    ids: list[int] = Field(..., min_length=1)
    action: ListBulkActionEnum

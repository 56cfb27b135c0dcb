"""Response schemas for the AI endpoints."""

from pydantic import Field

from sufra.api.v1.schemas.base_schema import BaseSchema


class BulkTagError(BaseSchema):
    recipe_id: int
    error: str


class BulkTagResponse(BaseSchema):
    """Per-recipe outcome of a bulk tagging run."""

    success_count: int
    total: int
    errors: list[BulkTagError] = Field(default_factory=list)


class ModelListResponse(BaseSchema):
    models: list[str]

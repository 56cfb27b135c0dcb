"""Small response bodies shared by several routes."""

from pydantic import Field

from sufra.api.v1.schemas.base_schema import BaseSchema


class MessageResponse(BaseSchema):
    """Outcome of an action that returns no resource."""

    message: str
    count: int | None = Field(
        default=None, description="Number of rows affected, where meaningful."
    )


class ToggleResponse(BaseSchema):
    """Whether a recipe is in the list after a toggle."""

    list_id: int
    recipe_id: int
    in_list: bool

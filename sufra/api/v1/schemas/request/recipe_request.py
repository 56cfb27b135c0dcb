"""Pydantic schemas for recipe write requests.

``ingredients`` is accepted in any of its three stored shapes and parsed by
``sufra.services.ingredient_service.parse_ingredient_input``.
"""

from typing import Any

from pydantic import Field, field_validator

from sufra.api.v1.schemas.base_schema import BaseSchema
from sufra.enums.bulk_action_enums import RecipeBulkActionEnum
from sufra.enums.difficulty_level_enum import DifficultyLevelEnum
from sufra.enums.recipe_status_enum import RecipeStatusEnum


class StepGroup(BaseSchema):
    """A named group of steps, e.g. the steps for the sauce."""

    name: str | None = Field(default=None, max_length=255)
    items: list[str] = Field(default_factory=list)


class RecipeFields(BaseSchema):
    """Fields shared by create and update. Every field is optional here."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    image_path: str | None = None
    city_id: int | None = None
    servings: str | None = Field(default=None, max_length=100)
    time_needed: str | list[Any] | None = None
    difficulty: DifficultyLevelEnum | None = None
    steps: list[str | StepGroup] | None = None
    ingredients: list[Any] | dict[str, Any] | None = None
    tags: list[str] | None = None
    manual_author_name: str | None = Field(
        default=None,
        max_length=255,
        description="Credit the recipe to an anonymous author (moderators only).",
    )
    user_id: int | None = Field(
        default=None,
        description="Credit the recipe to another registered user (moderators only).",
    )

    @field_validator("servings", mode="before")
    @classmethod
    def _servings_as_text(cls, value: Any) -> Any:
        if isinstance(value, int | float):
            return str(value)
        return value

    def steps_payload(self) -> list[Any]:
        """Steps as stored JSON, with blank lines dropped."""
        payload: list[Any] = []
        for step in self.steps or []:
            if isinstance(step, StepGroup):
                items = [item.strip() for item in step.items if item.strip()]
                if items:
                    payload.append({"name": step.name, "items": items})
            elif step.strip():
                payload.append(step.strip())
        return payload


class RecipeCreateRequest(RecipeFields):
    """Request schema for submitting a recipe."""

    name: str = Field(..., min_length=1, max_length=255)


class RecipeUpdateRequest(RecipeFields):
    """Request schema for editing a recipe; only supplied fields change."""


class RejectRecipeRequest(BaseSchema):
    """Reason shown to the author when a recipe is rejected."""

    reason: str | None = None


class RecipeBulkActionRequest(BaseSchema):
    """Bulk moderation over recipes."""

    ids: list[int] = Field(..., min_length=1)
    action: RecipeBulkActionEnum
    status: RecipeStatusEnum | None = Field(
        default=None, description="Target status for change_status."
    )
    reason: str | None = Field(
        default=None, description="Rejection reason when status is rejected."
    )

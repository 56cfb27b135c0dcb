"""Prompt that picks tags for one existing recipe."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from .base import BasePrompt


class RecipeTagsResult(BaseModel):
    """Output schema for recipe tagging."""

    model_config = ConfigDict(extra="ignore")

    tags: list[str] = Field(...)


class RecipeTaggingPrompt(BasePrompt[RecipeTagsResult]):
    """Choose the tags that fit a recipe from the existing vocabulary."""

    output_schema: ClassVar[type[BaseModel]] = RecipeTagsResult

    def format(
        self,
        recipe_name: str = "",
        ingredients: list[str] | None = None,
        available_tags: list[str] | None = None,
        current_tags: list[str] | None = None,
        **_: Any,
    ) -> str:
        ingredient_text = "\n".join(f"- {line}" for line in ingredients or []) or "-"
        return f"""Pick the tags that describe this recipe.

Recipe: {recipe_name}
Ingredients:
{ingredient_text}

Available tags: {", ".join(available_tags or []) or "(none)"}
Current tags: {", ".join(current_tags or []) or "(none)"}

Keep the current tags that still fit and add any others from the available tags.
Use only tags from the available list.
Respond with JSON only: {{"tags": ["..."]}}
"""

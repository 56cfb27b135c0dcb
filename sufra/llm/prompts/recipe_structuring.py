"""Prompt that turns free ingredient and step text into structured groups."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import BasePrompt

_LANGUAGES = {"ar": "Arabic", "en": "English"}


class StructuredIngredient(BaseModel):
    """One ingredient line as returned by the model."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    amount: str | None = None
    unit: str | None = None
    descriptor: str | None = None

    @field_validator("amount", "unit", "descriptor", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        if isinstance(value, int | float):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value


class IngredientGroupResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    items: list[StructuredIngredient] = Field(default_factory=list)


class StepGroupResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    items: list[str] = Field(default_factory=list)


class RecipeStructureResult(BaseModel):
    """Output schema for recipe structuring."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    ingredient_groups: list[IngredientGroupResult] = Field(
        default_factory=list, alias="ingredientGroups"
    )
    step_groups: list[StepGroupResult] = Field(default_factory=list, alias="stepGroups")
    tags: list[str] = Field(default_factory=list)


class RecipeStructuringPrompt(BasePrompt[RecipeStructureResult]):
    """Split pasted ingredient and step text into groups and suggest tags.

    Example output:
        {
            "ingredientGroups": [
                {"name": null, "items": [
                    {"name": "برغل", "amount": "2", "unit": "كوب", "descriptor": "ناعم"}
                ]}
            ],
            "stepGroups": [
                {"name": null, "items": ["انقع البرغل", "اخلط المكونات"]}
            ],
            "tags": ["أطباق رئيسية"]
        }
    """

    output_schema: ClassVar[type[BaseModel]] = RecipeStructureResult

    def format(
        self,
        ingredients: str = "",
        steps: str = "",
        locale: str = "ar",
        available_tags: list[str] | None = None,
        **_: Any,
    ) -> str:
        language = _LANGUAGES.get(locale, _LANGUAGES["ar"])
        vocabulary = ", ".join(available_tags or []) or "(none)"
        return f"""You are a recipe editor. Restructure the recipe text below.

Rules:
1. Keep the original wording and the {language} language. Do not translate.
2. Split ingredients into groups only when the text clearly has sections
   (for example "for the dough"); otherwise return one group with name null.
3. For each ingredient give name, amount, unit and descriptor. Use null for
   anything that is not stated.
4. Split the method into short ordered steps, grouped the same way.
5. Suggest up to 5 tags, choosing ONLY from this list: {vocabulary}

Respond with JSON only, in this shape:
{{"ingredientGroups": [{{"name": null, "items": [{{"name": "", "amount": null,
"unit": null, "descriptor": null}}]}}], "stepGroups": [{{"name": null,
"items": [""]}}], "tags": [""]}}

Ingredients:
{ingredients.strip()}

Method:
{steps.strip()}
"""

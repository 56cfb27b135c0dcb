"""AI-assisted recipe structuring and bulk tagging.

Both operations are thin wrappers around one completion call each. Structure is
all-or-nothing; BulkTag handles each recipe on its own and reports per-recipe
failures instead of stopping.
"""

import time
from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from sufra.core.config.config import settings
from sufra.core.logging import get_logger
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.user_models.user import User
from sufra.exceptions.custom_exceptions import (
    AuthorizationError,
    SufraError,
    ValidationError,
)
from sufra.llm.prompts import (
    RecipeStructureResult,
    RecipeStructuringPrompt,
    RecipeTaggingPrompt,
    RecipeTagsResult,
)
from sufra.services.downstream.gemini_service import GeminiService
from sufra.services.settings_service import PlatformSettings, SettingsService
from sufra.services.tag_service import TagService

_log = get_logger(__name__)

GeminiFactory = Callable[[PlatformSettings], GeminiService]


def _default_gemini(platform: PlatformSettings) -> GeminiService:
    return GeminiService(platform.gemini_api_key, platform.gemini_model)


def ingredient_lines(recipe: Recipe) -> list[str]:
    """Ingredients as ``amount unit name`` lines, in recipe order."""
    lines = []
    for link in sorted(recipe.ingredient_links, key=lambda link: link.sort_order):
        parts = [link.amount, link.unit, link.ingredient.name]
        lines.append(" ".join(part for part in parts if part))
    return lines


class AiStructuringService:
    """Runs the structuring and tagging prompts against the configured model."""

    def __init__(
        self,
        db: Session,
        gemini_factory: GeminiFactory = _default_gemini,
        sleep: Callable[[float], None] = time.sleep,
        delay_seconds: float | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            db: Active session.
            gemini_factory: Builds the API client from the platform settings.
            sleep: Called between BulkTag items.
            delay_seconds: Pause between BulkTag items; defaults to configuration.
        """
        self.db = db
        self.tags = TagService(db)
        self.settings_service = SettingsService(db)
        self.gemini_factory = gemini_factory
        self.sleep = sleep
        self.delay_seconds = (
            settings.ai_bulk_tag_delay_seconds
            if delay_seconds is None
            else delay_seconds
        )

    def _client(self) -> GeminiService:
        return self.gemini_factory(self.settings_service.load())

    def structure(
        self, ingredients: str, steps: str, locale: str = "ar"
    ) -> dict[str, Any]:
        """Turn pasted ingredient and step text into recipe input groups.

        Returns:
            dict: ``{"ingredientGroups", "stepGroups", "tags"}``; tags are limited to
            the existing vocabulary.

        Raises:
            ValidationError: If both texts are empty.
            ConfigurationError: If no API key or model is configured.
            UpstreamError: If the API call fails.
            ParseError: If the reply is not the expected JSON.
        """
        if not ingredients.strip() and not steps.strip():
            raise ValidationError.for_field(
                "ingredients", "Paste the ingredients or the steps to structure."
            )
        vocabulary = self.tags.all_names()
        with self._client() as gemini:
            result: RecipeStructureResult = gemini.complete(
                RecipeStructuringPrompt(),
                ingredients=ingredients,
                steps=steps,
                locale=locale,
                available_tags=vocabulary,
            )
        allowed = set(vocabulary)
        payload = result.model_dump(by_alias=True)
        payload["tags"] = list(dict.fromkeys(t for t in result.tags if t in allowed))
        _log.info(
            "Structured recipe text into {} ingredient and {} step groups",
            len(result.ingredient_groups),
            len(result.step_groups),
        )
        return payload

    def bulk_tag(self, recipe_ids: list[int], actor: User) -> dict[str, Any]:
        """Ask the model for tags for each recipe and replace its tag set.

        Tag names are resolved like a manual edit: unknown names become new tags.

        Returns:
            dict: ``{"success_count", "total", "errors": [{"recipe_id", "error"}]}``.

        Raises:
            AuthorizationError: If the actor is not an admin.
            ValidationError: If any id is unknown. Nothing is called in that case.
            ConfigurationError: If no API key or model is configured.
        """
        if not actor.is_admin:
            raise AuthorizationError(f"User {actor.id} may not bulk tag recipes")
        unique_ids = list(dict.fromkeys(recipe_ids))
        recipes = {
            recipe.id: recipe
            for recipe in self.db.query(Recipe).filter(Recipe.id.in_(unique_ids)).all()
        }
        missing = [i for i in unique_ids if i not in recipes]
        if missing:
            raise ValidationError.for_field(
                "recipe_ids", f"Unknown recipe ids: {', '.join(map(str, missing))}."
            )

        vocabulary = self.tags.all_names()
        prompt = RecipeTaggingPrompt()
        errors: list[dict[str, Any]] = []
        success_count = 0
        with self._client() as gemini:
            for index, recipe_id in enumerate(unique_ids):
                if index:
                    self.sleep(self.delay_seconds)
                recipe = recipes[recipe_id]
                try:
                    result: RecipeTagsResult = gemini.complete(
                        prompt,
                        recipe_name=recipe.name,
                        ingredients=ingredient_lines(recipe),
                        available_tags=vocabulary,
                        current_tags=[tag.name for tag in recipe.tags],
                    )
                    self.tags.sync_recipe(recipe, result.tags)
                    self.db.commit()
                except SufraError as e:
                    self.db.rollback()
                    _log.warning("Bulk tag failed for recipe {}: {}", recipe_id, e)
                    errors.append({"recipe_id": recipe_id, "error": e.get_message()})
                    continue
                success_count += 1

        _log.info(
            "Bulk tagged {}/{} recipes for user {}",
            success_count,
            len(unique_ids),
            actor.id,
        )
        return {
            "success_count": success_count,
            "total": len(unique_ids),
            "errors": errors,
        }

    def list_models(self) -> list[str]:
        with self._client() as gemini:
            return gemini.list_models()

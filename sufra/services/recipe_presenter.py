"""Recipe read representations.

``recipe_detail`` is the shape returned by the read API and the shape stored in
revision snapshots, so it must stay JSON serializable.
"""

from typing import Any

from sufra.db.models.recipe_models.recipe import Recipe
from sufra.utils.media_storage import media_url

UNKNOWN_AUTHOR_NAME = "مجهول"


def author_name(recipe: Recipe) -> str:
    """Return the name to credit the recipe to."""
    if recipe.is_anonymous and recipe.anonymous_author is not None:
        return recipe.anonymous_author.name
    if recipe.user is not None:
        return recipe.user.public_name
    return UNKNOWN_AUTHOR_NAME


def _timestamp(value: Any) -> str | None:
    return value.isoformat() if value is not None else None


def recipe_card(recipe: Recipe) -> dict[str, Any]:
    """Compact representation used in listings."""
    return {
        "id": recipe.id,
        "name": recipe.name,
        "slug": recipe.slug,
        "image_url": media_url(recipe.image_path),
        "city": recipe.city.name if recipe.city else None,
        "city_slug": recipe.city.slug if recipe.city else None,
        "time_needed": recipe.time_needed,
        "difficulty": recipe.difficulty.value if recipe.difficulty else None,
        "author_name": author_name(recipe),
        "tags": [
            {"id": tag.id, "name": tag.name, "slug": tag.slug} for tag in recipe.tags
        ],
    }


def recipe_detail(recipe: Recipe) -> dict[str, Any]:
    """Full representation of a recipe."""
    links = sorted(recipe.ingredient_links, key=lambda link: link.sort_order)
    user = None
    if not recipe.is_anonymous and recipe.user is not None:
        user = {
            "id": recipe.user.id,
            "name": recipe.user.public_name,
            "avatar": recipe.user.avatar,
        }
    return {
        **recipe_card(recipe),
        "servings": recipe.servings,
        "ingredients": [
            {
                "name": link.ingredient.name,
                "amount": link.amount,
                "unit": link.unit,
                "descriptor": link.descriptor,
                "group": link.group,
            }
            for link in links
        ],
        "steps": recipe.steps or [],
        "is_anonymous": recipe.is_anonymous,
        "user": user,
        "created_at": _timestamp(recipe.created_at),
        "updated_at": _timestamp(recipe.updated_at),
        "status": recipe.status.value,
    }


def recipe_moderation_view(recipe: Recipe) -> dict[str, Any]:
    """Full representation plus the moderation fields shown in the back office."""
    return {
        **recipe_detail(recipe),
        "needs_reapproval": recipe.needs_reapproval,
        "rejection_reason": recipe.rejection_reason,
        "approved_by": recipe.approved_by,
        "approved_at": _timestamp(recipe.approved_at),
    }

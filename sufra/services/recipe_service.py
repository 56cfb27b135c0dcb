"""Recipe service.

Public read paths, owner write paths and revision history for recipes. Moderation
actions taken from the back office live in ``recipe_moderation_service``.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from sufra.api.v1.schemas.request.recipe_request import (
    RecipeCreateRequest,
    RecipeFields,
    RecipeUpdateRequest,
)
from sufra.core.logging import get_logger
from sufra.db.helpers import page_payload, paginate
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.recipe_models.recipe_ingredient import RecipeIngredient
from sufra.db.models.recipe_models.recipe_owner import (
    AnonymousOwner,
    RecipeOwner,
    UserOwner,
)
from sufra.db.models.report_models.report import Report
from sufra.db.models.taxonomy_models.anonymous_author import AnonymousAuthor
from sufra.db.models.taxonomy_models.city import City
from sufra.db.models.taxonomy_models.tag import Tag
from sufra.db.models.user_models.user import User
from sufra.enums.difficulty_level_enum import DifficultyLevelEnum
from sufra.enums.recipe_status_enum import RecipeStatusEnum
from sufra.enums.report_enums import ReportableTypeEnum
from sufra.enums.revision_type_enum import RevisionTypeEnum
from sufra.exceptions.custom_exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from sufra.services.author_service import AuthorService
from sufra.services.ingredient_service import (
    IngredientGroup,
    IngredientService,
    parse_ingredient_input,
)
from sufra.services.recipe_presenter import (
    recipe_card,
    recipe_detail,
    recipe_moderation_view,
)
from sufra.services.recipe_state_machine import RecipeTransition, apply_transition
from sufra.services.revision_service import RevisionService
from sufra.services.settings_service import SettingsService
from sufra.services.tag_service import TagService
from sufra.utils.media_storage import delete_media, media_available
from sufra.utils.slugify import unique_slug

_log = get_logger(__name__)

PUBLIC_PAGE_SIZE = 12
SIMILAR_RECIPES_LIMIT = 6
RANDOMIZER_LIMIT = 30


@dataclass(frozen=True)
class RecipeFilters:
    """Filters accepted by the public recipe listing."""

    search: str | None = None
    city_slug: str | None = None
    difficulty: DifficultyLevelEnum | None = None
    tag_slugs: tuple[str, ...] = ()


class RecipeService:
    """Reads and owner-side writes for recipes."""

    def __init__(self, db: Session) -> None:
        """Initialize the service and its collaborators on one session."""
        self.db = db
        self.ingredients = IngredientService(db)
        self.tags = TagService(db)
        self.authors = AuthorService(db)
        self.revisions = RevisionService(db)
        self.settings_service = SettingsService(db)

    # Lookups and visibility

    def get(self, recipe_id: int) -> Recipe:
        recipe = self.db.get(Recipe, recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        return recipe

    def _approved(self) -> Query[Recipe]:
        return self.db.query(Recipe).filter(Recipe.status == RecipeStatusEnum.APPROVED)

    @staticmethod
    def can_view(recipe: Recipe, actor: User | None) -> bool:
        """Approved recipes are public; anything else only for owner and moderators."""
        if recipe.status == RecipeStatusEnum.APPROVED:
            return True
        if actor is None:
            return False
        return recipe.is_owned_by(actor.id) or actor.can_approve_recipes

    def get_visible_by_slug(self, slug: str, actor: User | None) -> Recipe:
        """Return the recipe, or NotFoundError when missing or hidden from ``actor``."""
        recipe = self.db.query(Recipe).filter(Recipe.slug == slug).one_or_none()
        if recipe is None or not self.can_view(recipe, actor):
            raise NotFoundError("Recipe", slug)
        return recipe

    # Read paths

    def show(self, slug: str, actor: User | None) -> dict[str, Any]:
        """Detailed representation plus variation count and similar recipes."""
        recipe = self.get_visible_by_slug(slug, actor)
        privileged_view = actor is not None and (
            recipe.is_owned_by(actor.id) or actor.can_approve_recipes
        )
        payload = (
            recipe_moderation_view(recipe) if privileged_view else recipe_detail(recipe)
        )
        payload["variations_count"] = self._variations_query(recipe).count()
        payload["similar"] = [recipe_card(r) for r in self.similar(recipe)]
        return payload

    def list_public(
        self,
        filters: RecipeFilters,
        page: int = 1,
        per_page: int = PUBLIC_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Approved recipes, newest first, one page at a time."""
        query = self._approved()
        if filters.search and filters.search.strip():
            needle = filters.search.strip()
            query = query.filter(
                Recipe.name.icontains(needle, autoescape=True)
                | Recipe.city.has(City.name.icontains(needle, autoescape=True))
            )
        if filters.city_slug:
            query = query.filter(Recipe.city.has(City.slug == filters.city_slug))
        if filters.difficulty:
            query = query.filter(
                Recipe.difficulty == DifficultyLevelEnum(filters.difficulty)
            )
        if filters.tag_slugs:
            query = query.filter(Recipe.tags.any(Tag.slug.in_(filters.tag_slugs)))
        query = query.order_by(Recipe.created_at.desc(), Recipe.id.desc())
        recipes, total = paginate(query, page, per_page)
        return page_payload([recipe_card(r) for r in recipes], total, page, per_page)

    def _variations_query(self, recipe: Recipe) -> Query[Recipe]:
        return self._approved().filter(
            Recipe.name == recipe.name, Recipe.id != recipe.id
        )

    def variations(self, slug: str, actor: User | None) -> list[dict[str, Any]]:
        """Other approved recipes with the same name."""
        recipe = self.get_visible_by_slug(slug, actor)
        others = self._variations_query(recipe).order_by(Recipe.created_at.desc()).all()
        return [recipe_card(r) for r in others]

    def similar(
        self, recipe: Recipe, limit: int = SIMILAR_RECIPES_LIMIT
    ) -> list[Recipe]:
        """Approved recipes ranked by ingredients shared with ``recipe``."""
        ingredient_ids = [link.ingredient_id for link in recipe.ingredient_links]
        if not ingredient_ids:
            return []
        overlap = func.count(RecipeIngredient.ingredient_id).label("overlap")
        rows = (
            self.db.query(Recipe, overlap)
            .join(RecipeIngredient, RecipeIngredient.recipe_id == Recipe.id)
            .filter(
                RecipeIngredient.ingredient_id.in_(ingredient_ids),
                Recipe.id != recipe.id,
                Recipe.status == RecipeStatusEnum.APPROVED,
            )
            .group_by(Recipe.id)
            .order_by(overlap.desc(), Recipe.id.desc())
            .limit(limit)
            .all()
        )
        return [row[0] for row in rows]

    def my_recipes(self, actor: User) -> list[dict[str, Any]]:
        """Every recipe the actor owns, in any state."""
        recipes = (
            self.db.query(Recipe)
            .filter(Recipe.user_id == actor.id)
            .order_by(Recipe.created_at.desc(), Recipe.id.desc())
            .all()
        )
        return [recipe_moderation_view(r) for r in recipes]

    def user_recipes(self, user_id: int) -> list[dict[str, Any]]:
        """Approved recipes published under a registered user's name."""
        if self.db.get(User, user_id) is None:
            raise NotFoundError("User", user_id)
        recipes = (
            self._approved()
            .filter(Recipe.user_id == user_id)
            .order_by(Recipe.created_at.desc(), Recipe.id.desc())
            .all()
        )
        return [recipe_card(r) for r in recipes]

    def randomize(self, exclude_ingredient_ids: list[int]) -> list[dict[str, Any]]:
        """Random approved recipes for the "what should I cook" picker.

        Recipes containing any excluded ingredient are skipped. When randomizer tags
        are configured, only recipes carrying one of them are considered.
        """
        platform = self.settings_service.load()
        query = self._approved()
        if exclude_ingredient_ids:
            query = query.filter(
                ~Recipe.ingredient_links.any(
                    RecipeIngredient.ingredient_id.in_(exclude_ingredient_ids)
                )
            )
        if platform.randomizer_tags:
            query = query.filter(Recipe.tags.any(Tag.id.in_(platform.randomizer_tags)))
        recipes = query.order_by(func.random()).limit(RANDOMIZER_LIMIT).all()
        return [recipe_card(r) for r in recipes]

    # Write paths

    def create(self, data: RecipeCreateRequest, actor: User) -> Recipe:
        """Submit a new recipe.

        Moderators publish immediately; everyone else lands in the pending queue.
        """
        groups = self._parse_ingredients(data)
        owner = self._requested_owner(data, actor) or UserOwner(actor.id)

        recipe = Recipe(name=data.name, slug=unique_slug(data.name), steps=[])
        self._apply_fields(recipe, data, data.model_fields_set | {"name"})
        recipe.assign_owner(owner)
        apply_transition(recipe, RecipeTransition.SUBMIT, actor)
        self.db.add(recipe)
        self.db.flush()

        if groups is not None:
            self.ingredients.sync_recipe(recipe, groups)
        if data.tags:
            self.tags.sync_recipe(recipe, data.tags)
        self.revisions.record(recipe, actor, RevisionTypeEnum.CREATE)
        self.db.commit()
        _log.info(
            "Recipe {} created by user {} with status {}",
            recipe.id,
            actor.id,
            recipe.status.value,
        )
        return recipe

    def update(self, recipe_id: int, data: RecipeUpdateRequest, actor: User) -> Recipe:
        """Edit a recipe as its owner or a moderator.

        Ingredients and tags are only re-synced when supplied. An approved recipe
        edited by a non-moderator goes back to the pending queue.
        """
        recipe = self.get(recipe_id)
        self._ensure_can_edit(recipe, actor)
        fields = data.model_fields_set
        if "name" in fields and not data.name:
            raise ValidationError.for_field("name", "The recipe name is required.")
        groups = self._parse_ingredients(data) if "ingredients" in fields else None
        previous_image = recipe.image_path

        owner = self._requested_owner(data, actor)
        if owner is not None:
            recipe.assign_owner(owner)
        self._apply_fields(recipe, data, fields)
        if groups is not None:
            self.ingredients.sync_recipe(recipe, groups)
        if "tags" in fields:
            self.tags.sync_recipe(recipe, data.tags or [])
        apply_transition(recipe, RecipeTransition.OWNER_EDIT, actor)
        self.revisions.record(recipe, actor, RevisionTypeEnum.UPDATE)
        self.db.commit()

        if "image_path" in fields and previous_image != recipe.image_path:
            delete_media(previous_image)
        _log.info(
            "Recipe {} updated by user {} (status {}, needs_reapproval={})",
            recipe.id,
            actor.id,
            recipe.status.value,
            recipe.needs_reapproval,
        )
        return recipe

    def unpublish_own(self, recipe_id: int, actor: User) -> Recipe:
        """Let an owner take their approved recipe offline."""
        recipe = self.get(recipe_id)
        if not recipe.is_owned_by(actor.id):
            raise AuthorizationError(
                f"User {actor.id} does not own recipe {recipe_id}"
            )
        apply_transition(recipe, RecipeTransition.UNPUBLISH, actor)
        self.db.commit()
        _log.info("Recipe {} unpublished by its owner {}", recipe_id, actor.id)
        return recipe

    def delete(self, recipe_id: int, actor: User) -> None:
        """Delete a recipe and its stored image. Admins only."""
        if not actor.can_delete_recipes:
            raise AuthorizationError(f"User {actor.id} may not delete recipes")
        recipe = self.get(recipe_id)
        image_path = recipe.image_path
        self.delete_rows([recipe])
        self.db.commit()
        delete_media(image_path)
        _log.info("Recipe {} deleted by user {}", recipe_id, actor.id)

    def delete_rows(self, recipes: list[Recipe]) -> None:
        """Delete recipes and the reports filed about them, without committing."""
        ids = [recipe.id for recipe in recipes]
        if not ids:
            return
        self.db.query(Report).filter(
            Report.reportable_type == ReportableTypeEnum.RECIPE,
            Report.reportable_id.in_(ids),
        ).delete(synchronize_session=False)
        for recipe in recipes:
            self.db.delete(recipe)
        self.db.flush()

    # History

    def history(self, recipe_id: int, actor: User) -> list[dict[str, Any]]:
        recipe = self.get(recipe_id)
        if not (recipe.is_owned_by(actor.id) or actor.can_approve_recipes):
            raise AuthorizationError(
                f"User {actor.id} may not view history of recipe {recipe_id}"
            )
        return self.revisions.history(recipe.id)

    def clear_history(self, recipe_id: int, actor: User) -> int:
        recipe = self.get(recipe_id)
        if not (recipe.is_owned_by(actor.id) or actor.can_delete_recipes):
            raise AuthorizationError(
                f"User {actor.id} may not clear history of recipe {recipe_id}"
            )
        deleted = self.revisions.clear(recipe.id)
        self.db.commit()
        return deleted

    def restore_revision(self, recipe_id: int, revision_id: int, actor: User) -> Recipe:
        """Bring a recipe back to the content of one of its revisions.

        City, image and tags are restored from the references stored with the
        revision; references to rows or files deleted since then are dropped. The
        restore itself goes through the normal edit rules and is recorded as a new
        revision.
        """
        recipe = self.get(recipe_id)
        self._ensure_can_edit(recipe, actor)
        revision = self.revisions.get(recipe_id, revision_id)
        content = revision.content

        recipe.name = content.get("name") or recipe.name
        recipe.servings = content.get("servings")
        recipe.time_needed = content.get("time_needed")
        recipe.steps = content.get("steps") or []
        difficulty = content.get("difficulty")
        recipe.difficulty = DifficultyLevelEnum(difficulty) if difficulty else None
        if revision.image_path is None or media_available(revision.image_path):
            recipe.image_path = revision.image_path
        else:
            _log.warning(
                "Image {} of revision {} is no longer stored; keeping {}",
                revision.image_path,
                revision.id,
                recipe.image_path,
            )
        if revision.city_id is None or self.db.get(City, revision.city_id) is not None:
            recipe.city_id = revision.city_id
        else:
            _log.warning(
                "City {} of revision {} no longer exists; keeping city {}",
                revision.city_id,
                revision.id,
                recipe.city_id,
            )
        if actor.can_approve_recipes:
            restored_owner = self._revision_owner(
                revision.owner_user_id, revision.anonymous_author_id
            )
            if restored_owner is not None:
                recipe.assign_owner(restored_owner)

        self.ingredients.sync_recipe(
            recipe, parse_ingredient_input(content.get("ingredients") or [])
        )
        self.tags.sync_recipe_ids(recipe, revision.tag_ids or [])
        apply_transition(recipe, RecipeTransition.OWNER_EDIT, actor)
        self.revisions.record(
            recipe,
            actor,
            RevisionTypeEnum.RESTORE,
            change_summary=f"{RevisionTypeEnum.RESTORE.value} #{revision.id}",
        )
        self.db.commit()
        _log.info(
            "Recipe {} restored to revision {} by user {}",
            recipe_id,
            revision_id,
            actor.id,
        )
        return recipe

    # Helpers

    def _ensure_can_edit(self, recipe: Recipe, actor: User) -> None:
        if not (recipe.is_owned_by(actor.id) or actor.can_approve_recipes):
            raise AuthorizationError(f"User {actor.id} may not edit recipe {recipe.id}")

    @staticmethod
    def _parse_ingredients(data: RecipeFields) -> list[IngredientGroup] | None:
        if data.ingredients is None:
            return None
        return parse_ingredient_input(data.ingredients)

    def _requested_owner(self, data: RecipeFields, actor: User) -> RecipeOwner | None:
        """Return the owner explicitly requested in ``data``, if any.

        Only moderators may credit a recipe to an anonymous author or to another user.
        """
        author_name = (data.manual_author_name or "").strip()
        other_user = data.user_id is not None and data.user_id != actor.id
        if (author_name or other_user) and not actor.can_approve_recipes:
            raise AuthorizationError(
                f"User {actor.id} may not attribute recipes to other authors"
            )
        if author_name:
            return AnonymousOwner(self.authors.find_or_create(author_name).id)
        if data.user_id is not None:
            if self.db.get(User, data.user_id) is None:
                raise ValidationError.for_field(
                    "user_id", "The selected user does not exist."
                )
            return UserOwner(data.user_id)
        return None

    def _revision_owner(
        self, user_id: int | None, author_id: int | None
    ) -> RecipeOwner | None:
        if author_id is not None and self.db.get(AnonymousAuthor, author_id):
            return AnonymousOwner(author_id)
        if user_id is not None and self.db.get(User, user_id):
            return UserOwner(user_id)
        return None

    def _apply_fields(
        self, recipe: Recipe, data: RecipeFields, fields: set[str]
    ) -> None:
        if "name" in fields and data.name:
            recipe.name = data.name
        for name in ("image_path", "servings", "time_needed"):
            if name in fields:
                setattr(recipe, name, getattr(data, name))
        if "difficulty" in fields:
            recipe.difficulty = (
                DifficultyLevelEnum(data.difficulty) if data.difficulty else None
            )
        if "steps" in fields:
            recipe.steps = data.steps_payload()
        if "city_id" in fields:
            if data.city_id is not None and self.db.get(City, data.city_id) is None:
                raise ValidationError.for_field(
                    "city_id", "The selected city does not exist."
                )
            recipe.city_id = data.city_id

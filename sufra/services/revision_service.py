"""Recipe revision recorder.

Appends a snapshot of the detailed recipe representation after every create and
update. History is append-only apart from a full clear.
"""

from typing import Any

from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.recipe_models.recipe_revision import RecipeRevision
from sufra.db.models.user_models.user import User
from sufra.enums.revision_type_enum import RevisionTypeEnum
from sufra.exceptions.custom_exceptions import NotFoundError
from sufra.services.recipe_presenter import recipe_detail

_log = get_logger(__name__)


class RevisionService:
    """Records and reads recipe revisions."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db

    def record(
        self,
        recipe: Recipe,
        actor: User | None,
        revision_type: RevisionTypeEnum,
        change_summary: str | None = None,
    ) -> RecipeRevision:
        """Snapshot ``recipe`` as it is now stored and append it to its history.

        Pending changes are flushed and the recipe reloaded first, so the snapshot
        shows exactly what a reader would get after commit.
        """
        self.db.flush()
        self.db.expire(recipe)
        revision = RecipeRevision(
            recipe_id=recipe.id,
            user_id=actor.id if actor else None,
            content=recipe_detail(recipe),
            change_summary=change_summary or revision_type.value,
            city_id=recipe.city_id,
            owner_user_id=recipe.user_id,
            anonymous_author_id=recipe.anonymous_author_id,
            image_path=recipe.image_path,
            tag_ids=[tag.id for tag in recipe.tags],
        )
        self.db.add(revision)
        self.db.flush()
        _log.debug(
            "Recorded revision {} ({}) for recipe {}",
            revision.id,
            revision.change_summary,
            recipe.id,
        )
        return revision

    def count(self, recipe_id: int) -> int:
        return (
            self.db.query(RecipeRevision)
            .filter(RecipeRevision.recipe_id == recipe_id)
            .count()
        )

    def history(self, recipe_id: int) -> list[dict[str, Any]]:
        """Return the recipe's revisions, newest first."""
        revisions = (
            self.db.query(RecipeRevision)
            .filter(RecipeRevision.recipe_id == recipe_id)
            .order_by(RecipeRevision.created_at.desc(), RecipeRevision.id.desc())
            .all()
        )
        return [
            {
                "id": revision.id,
                "user_name": revision.user.public_name if revision.user else None,
                "change_summary": revision.change_summary,
                "created_at": revision.created_at.isoformat(),
                "content": revision.content,
            }
            for revision in revisions
        ]

    def get(self, recipe_id: int, revision_id: int) -> RecipeRevision:
        revision = self.db.get(RecipeRevision, revision_id)
        if revision is None or revision.recipe_id != recipe_id:
            raise NotFoundError("Revision", revision_id)
        return revision

    def clear(self, recipe_id: int) -> int:
        """Hard-delete every revision of one recipe.

        Returns:
            int: Number of revisions removed.
        """
        deleted = (
            self.db.query(RecipeRevision)
            .filter(RecipeRevision.recipe_id == recipe_id)
            .delete(synchronize_session=False)
        )
        _log.info("Cleared {} revisions of recipe {}", deleted, recipe_id)
        return deleted

"""User administration: roles, bans and account removal.

Every operation here requires an admin. An admin can never act on their own
account, and admins cannot be banned.
"""

from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.models.base_database_model import utcnow
from sufra.db.models.list_models.recipe_list import RecipeList
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.report_models.report import Report
from sufra.db.models.user_models.user import User
from sufra.enums.bulk_action_enums import UserBulkActionEnum
from sufra.enums.report_enums import ReportableTypeEnum
from sufra.enums.user_role_enum import UserRoleEnum
from sufra.exceptions.custom_exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from sufra.services.author_service import AuthorService
from sufra.services.recipe_service import RecipeService
from sufra.utils.media_storage import delete_media

_log = get_logger(__name__)


def user_view(user: User, recipes_count: int | None = None) -> dict[str, Any]:
    view: dict[str, Any] = {
        "id": user.id,
        "name": user.name,
        "display_name": user.display_name,
        "email": user.email,
        "avatar": user.avatar,
        "role": user.role.value,
        "is_admin": user.is_admin,
        "is_banned": user.is_banned,
        "ban_reason": user.ban_reason,
        "banned_at": user.banned_at.isoformat() if user.banned_at else None,
        "created_at": user.created_at.isoformat(),
    }
    if recipes_count is not None:
        view["recipes_count"] = recipes_count
    return view


class UserAdminService:
    """Admin operations on user accounts."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db

    def get(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def _ensure_admin(actor: User) -> None:
        if not actor.is_admin:
            raise AuthorizationError(f"User {actor.id} is not an admin")

    @staticmethod
    def _ensure_not_self(target_id: int, actor: User) -> None:
        if target_id == actor.id:
            raise ValidationError.for_field(
                "user", "You cannot perform this action on your own account."
            )

    def index(self, actor: User, search: str | None = None) -> list[dict[str, Any]]:
        self._ensure_admin(actor)
        query = self.db.query(User)
        if search and search.strip():
            needle = search.strip()
            query = query.filter(
                User.name.icontains(needle, autoescape=True)
                | User.display_name.icontains(needle, autoescape=True)
                | User.email.icontains(needle, autoescape=True)
            )
        users = query.order_by(User.created_at.desc(), User.id.desc()).all()
        return [user_view(user) for user in users]

    def change_role(self, user_id: int, role: UserRoleEnum, actor: User) -> User:
        self._ensure_admin(actor)
        self._ensure_not_self(user_id, actor)
        user = self.get(user_id)
        user.role = UserRoleEnum(role)
        self.db.commit()
        _log.info(
            "User {} set role of user {} to {}", actor.id, user_id, user.role.value
        )
        return user

    def ban(self, user_id: int, reason: str | None, actor: User) -> User:
        self._ensure_admin(actor)
        self._ensure_not_self(user_id, actor)
        user = self.get(user_id)
        self._ban(user, reason)
        self.db.commit()
        _log.info("User {} banned user {}", actor.id, user_id)
        return user

    def unban(self, user_id: int, actor: User) -> User:
        self._ensure_admin(actor)
        user = self.get(user_id)
        self._unban(user)
        self.db.commit()
        _log.info("User {} unbanned user {}", actor.id, user_id)
        return user

    def delete(
        self,
        user_id: int,
        actor: User,
        *,
        transfer_to_user_id: int | None = None,
        transfer_to_author_name: str | None = None,
    ) -> None:
        """Delete an account, handing its recipes over or deleting them.

        Recipes move to ``transfer_to_user_id`` or to the anonymous author named
        ``transfer_to_author_name`` when given; otherwise they are deleted too.
        """
        self._ensure_admin(actor)
        self._ensure_not_self(user_id, actor)
        user = self.get(user_id)
        if transfer_to_user_id is not None and transfer_to_author_name:
            raise ValidationError.for_field(
                "transfer_to_user_id",
                "Transfer to either a user or an anonymous author, not both.",
            )
        if transfer_to_user_id is not None:
            target = self.db.get(User, transfer_to_user_id)
            if transfer_to_user_id == user_id or target is None:
                raise ValidationError.for_field(
                    "transfer_to_user_id", "The selected user does not exist."
                )
            moved = self._move_recipes([user_id], user_id=transfer_to_user_id)
        elif transfer_to_author_name and transfer_to_author_name.strip():
            author = AuthorService(self.db).find_or_create(transfer_to_author_name)
            moved = self._move_recipes([user_id], anonymous_author_id=author.id)
        else:
            moved = 0
        media = self._delete_users([user])
        self.db.commit()
        for path in media:
            delete_media(path)
        _log.info(
            "User {} deleted user {} ({} recipes transferred)", actor.id, user_id, moved
        )

    def bulk(
        self,
        ids: list[int],
        action: UserBulkActionEnum,
        actor: User,
        reason: str | None = None,
    ) -> dict[str, Any]:
        """Apply one action to many users, all or nothing."""
        self._ensure_admin(actor)
        action = UserBulkActionEnum(action)
        unique_ids = list(dict.fromkeys(ids))
        if actor.id in unique_ids:
            raise ValidationError.for_field(
                "ids", "You cannot perform this action on your own account."
            )
        users = self.db.query(User).filter(User.id.in_(unique_ids)).all()
        if len(users) != len(unique_ids):
            raise ValidationError.for_field("ids", "Some users do not exist.")

        media: list[str | None] = []
        match action:
            case UserBulkActionEnum.DELETE:
                media = self._delete_users(users)
            case UserBulkActionEnum.BAN:
                if any(user.is_admin for user in users):
                    raise ValidationError.for_field("ids", "Admins cannot be banned.")
                for user in users:
                    self._ban(user, reason)
            case UserBulkActionEnum.UNBAN:
                for user in users:
                    self._unban(user)
        self.db.commit()
        for path in media:
            delete_media(path)
        _log.info("User {} applied {} to users {}", actor.id, action.value, unique_ids)
        return {
            "message": f"Applied {action.value} to {len(users)} users.",
            "count": len(users),
        }

    # Helpers

    @staticmethod
    def _ban(user: User, reason: str | None) -> None:
        if user.is_admin:
            raise ValidationError.for_field("user", "Admins cannot be banned.")
        user.is_banned = True
        user.ban_reason = (reason or "").strip() or None
        user.banned_at = utcnow()

    @staticmethod
    def _unban(user: User) -> None:
        user.is_banned = False
        user.ban_reason = None
        user.banned_at = None

    def _move_recipes(self, from_user_ids: list[int], **owner: int | None) -> int:
        values = {"user_id": None, "anonymous_author_id": None, **owner}
        result = self.db.execute(
            update(Recipe)
            .where(Recipe.user_id.in_(from_user_ids))
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def _delete_users(self, users: list[User]) -> list[str | None]:
        """Delete users with their remaining recipes, lists and list reports.

        Returns:
            list: Stored image references to remove once the transaction commits.
        """
        user_ids = [user.id for user in users]
        recipes = self.db.query(Recipe).filter(Recipe.user_id.in_(user_ids)).all()
        media: list[str | None] = [recipe.image_path for recipe in recipes]
        RecipeService(self.db).delete_rows(recipes)

        lists = self.db.query(RecipeList).filter(RecipeList.user_id.in_(user_ids)).all()
        media.extend(recipe_list.cover_image for recipe_list in lists)
        if lists:
            self.db.query(Report).filter(
                Report.reportable_type == ReportableTypeEnum.LIST,
                Report.reportable_id.in_([recipe_list.id for recipe_list in lists]),
            ).delete(synchronize_session=False)
        for user in users:
            self.db.delete(user)
        self.db.flush()
        return media

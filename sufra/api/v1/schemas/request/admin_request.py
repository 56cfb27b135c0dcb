"""Pydantic schemas for back office requests."""

from typing import Literal

from pydantic import Field

from sufra.api.v1.schemas.base_schema import BaseSchema
from sufra.enums.bulk_action_enums import ReportBulkActionEnum, UserBulkActionEnum
from sufra.enums.report_enums import ReportStatusEnum
from sufra.enums.user_role_enum import UserRoleEnum


class IdsRequest(BaseSchema):
    """A non-empty list of ids."""

    ids: list[int] = Field(..., min_length=1)


class UserRoleRequest(BaseSchema):
    role: UserRoleEnum


class BanUserRequest(BaseSchema):
    reason: str = Field(..., min_length=1, max_length=500)


class DeleteUserRequest(BaseSchema):
    """What happens to the deleted user's recipes.

    With neither field set the recipes are deleted along with the user.
    """

    transfer_to_user_id: int | None = None
    transfer_to_author_name: str | None = Field(default=None, max_length=255)


class UserBulkActionRequest(BaseSchema):
    ids: list[int] = Field(..., min_length=1)
    action: UserBulkActionEnum
    reason: str | None = Field(default=None, max_length=500)


class CityRequest(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    image_path: str | None = None


class CityUpdateRequest(BaseSchema):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    image_path: str | None = None


class NameRequest(BaseSchema):
    """A single display name, used for tags and ingredient renames."""

    name: str = Field(..., min_length=1, max_length=255)


class AuthorRequest(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    bio: str | None = None


class AuthorUpdateRequest(BaseSchema):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    bio: str | None = None


class SettingsUpdateRequest(BaseSchema):
    """Only supplied keys are written; ``null`` clears a key."""

    gemini_api_key: str | None = None
    gemini_model: str | None = None
    default_city_id: int | None = None
    randomizer_tags: list[int] | None = None


class ReportUpdateRequest(BaseSchema):
    status: ReportStatusEnum | None = None
    admin_note: str | None = None
    admin_reply: str | None = None


class ReportBulkActionRequest(BaseSchema):
    ids: list[int] = Field(..., min_length=1)
    action: ReportBulkActionEnum
    status: ReportStatusEnum | None = None


class AiStructureRequest(BaseSchema):
    """Raw ingredient and step text to structure."""

    ingredients: str = Field(default="", max_length=20000)
    steps: str = Field(default="", max_length=20000)
    locale: Literal["ar", "en"] = "ar"


class AiBulkTagRequest(BaseSchema):
    recipe_ids: list[int] = Field(..., min_length=1, max_length=200)

"""Actor resolution and role guards.

Sign-in happens in front of this service. A trusted upstream forwards the signed-in
user's id in the ``X-User-ID`` header; requests without it are anonymous.
"""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.models.user_models.user import User
from sufra.deps.db import get_db
from sufra.exceptions.custom_exceptions import (
    AuthenticationRequiredError,
    AuthorizationError,
)

_log = get_logger(__name__)

USER_ID_HEADER = "X-User-ID"


def get_optional_actor(
    db: Annotated[Session, Depends(get_db)],
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> User | None:
    """Return the acting user, or None for anonymous requests.

    Raises:
        AuthenticationRequiredError: If the header names no known user.
        AuthorizationError: If the user is banned.
    """
    if x_user_id is None or not x_user_id.strip():
        return None
    try:
        user_id = int(x_user_id)
    except ValueError as e:
        raise AuthenticationRequiredError("Invalid user identity.") from e
    user = db.get(User, user_id)
    if user is None:
        _log.warning("Request for unknown user id {}", user_id)
        raise AuthenticationRequiredError("Invalid user identity.")
    if user.is_banned:
        _log.info("Rejected request from banned user {}", user_id)
        raise AuthorizationError("Your account has been suspended.")
    return user


def get_required_actor(
    actor: Annotated[User | None, Depends(get_optional_actor)],
) -> User:
    if actor is None:
        raise AuthenticationRequiredError()
    return actor


def get_moderator(actor: Annotated[User, Depends(get_required_actor)]) -> User:
    if not actor.can_approve_recipes:
        raise AuthorizationError()
    return actor


def get_admin(actor: Annotated[User, Depends(get_required_actor)]) -> User:
    if not actor.is_admin:
        raise AuthorizationError()
    return actor


OptionalActor = Annotated[User | None, Depends(get_optional_actor)]
RequiredActor = Annotated[User, Depends(get_required_actor)]
ModeratorActor = Annotated[User, Depends(get_moderator)]
AdminActor = Annotated[User, Depends(get_admin)]

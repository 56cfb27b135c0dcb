"""Shared test fixtures for the Sufra test suite.

Every test gets a fresh in-memory SQLite database. The environment is pointed at an
in-memory database before ``sufra`` is imported, so importing the application never
touches a real database file.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AI_BULK_TAG_DELAY_SECONDS"] = "0"
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("GEMINI_MODEL", None)
os.environ.pop("SUPER_ADMIN_EMAIL", None)

from collections.abc import Callable, Generator  # noqa: E402
from contextlib import AbstractContextManager  # noqa: E402
from itertools import count  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import patch  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.orm import Query, Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from sufra.db.models import (  # noqa: E402
    City,
    ListItem,
    Recipe,
    RecipeList,
    Tag,
    User,
)
from sufra.db.session import configure_sqlite, init_db  # noqa: E402
from sufra.deps.db import get_db  # noqa: E402
from sufra.enums.list_status_enum import ListStatusEnum  # noqa: E402
from sufra.enums.recipe_status_enum import RecipeStatusEnum  # noqa: E402
from sufra.enums.user_role_enum import UserRoleEnum  # noqa: E402
from sufra.main import app  # noqa: E402
from sufra.utils.slugify import unique_slug  # noqa: E402

_sequence = count(1)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """A private in-memory database shared by every connection of one test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(test_engine)
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db_session(
    session_factory: sessionmaker[Session],
) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Create and commit a user; pass ``role`` or any other column to override."""

    def _make_user(role: UserRoleEnum = UserRoleEnum.USER, **overrides: Any) -> User:
        number = next(_sequence)
        user = User(
            name=overrides.pop("name", f"user{number}"),
            email=overrides.pop("email", f"user{number}@example.com"),
            role=role,
            **overrides,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def user(make_user: Callable[..., User]) -> User:
    return make_user(name="Layla")


@pytest.fixture
def other_user(make_user: Callable[..., User]) -> User:
    return make_user(name="Omar")


@pytest.fixture
def moderator(make_user: Callable[..., User]) -> User:
    return make_user(UserRoleEnum.MODERATOR, name="Mona")


@pytest.fixture
def admin(make_user: Callable[..., User]) -> User:
    return make_user(UserRoleEnum.ADMIN, name="Adel")


@pytest.fixture
def make_city(db_session: Session) -> Callable[..., City]:
    def _make_city(name: str = "حلب") -> City:
        city = City(name=name, slug=unique_slug(name))
        db_session.add(city)
        db_session.commit()
        return city

    return _make_city


@pytest.fixture
def make_tag(db_session: Session) -> Callable[..., Tag]:
    def _make_tag(name: str) -> Tag:
        tag = Tag(name=name, slug=unique_slug(name))
        db_session.add(tag)
        db_session.commit()
        return tag

    return _make_tag


@pytest.fixture
def make_recipe(db_session: Session) -> Callable[..., Recipe]:
    """Insert a recipe row directly, bypassing the submission workflow."""

    def _make_recipe(
        owner: User,
        name: str = "Kibbeh",
        status: RecipeStatusEnum = RecipeStatusEnum.APPROVED,
        **overrides: Any,
    ) -> Recipe:
        recipe = Recipe(
            name=name,
            slug=unique_slug(name),
            status=status,
            steps=overrides.pop("steps", []),
            user_id=owner.id,
            **overrides,
        )
        db_session.add(recipe)
        db_session.commit()
        return recipe

    return _make_recipe


@pytest.fixture
def make_list(db_session: Session) -> Callable[..., RecipeList]:
    def _make_list(
        owner: User,
        name: str = "Weeknight dinners",
        recipes: list[Recipe] | None = None,
        status: ListStatusEnum = ListStatusEnum.DRAFT,
        **overrides: Any,
    ) -> RecipeList:
        recipe_list = RecipeList(
            user_id=owner.id,
            name=name,
            slug=unique_slug(name),
            status=status,
            is_default=overrides.pop("is_default", False),
            is_public=overrides.pop("is_public", status == ListStatusEnum.APPROVED),
            **overrides,
        )
        recipe_list.items = [
            ListItem(recipe_id=recipe.id, position=position)
            for position, recipe in enumerate(recipes or [])
        ]
        db_session.add(recipe_list)
        db_session.commit()
        return recipe_list

    return _make_list


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """TestClient bound to the test database.

    Requests share the test session, so fixtures and assertions see the same
    connection as the routes. The client is not used as a context manager so the
    application lifespan, which creates tables on the configured engine, does not run.
    """

    def _get_test_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            # Mirror the request-scoped session: uncommitted work is discarded
            db_session.rollback()

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    """Build the headers that identify a user to the API."""

    def _headers_for(user: User) -> dict[str, str]:
        return {"X-User-ID": str(user.id)}

    return _headers_for


@pytest.fixture
def stale_lookup() -> Callable[[], AbstractContextManager[Any]]:
    """Patch ``Query.one_or_none`` so that its first call finds nothing.

    This reproduces a writer that committed the same row between our lookup and our
    insert.
    """

    def _stale_lookup() -> AbstractContextManager[Any]:
        original = Query.one_or_none
        calls: list[Query] = []

        def one_or_none(query: Query) -> Any:
            calls.append(query)
            return None if len(calls) == 1 else original(query)

        return patch.object(Query, "one_or_none", one_or_none)

    return _stale_lookup

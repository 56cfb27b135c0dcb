"""Ingredient resolution and recipe ingredient sync.

Recipe ingredients arrive in one of three shapes, all still present in stored content:

* a flat list of items, each a plain string or ``{name, amount, unit, descriptor,
  group}``;
* a mapping of group label to item list, e.g. ``{"Dough": [...], "Filling": [...]}``;
* an ordered list of ``{name, items: [...]}`` group objects.

``parse_ingredient_input`` turns any of them into ordered ``IngredientGroup`` objects,
and ``IngredientService.sync_recipe`` replaces a recipe's ingredient pivot with them.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from sufra.core.logging import get_logger
from sufra.db.helpers import find_or_create
from sufra.db.models.ingredient_models.ingredient import Ingredient
from sufra.db.models.recipe_models.recipe import Recipe
from sufra.db.models.recipe_models.recipe_ingredient import RecipeIngredient
from sufra.exceptions.custom_exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from sufra.utils.ingredient_normalizer import normalize

_log = get_logger(__name__)

_ITEM_TEXT_FIELDS = ("amount", "unit", "descriptor")


@dataclass(frozen=True)
class IngredientItem:
    """One ingredient line before resolution."""

    name: str
    amount: str | None = None
    unit: str | None = None
    descriptor: str | None = None
    group: str | None = None


@dataclass
class IngredientGroup:
    """An ordered group of ingredient lines. ``name`` is None for the default group."""

    name: str | None
    items: list[IngredientItem] = field(default_factory=list)


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _parse_item(entry: Any) -> IngredientItem | None:
    if isinstance(entry, str):
        name = entry.strip()
        return IngredientItem(name=name) if name else None
    if isinstance(entry, dict):
        name = _text(entry.get("name"))
        if name is None:
            return None
        return IngredientItem(
            name=name,
            group=_text(entry.get("group")),
            **{key: _text(entry.get(key)) for key in _ITEM_TEXT_FIELDS},
        )
    return None


def _parse_items(entries: list[Any]) -> list[IngredientItem]:
    return [item for item in map(_parse_item, entries) if item is not None]


def _is_group_object(entry: Any) -> bool:
    return isinstance(entry, dict) and isinstance(entry.get("items"), list)


def parse_ingredient_input(raw: Any) -> list[IngredientGroup]:
    """Convert any supported ingredient input shape into ordered groups.

    Items without a usable name are dropped.

    Raises:
        ValidationError: If ``raw`` is neither a list nor a mapping.
    """
    if raw is None:
        return []

    if isinstance(raw, dict):
        groups: list[IngredientGroup] = []
        loose = IngredientGroup(name=None)
        for label, value in raw.items():
            if isinstance(value, list):
                groups.append(IngredientGroup(_text(label), _parse_items(value)))
            elif (item := _parse_item(value)) is not None:
                loose.items.append(item)
        return [loose, *groups] if loose.items else groups

    if isinstance(raw, list):
        groups = []
        loose = IngredientGroup(name=None)
        for entry in raw:
            if _is_group_object(entry):
                groups.append(
                    IngredientGroup(
                        _text(entry.get("name")), _parse_items(entry["items"])
                    )
                )
            elif (item := _parse_item(entry)) is not None:
                loose.items.append(item)
        return [loose, *groups] if loose.items else groups

    raise ValidationError.for_field(
        "ingredients", "Ingredients must be a list or an object of groups."
    )


class IngredientService:
    """Resolves ingredient names to rows and maintains recipe ingredient pivots."""

    def __init__(self, db: Session) -> None:
        """Initialize the service with a database session."""
        self.db = db

    def resolve(self, name: str) -> Ingredient | None:
        """Find or create the ingredient for ``name``.

        Returns:
            Ingredient | None: The ingredient, or None when the name normalizes to
            nothing.
        """
        key = normalize(name)
        if not key:
            return None
        ingredient, created = find_or_create(
            self.db,
            Ingredient,
            {"normalized_name": key},
            lambda: Ingredient(name=name.strip(), normalized_name=key),
        )
        if created:
            _log.debug("Created ingredient {} ({!r})", ingredient.id, key)
        return ingredient

    def sync_recipe(self, recipe: Recipe, groups: list[IngredientGroup]) -> int:
        """Replace the recipe's ingredient set with ``groups``.

        One pivot row is kept per ingredient; when the same ingredient appears twice
        the later line wins. Rows for ingredients no longer listed are removed.

        Returns:
            int: Number of ingredients now linked to the recipe.
        """
        resolved: dict[int, dict[str, Any]] = {}
        position = 0
        for group in groups:
            for item in group.items:
                ingredient = self.resolve(item.name)
                if ingredient is None:
                    _log.debug("Skipping unresolvable ingredient {!r}", item.name)
                    continue
                resolved[ingredient.id] = {
                    "amount": item.amount,
                    "unit": item.unit,
                    "descriptor": item.descriptor,
                    "group": item.group or group.name,
                    "sort_order": position,
                }
                position += 1

        existing = {link.ingredient_id: link for link in recipe.ingredient_links}
        for ingredient_id, link in existing.items():
            if ingredient_id not in resolved:
                recipe.ingredient_links.remove(link)
        for ingredient_id, attributes in resolved.items():
            link = existing.get(ingredient_id)
            if link is None:
                recipe.ingredient_links.append(
                    RecipeIngredient(ingredient_id=ingredient_id, **attributes)
                )
                continue
            for key, value in attributes.items():
                setattr(link, key, value)

        self.db.flush()
        _log.debug("Synced {} ingredients for recipe {}", len(resolved), recipe.id)
        return len(resolved)

    def search(self, query: str, limit: int = 10) -> list[Ingredient]:
        """Return ingredients whose display or normalized name contains ``query``."""
        needle = query.strip()
        if not needle:
            return []
        key = normalize(needle) or needle
        return (
            self.db.query(Ingredient)
            .filter(
                Ingredient.normalized_name.contains(key, autoescape=True)
                | Ingredient.name.contains(needle, autoescape=True)
            )
            .order_by(func.length(Ingredient.name), Ingredient.name)
            .limit(limit)
            .all()
        )

    def list_with_usage(self, search: str | None = None) -> list[dict[str, Any]]:
        """Return all ingredients with the number of recipes using each one."""
        usage = func.count(RecipeIngredient.recipe_id).label("recipes_count")
        query = (
            self.db.query(Ingredient, usage)
            .outerjoin(
                RecipeIngredient, RecipeIngredient.ingredient_id == Ingredient.id
            )
            .group_by(Ingredient.id)
        )
        if search and search.strip():
            query = query.filter(
                Ingredient.name.contains(search.strip(), autoescape=True)
            )
        rows = query.order_by(usage.desc(), Ingredient.name).all()
        return [
            {
                "id": ingredient.id,
                "name": ingredient.name,
                "normalized_name": ingredient.normalized_name,
                "recipes_count": count,
            }
            for ingredient, count in rows
        ]

    def rename(self, ingredient_id: int, name: str) -> Ingredient:
        """Change an ingredient's display name and dedupe key.

        Raises:
            ValidationError: If the new name normalizes to nothing.
            ConflictError: If another ingredient already owns the new key.
        """
        ingredient = self.db.get(Ingredient, ingredient_id)
        if ingredient is None:
            raise NotFoundError("Ingredient", ingredient_id)
        key = normalize(name)
        if not key:
            raise ValidationError.for_field("name", "The ingredient name is empty.")
        clash = (
            self.db.query(Ingredient)
            .filter(Ingredient.normalized_name == key, Ingredient.id != ingredient_id)
            .one_or_none()
        )
        if clash is not None:
            raise ConflictError(f"Ingredient '{clash.name}' already exists.")
        ingredient.name = name.strip()
        ingredient.normalized_name = key
        self.db.commit()
        return ingredient

    def delete_many(self, ingredient_ids: list[int]) -> int:
        """Delete ingredients, detaching them from every recipe first."""
        ingredients = (
            self.db.query(Ingredient).filter(Ingredient.id.in_(ingredient_ids)).all()
        )
        if len(ingredients) != len(set(ingredient_ids)):
            raise ValidationError.for_field("ids", "Some ingredients do not exist.")
        self.db.query(RecipeIngredient).filter(
            RecipeIngredient.ingredient_id.in_(ingredient_ids)
        ).delete(synchronize_session=False)
        for ingredient in ingredients:
            self.db.delete(ingredient)
        self.db.commit()
        _log.info("Deleted {} ingredients", len(ingredients))
        return len(ingredients)

"""Recipe Tag Junction table definition.

Plain many-to-many pivot between recipes and tags; it carries no attributes of its own.
"""

from sqlalchemy import Column, ForeignKey, Integer, Table

from sufra.db.models.base_database_model import BaseDatabaseModel

recipe_tag_junction = Table(
    "recipe_tag",
    BaseDatabaseModel.metadata,
    Column(
        "recipe_id",
        Integer,
        ForeignKey("recipes.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

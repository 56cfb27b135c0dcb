"""Base class with Pydantic config for all schemas."""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base class with Pydantic config for all schemas.

    This class provides a common configuration for all Pydantic models used in the
    application, ensuring consistent behavior across all schemas.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

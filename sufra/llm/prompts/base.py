"""Base class for completion API prompts.

Each prompt pairs a template with the pydantic model its JSON reply must satisfy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel


class BasePrompt[T: BaseModel](ABC):
    """Base class for all prompts.

    Example:
        ```python
        class TagOnlyPrompt(BasePrompt[TagsResult]):
            output_schema = TagsResult

            def format(self, name: str) -> str:
                return f"Suggest tags for {name}"
        ```
    """

    output_schema: ClassVar[type[BaseModel]]
    """Pydantic model the JSON reply is validated against."""

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Render the prompt text from its input variables."""
        ...

    @property
    def name(self) -> str:
        """Prompt identifier for logging."""
        return self.__class__.__name__

    def parse(self, payload: Any) -> T:
        """Validate a decoded JSON reply against ``output_schema``.

        Raises:
            pydantic.ValidationError: If the reply does not match.
        """
        return self.output_schema.model_validate(payload)  # type: ignore[return-value]

"""Completion API schema models.

Pydantic models for parsing responses from the generative-language API.
"""

from .generate_content_response import (
    GeminiCandidate,
    GeminiContent,
    GeminiGenerateContentResponse,
    GeminiPart,
)
from .model_list_response import GeminiModelInfo, GeminiModelListResponse

__all__ = [
    "GeminiCandidate",
    "GeminiContent",
    "GeminiGenerateContentResponse",
    "GeminiModelInfo",
    "GeminiModelListResponse",
    "GeminiPart",
]

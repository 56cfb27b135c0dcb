"""Schema for the completion API generateContent response."""

from pydantic import ConfigDict, Field

from sufra.api.v1.schemas.base_schema import BaseSchema


class GeminiPart(BaseSchema):
    model_config = ConfigDict(extra="ignore")

    text: str | None = None


class GeminiContent(BaseSchema):
    model_config = ConfigDict(extra="ignore")

    parts: list[GeminiPart] = Field(default_factory=list)
    role: str | None = None


class GeminiCandidate(BaseSchema):
    model_config = ConfigDict(extra="ignore")

    content: GeminiContent | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class GeminiGenerateContentResponse(BaseSchema):
    """Only the fields the client reads; everything else is ignored."""

    model_config = ConfigDict(extra="ignore")

    candidates: list[GeminiCandidate] = Field(default_factory=list)

    def first_text(self) -> str | None:
        """Text of ``candidates[0].content.parts[0]``, if present."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text

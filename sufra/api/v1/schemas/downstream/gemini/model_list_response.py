"""Schema for the completion API model listing."""

from pydantic import ConfigDict, Field

from sufra.api.v1.schemas.base_schema import BaseSchema


class GeminiModelInfo(BaseSchema):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Resource name, e.g. models/gemini-1.5-flash")
    display_name: str | None = Field(default=None, alias="displayName")
    supported_generation_methods: list[str] = Field(
        default_factory=list, alias="supportedGenerationMethods"
    )


class GeminiModelListResponse(BaseSchema):
    model_config = ConfigDict(extra="ignore")

    models: list[GeminiModelInfo] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")

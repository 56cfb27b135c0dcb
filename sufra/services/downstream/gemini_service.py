"""Client for the generative-language completion API.

Sends a prompt to ``models/{model}:generateContent`` asking for a JSON reply, and
decodes that reply. No retries are attempted; every failure surfaces as one of the
upstream exceptions so the caller decides what to do with it.
"""

import re
from http import HTTPStatus
from typing import Any

import httpx
import orjson
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from sufra.api.v1.schemas.downstream.gemini import (
    GeminiGenerateContentResponse,
    GeminiModelListResponse,
)
from sufra.core.config.config import settings
from sufra.core.logging import get_logger
from sufra.exceptions.custom_exceptions import (
    ConfigurationError,
    ParseError,
    RateLimitedError,
    UpstreamError,
)
from sufra.llm.prompts.base import BasePrompt

_log = get_logger(__name__)

_CODE_FENCE = re.compile(
    r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE
)
_GENERATE_METHOD = "generateContent"
_MODEL_PREFIX = "models/"


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` (or bare ```) fence, if any."""
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text.strip()


class GeminiService:
    """Synchronous client for one model of the completion API."""

    def __init__(
        self,
        api_key: str | None,
        model: str | None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Raises:
            ConfigurationError: If no API key or model is configured.
        """
        if not api_key or not model:
            raise ConfigurationError(
                "The AI service is not configured. Set an API key and a model in "
                "the settings."
            )
        self.api_key = api_key
        self.model = model.removeprefix(_MODEL_PREFIX)
        self.base_url = (base_url or settings.gemini_api_base_url).rstrip("/")
        self.client = client or httpx.Client(
            timeout=timeout or settings.gemini_timeout_seconds
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "GeminiService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/models/{self.model}:{_GENERATE_METHOD}"

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        params = {**kwargs.pop("params", {}), "key": self.api_key}
        try:
            response = self.client.request(method, url, params=params, **kwargs)
        except httpx.RequestError as e:
            _log.error("Completion API request to {} failed: {}", url, e)
            raise UpstreamError(f"Could not reach the AI service: {e}") from e

        if response.status_code == HTTPStatus.TOO_MANY_REQUESTS:
            _log.warning("Completion API rate limited the request")
            raise RateLimitedError()
        if response.is_error:
            message = self._error_message(response)
            _log.error(
                "Completion API returned HTTP {}: {}", response.status_code, message
            )
            raise UpstreamError(
                f"AI service error: {message}", status_code=response.status_code
            )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            return response.text.strip() or response.reason_phrase
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
            if message:
                return str(message)
        return response.text.strip() or response.reason_phrase

    def generate_json(self, prompt_text: str) -> Any:
        """Send ``prompt_text`` and return the decoded JSON reply.

        Raises:
            UpstreamError: On transport errors and non-2xx answers.
            RateLimitedError: On HTTP 429.
            ParseError: If the reply has no text or the text is not JSON.
        """
        payload = {
            "contents": [{"parts": [{"text": prompt_text}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        _log.debug(
            "Calling completion model {} ({} chars)", self.model, len(prompt_text)
        )
        response = self._request("POST", self.generate_url, json=payload)

        try:
            envelope = GeminiGenerateContentResponse.model_validate(
                orjson.loads(response.content)
            )
        except (orjson.JSONDecodeError, PydanticValidationError) as e:
            raise ParseError(
                "The AI service returned an unreadable response.", raw=response.text
            ) from e
        text = envelope.first_text()
        if not text:
            raise ParseError(
                "The AI service returned an empty response.", raw=response.text
            )

        try:
            return orjson.loads(strip_code_fences(text))
        except orjson.JSONDecodeError as e:
            _log.warning("Completion reply is not valid JSON: {!r}", text[:200])
            raise ParseError(
                "The AI service did not return valid JSON.", raw=text
            ) from e

    def complete[T: BaseModel](self, prompt: BasePrompt[T], **variables: Any) -> T:
        """Render ``prompt``, call the model and validate the reply.

        Raises:
            ParseError: If the reply does not match the prompt's output schema.
        """
        decoded = self.generate_json(prompt.format(**variables))
        try:
            return prompt.parse(decoded)
        except PydanticValidationError as e:
            _log.warning("{} reply failed validation: {}", prompt.name, e)
            raise ParseError(
                "The AI service returned data in an unexpected shape.",
                raw=orjson.dumps(decoded).decode(),
            ) from e

    def list_models(self) -> list[str]:
        """Names of the models that support generateContent, without ``models/``."""
        names: list[str] = []
        page_token: str | None = None
        while True:
            params = {"pageToken": page_token} if page_token else {}
            response = self._request("GET", f"{self.base_url}/models", params=params)
            try:
                page = GeminiModelListResponse.model_validate(
                    orjson.loads(response.content)
                )
            except (orjson.JSONDecodeError, PydanticValidationError) as e:
                raise ParseError(
                    "The AI service returned an unreadable model list.",
                    raw=response.text,
                ) from e
            names.extend(
                info.name.removeprefix(_MODEL_PREFIX)
                for info in page.models
                if _GENERATE_METHOD in info.supported_generation_methods
            )
            if not page.next_page_token:
                return names
            page_token = page.next_page_token

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

import httpx
from google import genai
from google.genai import errors, types

from ..core.constants import DEFAULT_AI_MODEL, DEFAULT_AI_TIMEOUT_SECONDS
from ..core.exceptions import RemoteServiceError
from .images import ImageData

logger = logging.getLogger(__name__)

Part = Union[str, ImageData]


def _to_content(part: Part) -> Union[str, types.Part]:
    if isinstance(part, ImageData):
        return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)
    return part


class GeminiClient:
    """Thin wrapper over the ``google-genai`` SDK.

    Every failure (transport, timeout, API error status, empty answer) is
    raised as ``RemoteServiceError``; callers decide how to present it. The
    SDK client is created on first use so an unconfigured key only fails the
    AI features, not application start.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_AI_MODEL,
        timeout: float = DEFAULT_AI_TIMEOUT_SECONDS,
        client: Optional[Any] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._client = client

    def _sdk(self):
        if self._client is None:
            if not self._api_key:
                raise RemoteServiceError("The AI service is not configured")
            self._client = genai.Client(
                api_key=self._api_key,
                # milliseconds
                http_options=types.HttpOptions(timeout=int(self._timeout * 1000)),
            )
        return self._client

    def generate_text(self, prompt: str) -> str:
        return self.generate([prompt])

    def generate(self, parts: Sequence[Part], *, response_schema: Optional[dict] = None) -> str:
        config = None
        if response_schema is not None:
            config = types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=response_schema,
            )

        sdk = self._sdk()
        try:
            response = sdk.models.generate_content(
                model=self._model,
                contents=[_to_content(p) for p in parts],
                config=config,
            )
        except httpx.TimeoutException as e:
            logger.warning("AI request timed out after %ss", self._timeout)
            raise RemoteServiceError("The AI service timed out") from e
        except errors.APIError as e:
            logger.warning("AI request failed with %s: %s", e.code, e.message)
            raise RemoteServiceError("The AI service request failed") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("AI request failed: %s", e)
            raise RemoteServiceError("The AI service request failed") from e

        text = response.text
        if not text or not text.strip():
            logger.warning("AI response had no text: %r", response)
            raise RemoteServiceError("The AI service returned no answer")
        return text

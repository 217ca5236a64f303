"""
Async client for the Gemini generateContent endpoint.

Transport problems are returned as GenerationError values rather than raised,
so the quiz agent can branch on them at the stage boundary.
"""

import logging
from typing import Any, Dict, Optional, Union

import httpx

from models.quiz_models import GeminiRequest, GenerationConfig
from models.result_models import GenerationError, GenerationErrorKind
from utils.config import Settings

logger = logging.getLogger(__name__)


class GeminiClient:
    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._http_client = http_client

    async def generate_content(
        self, prompt: str, config: GenerationConfig
    ) -> Union[Dict[str, Any], GenerationError]:
        """
        POST the prompt and return the decoded reply envelope.

        Returns:
            The envelope as a dict on a 2xx JSON reply, otherwise a
            GenerationError of kind UpstreamUnavailable (connection, status,
            timeout) or UpstreamMalformedEnvelope (2xx body that is not JSON).
        """
        body = GeminiRequest.from_prompt(prompt, config).model_dump()
        # The key travels in a header, never in the URL
        headers = {"x-goog-api-key": self.settings.gemini_api_key} if self.settings.gemini_api_key else None
        timeout = self.settings.gemini_timeout_seconds

        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    self.settings.gemini_api_url, json=body, headers=headers, timeout=timeout
                )
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.post(self.settings.gemini_api_url, json=body, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            return GenerationError(
                kind=GenerationErrorKind.UPSTREAM_UNAVAILABLE,
                message="Timed out waiting for the model service",
                cause=repr(e),
                timed_out=True,
            )
        except httpx.HTTPStatusError as e:
            return GenerationError(
                kind=GenerationErrorKind.UPSTREAM_UNAVAILABLE,
                message="Model service returned an error status",
                status_code=e.response.status_code,
                cause=e.response.text[:500],
            )
        except httpx.RequestError as e:
            return GenerationError(
                kind=GenerationErrorKind.UPSTREAM_UNAVAILABLE,
                message="Could not reach the model service",
                cause=repr(e),
            )

        try:
            envelope = response.json()
        except ValueError as e:
            return GenerationError(
                kind=GenerationErrorKind.UPSTREAM_MALFORMED_ENVELOPE,
                message="Model service reply was not JSON",
                status_code=response.status_code,
                cause=repr(e),
            )

        logger.debug(f"Gemini replied {response.status_code} with keys {list(envelope) if isinstance(envelope, dict) else type(envelope).__name__}")
        return envelope

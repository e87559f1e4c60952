"""Async HTTP client for the Gemini generateContent endpoint.

WHY: Transcription is one multimodal request: a text prompt plus the
media file, inline and base64-encoded. This module hides the URL layout,
authentication header, and error payloads behind one client method.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GeminiClient is an
async context manager; enter it to open the connection pool, exit to
close it. generate_content() posts the request and returns the parsed
response or raises GeminiAPIError.

RULES:
- Always use the async context manager (async with GeminiClient(...) as client:)
- Authentication is the x-goog-api-key header, from the key passed in
- An empty key raises GeminiAPIError before any request is sent
- Non-2xx responses raise GeminiAPIError with the API's message
- Transport failures surface as httpx.HTTPError (not wrapped)
- No retries; timeouts are whatever httpx.Timeout below allows
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ktm_transcriber.api.models import (
    ErrorBody,
    GenerateContentRequest,
    GenerateContentResponse,
)

logger = logging.getLogger(__name__)

INVALID_KEY_PHRASE = "API key not valid"


class GeminiAPIError(Exception):
    """Raised when the Gemini API returns an error response.

    WHY: The service distinguishes a bad credential from every other
    failure, and needs the API's own message for both.

    RULES:
    - Always include status_code and message
    - message is the error.message field, or the raw body if unparseable
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message)

    @property
    def is_invalid_key(self) -> bool:
        return INVALID_KEY_PHRASE in self.message


class GeminiClient:
    """Async client for Gemini's generateContent.

    RULES:
    - Use as: async with GeminiClient(api_key, base_url) as client: ...
    - transport is for tests (httpx.MockTransport); production passes None
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> GeminiClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"x-goog-api-key": self._api_key},
            timeout=httpx.Timeout(300.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "GeminiClient must be used as an async context manager: "
                "async with GeminiClient(...) as client: ..."
            )
        return self._client

    async def generate_content(
        self,
        model: str,
        request: GenerateContentRequest,
    ) -> GenerateContentResponse:
        """Send one generateContent request and return the response text.

        Args:
            model: Gemini model identifier, e.g. "gemini-2.5-flash".
            request: Prompt plus inline media.

        Returns:
            The parsed GenerateContentResponse.
        """
        client = self._ensure_client()
        if not self._api_key:
            raise GeminiAPIError(
                401, "{}: no API key is configured.".format(INVALID_KEY_PHRASE)
            )

        logger.info(
            "Requesting transcription from %s (%s, %d base64 chars)",
            model,
            request.media.mime_type,
            len(request.media.data),
        )
        resp = await client.post(
            "/models/{}:generateContent".format(model),
            json=request.to_dict(),
        )

        if resp.status_code != 200:
            raise GeminiAPIError(resp.status_code, _error_message(resp))

        result = GenerateContentResponse.from_dict(resp.json())
        logger.info(
            "Received %d characters (finish reason: %s)",
            len(result.text),
            result.finish_reason,
        )
        return result


def _error_message(resp: httpx.Response) -> str:
    """Pull error.message out of an error response, else the raw body."""
    try:
        body = ErrorBody.from_dict(resp.json())
    except ValueError:
        body = None
    if body is not None and body.message:
        return body.message
    return resp.text

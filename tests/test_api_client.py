"""Tests for the Gemini API client and its request/response models."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from ktm_transcriber.api.client import GeminiAPIError, GeminiClient
from ktm_transcriber.api.models import (
    ErrorBody,
    GenerateContentRequest,
    GenerateContentResponse,
    InlineMedia,
)

from tests.conftest import INVALID_KEY_BODY, TEST_BASE_URL


class TestModels:
    """JSON shapes sent to and read from generateContent."""

    def test_inline_media_is_base64(self):
        media = InlineMedia.from_bytes(b"\x00\x01abc", "audio/wav")
        assert media.to_dict() == {
            "inline_data": {"mime_type": "audio/wav", "data": "AAFhYmM="}
        }

    def test_request_puts_prompt_before_media(self):
        request = GenerateContentRequest("Transcribe.", InlineMedia("audio/wav", "AA=="))
        parts = request.to_dict()["contents"][0]["parts"]
        assert parts[0] == {"text": "Transcribe."}
        assert "inline_data" in parts[1]

    def test_response_without_candidates_is_empty(self):
        assert GenerateContentResponse.from_dict({}).text == ""
        assert GenerateContentResponse.from_dict({"candidates": []}).text == ""

    def test_response_ignores_non_text_parts(self):
        data = {"candidates": [{"content": {"parts": [{"inline_data": {}}, {"text": "hi"}]}}]}
        assert GenerateContentResponse.from_dict(data).text == "hi"

    def test_error_body_parsing(self):
        body = ErrorBody.from_dict(INVALID_KEY_BODY)
        assert body.code == 400
        assert body.status == "INVALID_ARGUMENT"
        assert ErrorBody.from_dict({"detail": "nope"}) is None
        assert ErrorBody.from_dict(["not", "a", "dict"]) is None


class TestGeminiClient:
    """GeminiClient HTTP behaviour."""

    def test_requires_context_manager(self):
        client = GeminiClient("key", TEST_BASE_URL)
        request = GenerateContentRequest("p", InlineMedia("audio/wav", ""))
        with pytest.raises(RuntimeError, match="async context manager"):
            asyncio.run(client.generate_content("gemini-2.5-flash", request))

    def test_error_response_raises_with_message(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(400, json=INVALID_KEY_BODY))
        request = GenerateContentRequest("p", InlineMedia("audio/wav", ""))

        async def _run():
            async with GeminiClient("bad-key", TEST_BASE_URL, transport=transport) as client:
                await client.generate_content("gemini-2.5-flash", request)

        with pytest.raises(GeminiAPIError) as exc_info:
            asyncio.run(_run())
        assert exc_info.value.status_code == 400
        assert exc_info.value.is_invalid_key

    def test_other_errors_are_not_invalid_key(self):
        err = GeminiAPIError(500, "Internal error encountered.")
        assert not err.is_invalid_key
        assert str(err) == "Internal error encountered."

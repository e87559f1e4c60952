"""Tests for TranscriptionService and the Gemini client it drives.

WHY: The service is where remote errors are classified and where the
model fallback and URL stand-in live. Regressions here would show users
the wrong message or send the wrong model name.

HOW: Gemini is replaced by httpx.MockTransport (see conftest). Each test
scripts one response and inspects both the outcome and the recorded
request.

RULES:
- Async code is driven with asyncio.run()
- The real Gemini API is never called
"""

from __future__ import annotations

import asyncio
import base64

import httpx
import pytest

from ktm_transcriber.config import AppConfig
from ktm_transcriber.core.result import (
    FAILURE_MARKER,
    Failure,
    FailureKind,
    Success,
)
from ktm_transcriber.core.settings import Settings
from ktm_transcriber.core.source import UrlSource
from ktm_transcriber.service import build_url_report, resolve_model

from tests.conftest import INVALID_KEY_BODY, TEST_BASE_URL, gemini_text_response


# ---------------------------------------------------------------------------
# transcribe_file: success path
# ---------------------------------------------------------------------------


class TestTranscribeFileSuccess:
    """A 200 response becomes Success with the model's text."""

    def test_returns_response_text(self, make_service, audio_file):
        service, _ = make_service(
            lambda req: httpx.Response(200, json=gemini_text_response("Speaker 1: Hello."))
        )
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert outcome == Success("Speaker 1: Hello.")

    def test_joins_multiple_text_parts(self, make_service, audio_file):
        body = {"candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "world"}]}}]}
        service, _ = make_service(lambda req: httpx.Response(200, json=body))
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert outcome == Success("Hello world")

    def test_request_carries_prompt_and_encoded_media(self, make_service, audio_file):
        service, recorder = make_service(
            lambda req: httpx.Response(200, json=gemini_text_response("ok"))
        )
        asyncio.run(service.transcribe_file(audio_file, Settings(language="de-DE")))

        request = recorder.requests[-1]
        assert str(request.url) == TEST_BASE_URL + "/models/gemini-2.5-flash:generateContent"
        assert request.headers["x-goog-api-key"] == "test-key"

        parts = recorder.last_json()["contents"][0]["parts"]
        assert "The primary language is de-DE." in parts[0]["text"]
        inline = parts[1]["inline_data"]
        assert inline["mime_type"] == "audio/mpeg"
        assert base64.b64decode(inline["data"]) == audio_file.path.read_bytes()


# ---------------------------------------------------------------------------
# Model resolution
# ---------------------------------------------------------------------------


class TestModelFallback:
    """Unsupported model names fall back instead of erroring."""

    def test_placeholder_model_uses_default(self, make_service, audio_file):
        service, recorder = make_service(
            lambda req: httpx.Response(200, json=gemini_text_response("ok"))
        )
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings(model="aura-hf")))
        assert isinstance(outcome, Success)
        assert recorder.requests[-1].url.path.endswith("/models/gemini-2.5-flash:generateContent")

    def test_supported_model_is_kept(self, make_service, audio_file):
        service, recorder = make_service(
            lambda req: httpx.Response(200, json=gemini_text_response("ok"))
        )
        asyncio.run(service.transcribe_file(audio_file, Settings(model="gemini-2.5-pro")))
        assert recorder.requests[-1].url.path.endswith("/models/gemini-2.5-pro:generateContent")

    @pytest.mark.parametrize("name", ["", "gemini-made-up", "GEMINI-2.5-FLASH"])
    def test_resolve_model_rejects_unknown_names(self, name):
        assert resolve_model(name, "gemini-2.5-flash") == "gemini-2.5-flash"


# ---------------------------------------------------------------------------
# transcribe_file: failures
# ---------------------------------------------------------------------------


class TestTranscribeFileFailures:
    """Errors are returned as Failure, never raised."""

    def test_invalid_key_is_classified(self, make_service, audio_file):
        service, _ = make_service(lambda req: httpx.Response(400, json=INVALID_KEY_BODY))
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert isinstance(outcome, Failure)
        assert outcome.kind is FailureKind.INVALID_API_KEY
        text = outcome.to_text()
        assert text.startswith(FAILURE_MARKER)
        assert "Invalid API Key" in text

    def test_missing_key_fails_without_request(self, make_service, audio_file, test_config):
        config = AppConfig(
            api_key="",
            base_url=test_config.base_url,
            default_model=test_config.default_model,
            url_delay_s=0.0,
        )
        service, recorder = make_service(
            lambda req: httpx.Response(200, json=gemini_text_response("unused")),
            config=config,
        )
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert outcome.kind is FailureKind.INVALID_API_KEY
        assert recorder.requests == []

    def test_other_api_error_embeds_message(self, make_service, audio_file):
        body = {"error": {"code": 429, "message": "Resource has been exhausted", "status": "RESOURCE_EXHAUSTED"}}
        service, _ = make_service(lambda req: httpx.Response(429, json=body))
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert outcome.kind is FailureKind.API_ERROR
        assert outcome.to_text() == (
            "Transcription Failed: An unexpected error occurred. "
            "Details: Resource has been exhausted"
        )

    def test_non_json_error_uses_body_text(self, make_service, audio_file):
        service, _ = make_service(lambda req: httpx.Response(502, text="Bad Gateway"))
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert outcome.message.endswith("Details: Bad Gateway")

    def test_empty_error_message_becomes_unknown_error(self, make_service, audio_file):
        service, _ = make_service(lambda req: httpx.Response(500, text=""))
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert outcome.message.endswith("Details: Unknown error")

    def test_transport_error_is_failure(self, make_service, audio_file):
        def _raise(request):
            raise httpx.ConnectError("connection refused", request=request)

        service, _ = make_service(_raise)
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert outcome.kind is FailureKind.API_ERROR
        assert "connection refused" in outcome.message

    def test_unreadable_file_is_failure(self, make_service, audio_file):
        audio_file.path.unlink()
        service, recorder = make_service(
            lambda req: httpx.Response(200, json=gemini_text_response("unused"))
        )
        outcome = asyncio.run(service.transcribe_file(audio_file, Settings()))
        assert isinstance(outcome, Failure)
        assert recorder.requests == []


# ---------------------------------------------------------------------------
# transcribe_url
# ---------------------------------------------------------------------------


class TestTranscribeUrl:
    """The URL path is simulated and echoes the settings."""

    def test_report_lists_url_and_default_settings(self, make_service):
        service, recorder = make_service(lambda req: httpx.Response(500))
        outcome = asyncio.run(
            service.transcribe_url(UrlSource("https://example.com/video"), Settings())
        )
        assert isinstance(outcome, Success)
        report = outcome.text
        assert "`https://example.com/video`" in report
        assert "server-side component" in report
        assert "- **Model:** gemini-2.5-flash" in report
        assert "- **Language:** en-US" in report
        assert "- **Speaker Diarization:** Enabled" in report
        assert "- **Punctuation:** Enabled" in report
        assert "- **Timestamps:** Disabled" in report
        assert "- **Profanity Filter:** Enabled" in report
        assert "- **Summary:** Disabled" in report
        assert "- **Custom Vocabulary:** None" in report
        assert recorder.requests == []

    def test_report_shows_trimmed_vocabulary(self):
        report = build_url_report("https://x.test", Settings(custom_vocabulary="  KTM, UX "))
        assert "- **Custom Vocabulary:** KTM, UX\n" in report

    def test_waits_configured_delay(self, make_service, test_config, monkeypatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr("ktm_transcriber.service.asyncio.sleep", fake_sleep)
        config = AppConfig(api_key="k", base_url=test_config.base_url, url_delay_s=2.0)
        service, _ = make_service(lambda req: httpx.Response(500), config=config)
        asyncio.run(service.transcribe_url(UrlSource("https://example.com"), Settings()))
        assert delays == [2.0]

    def test_transcribe_dispatches_on_source_type(self, make_service, audio_file):
        service, recorder = make_service(
            lambda req: httpx.Response(200, json=gemini_text_response("from file"))
        )
        file_outcome = asyncio.run(service.transcribe(audio_file, Settings()))
        url_outcome = asyncio.run(service.transcribe(UrlSource("https://a.test"), Settings()))
        assert file_outcome == Success("from file")
        assert url_outcome.text.startswith("## Mock Transcription for URL")
        assert len(recorder.requests) == 1

"""Shared test fixtures for the ktm_transcriber test suite.

WHY: Several modules need the same fake media file, a zero-delay config,
and a way to stand up the service against a scripted Gemini endpoint.

HOW: Fixtures write small files into tmp_path. make_service() builds a
TranscriptionService whose GeminiClient talks to an httpx.MockTransport,
recording every request it receives.

RULES:
- No test ever reaches the real Gemini API
- url_delay_s is 0 so URL tests do not sleep
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from ktm_transcriber.api.client import GeminiClient
from ktm_transcriber.config import AppConfig
from ktm_transcriber.core.source import FileSource
from ktm_transcriber.service import TranscriptionService

TEST_BASE_URL = "https://gemini.test/v1beta"

INVALID_KEY_BODY: Dict[str, Any] = {
    "error": {
        "code": 400,
        "message": "API key not valid. Please pass a valid API key.",
        "status": "INVALID_ARGUMENT",
    }
}


def gemini_text_response(text: str) -> Dict[str, Any]:
    """A minimal successful generateContent payload."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": "STOP",
            }
        ]
    }


class RecordingTransport:
    """Collects requests and answers each with the configured handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def test_config() -> AppConfig:
    return AppConfig(
        api_key="test-key",
        base_url=TEST_BASE_URL,
        default_model="gemini-2.5-flash",
        url_delay_s=0.0,
    )


@pytest.fixture
def audio_file(tmp_path: Path) -> FileSource:
    path = tmp_path / "meeting.mp3"
    path.write_bytes(b"ID3 fake audio payload")
    return FileSource.from_path(path)


@pytest.fixture
def make_service(test_config: AppConfig):
    """Return a builder: make_service(handler, config=None) -> (service, recorder)."""

    def _build(
        handler: Callable[[httpx.Request], httpx.Response],
        config: Optional[AppConfig] = None,
    ):
        recorder = RecordingTransport(handler)
        cfg = config or test_config

        def factory(c: AppConfig) -> GeminiClient:
            return GeminiClient(c.api_key, c.base_url, transport=recorder.transport)

        return TranscriptionService(cfg, client_factory=factory), recorder

    return _build

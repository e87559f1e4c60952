"""Transcription service: turn a source plus settings into an outcome.

WHY: The screen controller should not care whether text came from Gemini
or from the URL stand-in, or how a failed request is described. This
module is the one boundary that knows both paths and classifies errors.

HOW: TranscriptionService is built with an explicit AppConfig. For files
it resolves the model, base64-encodes the bytes, compiles the prompt,
and makes one generateContent call through GeminiClient. For URLs it
waits a fixed delay and returns a templated report, since fetching
third-party media needs a server-side component this app does not have.

RULES:
- Unsupported model names silently fall back to config.default_model
- An invalid or missing API key becomes Failure(INVALID_API_KEY)
- Other API, transport, and file-read errors become Failure(API_ERROR)
  carrying the underlying message ("Unknown error" if it has none)
- Anything else propagates; the controller catches it
- transcribe_url never touches the network
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import httpx

from ktm_transcriber.api.client import GeminiAPIError, GeminiClient
from ktm_transcriber.api.models import GenerateContentRequest, InlineMedia
from ktm_transcriber.config import SUPPORTED_MODELS, AppConfig
from ktm_transcriber.core.prompt import build_prompt
from ktm_transcriber.core.result import (
    GENERIC_FAILURE_MESSAGE,
    INVALID_KEY_MESSAGE,
    Failure,
    FailureKind,
    Success,
    TranscriptionOutcome,
)
from ktm_transcriber.core.settings import Settings
from ktm_transcriber.core.source import FileSource, TranscriptionSource, UrlSource

logger = logging.getLogger(__name__)

ClientFactory = Callable[[AppConfig], GeminiClient]


def _default_client_factory(config: AppConfig) -> GeminiClient:
    return GeminiClient(api_key=config.api_key, base_url=config.base_url)


def resolve_model(requested: str, fallback: str) -> str:
    """Return requested if the backend supports it, otherwise fallback."""
    if requested in SUPPORTED_MODELS:
        return requested
    logger.info("Model %r is not a supported backend model; using %s", requested, fallback)
    return fallback


def _on_off(flag: bool) -> str:
    return "Enabled" if flag else "Disabled"


def build_url_report(url: str, settings: Settings) -> str:
    """Markdown returned by the simulated URL transcription."""
    vocabulary = settings.custom_vocabulary.strip() or "None"
    return (
        "## Mock Transcription for URL\n"
        "\n"
        "This is a simulated transcription for the URL: `{url}`.\n"
        "\n"
        "**Disclaimer:** In a real-world application, a server-side component "
        "would be necessary to download and process content from web links "
        "before sending it to the AI for transcription. This demonstration "
        "mimics that process.\n"
        "\n"
        "### Applied Settings:\n"
        "- **Model:** {model}\n"
        "- **Language:** {language}\n"
        "- **Speaker Diarization:** {diarization}\n"
        "- **Punctuation:** {punctuation}\n"
        "- **Timestamps:** {timestamps}\n"
        "- **Profanity Filter:** {profanity}\n"
        "- **Summary:** {summary}\n"
        "- **Custom Vocabulary:** {vocabulary}\n"
        "\n"
        "The actual transcription would appear here."
    ).format(
        url=url,
        model=settings.model,
        language=settings.language,
        diarization=_on_off(settings.enable_diarization),
        punctuation=_on_off(settings.enable_punctuation),
        timestamps=_on_off(settings.add_timestamps),
        profanity=_on_off(settings.filter_profanity),
        summary=_on_off(settings.enable_summarization),
        vocabulary=vocabulary,
    )


class TranscriptionService:
    """File and URL transcription behind one interface."""

    def __init__(
        self,
        config: AppConfig,
        client_factory: ClientFactory = _default_client_factory,
    ) -> None:
        self._config = config
        self._client_factory = client_factory

    async def transcribe(
        self, source: TranscriptionSource, settings: Settings
    ) -> TranscriptionOutcome:
        if isinstance(source, UrlSource):
            return await self.transcribe_url(source, settings)
        return await self.transcribe_file(source, settings)

    async def transcribe_file(
        self, source: FileSource, settings: Settings
    ) -> TranscriptionOutcome:
        """Transcribe a local media file with one Gemini request.

        Returns Success with the model's text, or a Failure classified
        as described in the module docstring.
        """
        model = resolve_model(settings.model, self._config.default_model)
        prompt = build_prompt(settings)

        try:
            content = source.path.read_bytes()
            request = GenerateContentRequest(
                prompt=prompt,
                media=InlineMedia.from_bytes(content, source.mime_type),
            )
            async with self._client_factory(self._config) as client:
                response = await client.generate_content(model, request)
        except GeminiAPIError as e:
            logger.error("Error transcribing %s: %s", source.name, e.message)
            if e.is_invalid_key:
                return Failure(FailureKind.INVALID_API_KEY, INVALID_KEY_MESSAGE)
            return _generic_failure(e.message)
        except (httpx.HTTPError, OSError) as e:
            logger.error("Error transcribing %s: %s", source.name, e)
            return _generic_failure(str(e))

        return Success(response.text)

    async def transcribe_url(
        self, source: UrlSource, settings: Settings
    ) -> TranscriptionOutcome:
        """Simulated URL transcription.

        Direct fetching of social-media or arbitrary web media is not
        possible without a server that downloads and relays it. Until one
        exists this waits config.url_delay_s and returns a report echoing
        the URL and settings.
        """
        logger.warning(
            'URL transcription for "%s" is simulated. A server-side '
            "component is required for this feature.",
            source.url,
        )
        await asyncio.sleep(self._config.url_delay_s)
        return Success(build_url_report(source.url, settings))


def _generic_failure(detail: str) -> Failure:
    return Failure(
        FailureKind.API_ERROR,
        GENERIC_FAILURE_MESSAGE.format(detail or "Unknown error"),
    )

"""Configuration constants, choice lists, and .env loading.

WHY: Centralizes all configurable values so they are easy to find and
override. Language and model choices, the upload size limit, and API
defaults are plain data structures rather than buried in the GUI or the
service, so both can share them.

HOW: python-dotenv loads the .env file on import. Constants are
module-level lists, sets, and strings. load_config() snapshots the
environment into a frozen AppConfig that is passed explicitly to the
transcription service.

RULES:
- The API key is read from GEMINI_API_KEY (falling back to API_KEY)
- A missing key is a warning, never a startup failure
- Only load_config() reads the process environment for the service;
  the service itself never touches os.environ
- SUPPORTED_MODELS is the explicit set of real backend model names;
  anything else falls back to DEFAULT_MODEL at call time
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Tuple

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Choice lists: (value, display label)
# ---------------------------------------------------------------------------

LANGUAGES: List[Tuple[str, str]] = [
    ("en-US", "English (US)"),
    ("en-GB", "English (UK)"),
    ("es-ES", "Spanish"),
    ("fr-FR", "French"),
    ("de-DE", "German"),
    ("it-IT", "Italian"),
    ("ja-JP", "Japanese"),
    ("ko-KR", "Korean"),
    ("zh-CN", "Chinese (Mandarin)"),
]

MODELS: List[Tuple[str, str]] = [
    ("gemini-2.5-flash", "Gemini 2.5 Flash (Fast & Efficient)"),
    # Placeholder shown in the picker; transcription falls back to DEFAULT_MODEL.
    ("aura-hf", "Aura High-Fidelity (Premium)"),
]

SUPPORTED_MODELS: frozenset = frozenset({
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.5-pro",
    "gemini-2.0-flash",
})
"""Model identifiers the Gemini backend accepts for audio transcription."""

# ---------------------------------------------------------------------------
# Upload limits
# ---------------------------------------------------------------------------

MAX_FILE_SIZE_MB = 50
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024

MEDIA_MIME_TYPES: Dict[str, str] = {
    ".aac": "audio/aac",
    ".aiff": "audio/aiff",
    ".flac": "audio/flac",
    ".m4a": "audio/mp4",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".mov": "video/quicktime",
    ".mp4": "video/mp4",
    ".mpeg": "video/mpeg",
    ".webm": "video/webm",
}
"""Extension (lowercase, with dot) to the MIME type sent with the upload.

Also drives the file dialog filter. Files with other extensions fall back
to the mimetypes registry."""

# ---------------------------------------------------------------------------
# API defaults
# ---------------------------------------------------------------------------

# Built-in values; load_config() lets the environment override each one.
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
URL_SIMULATION_DELAY_S = 2.0
LOG_LEVEL = os.getenv("KTM_LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class AppConfig:
    """Explicit configuration handed to the transcription service.

    RULES:
    - api_key may be empty; the remote call then fails as an invalid key
    - default_model is used whenever the chosen model is not supported
    - url_delay_s is the simulated latency of URL transcription
    """

    api_key: str = ""
    base_url: str = GEMINI_BASE_URL
    default_model: str = DEFAULT_MODEL
    url_delay_s: float = URL_SIMULATION_DELAY_S


def load_api_key() -> str:
    """Read the Gemini API key from the environment, or "" if unset."""
    return (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip()


def load_config() -> AppConfig:
    """Build an AppConfig from the environment (populated by python-dotenv).

    WHY: The service must be testable without ambient state, so the one
    place that reads the environment is here, at application startup.

    RULES:
    - Every AppConfig field is read at call time, not at import
    - Logs a warning when no API key is configured, but still returns
    - A KTM_URL_DELAY_S that is not a number raises ValueError
    """
    api_key = load_api_key()
    if not api_key:
        logger.warning(
            "GEMINI_API_KEY is not set. Transcription requests will fail "
            "until a key is added to the .env file."
        )
    return AppConfig(
        api_key=api_key,
        base_url=os.getenv("GEMINI_BASE_URL") or GEMINI_BASE_URL,
        default_model=os.getenv("KTM_DEFAULT_MODEL") or DEFAULT_MODEL,
        url_delay_s=float(os.getenv("KTM_URL_DELAY_S") or URL_SIMULATION_DELAY_S),
    )

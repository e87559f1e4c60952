"""Gemini API client package: async HTTP access to generateContent.

WHY: Transcription sends one multimodal request per file. This package
keeps every detail of that request (URL layout, auth header, JSON shape,
error payloads) away from the service and the GUI.

HOW: GeminiClient wraps httpx.AsyncClient; request and response shapes
live in models.py.

RULES:
- All HTTP calls go through GeminiClient (no direct httpx usage elsewhere)
- The API key is passed in explicitly, never read from the environment here
"""

from ktm_transcriber.api.client import GeminiAPIError, GeminiClient
from ktm_transcriber.api.models import GenerateContentRequest, InlineMedia

__all__ = ["GeminiAPIError", "GeminiClient", "GenerateContentRequest", "InlineMedia"]

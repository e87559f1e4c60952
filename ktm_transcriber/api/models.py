"""Gemini generateContent request and response dataclasses.

WHY: The REST API exchanges nested JSON (contents -> parts -> text or
inline_data). Typed dataclasses make the handful of fields we use
explicit and keep dict-walking out of the client.

HOW: InlineMedia and GenerateContentRequest build the request body via
to_dict(). GenerateContentResponse.from_dict() pulls the text parts of
the first candidate. ErrorBody.from_dict() extracts the message from
an error payload.

RULES:
- Media travels base64-encoded in inline_data.data
- Response text is the concatenation of the first candidate's text parts
- A response with no candidates or no text parts yields ""
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class InlineMedia:
    """Base64-encoded media part sent alongside the prompt."""

    mime_type: str
    data: str

    @classmethod
    def from_bytes(cls, content: bytes, mime_type: str) -> InlineMedia:
        return cls(
            mime_type=mime_type,
            data=base64.b64encode(content).decode("ascii"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"inline_data": {"mime_type": self.mime_type, "data": self.data}}


@dataclass
class GenerateContentRequest:
    prompt: str
    media: InlineMedia

    def to_dict(self) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": self.prompt},
                        self.media.to_dict(),
                    ]
                }
            ]
        }


@dataclass
class GenerateContentResponse:
    """Text returned by generateContent.

    RULES:
    - text joins every text part of the first candidate, in order
    - finish_reason is kept for logging; it is not interpreted
    """

    text: str
    finish_reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GenerateContentResponse:
        candidates: List[Dict[str, Any]] = data.get("candidates") or []
        if not candidates:
            return cls(text="")

        first = candidates[0]
        parts = (first.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        return cls(text=text, finish_reason=first.get("finishReason"))


@dataclass
class ErrorBody:
    """The {"error": {...}} object Gemini returns on non-2xx responses."""

    code: Optional[int]
    message: str
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional[ErrorBody]:
        if not isinstance(data, dict) or not isinstance(data.get("error"), dict):
            return None
        error = data["error"]
        return cls(
            code=error.get("code"),
            message=str(error.get("message", "")),
            status=error.get("status"),
        )

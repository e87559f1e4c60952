"""Transcription settings record.

WHY: Every option the user can change (language, model, diarization,
punctuation, summary, timestamps, profanity filter, custom vocabulary)
travels together from the input view to the prompt compiler and the
service. A single frozen record keeps that hand-off explicit.

HOW: A frozen pydantic model with a default for every field. Changes go
through with_option(), which returns a new instance, so holders of the
old value never see it change underneath them.

RULES:
- Always fully populated; there are no optional fields
- Never mutated in place (frozen model raises on assignment)
- model is any string; unsupported names fall back at call time
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """User-selected transcription options."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    language: str = Field(
        default="en-US",
        description="BCP-47 code of the primary spoken language.",
    )
    model: str = Field(
        default="gemini-2.5-flash",
        description="Model identifier chosen in the picker.",
    )
    enable_diarization: bool = Field(
        default=True,
        description="Label transcript segments by speaker.",
    )
    enable_punctuation: bool = Field(
        default=True,
        description="Ask for punctuation; when off, ask for none.",
    )
    enable_summarization: bool = Field(
        default=False,
        description="Append a summary section after the transcript.",
    )
    add_timestamps: bool = Field(
        default=False,
        description="Insert [HH:MM:SS] markers.",
    )
    filter_profanity: bool = Field(
        default=True,
        description="Censor profanity with asterisks.",
    )
    custom_vocabulary: str = Field(
        default="",
        description="Free-text names, acronyms, or jargon to recognize.",
    )

    def with_option(self, name: str, value: Any) -> Settings:
        """Return a copy with one field replaced.

        Raises KeyError for unknown field names so typos in view wiring
        surface immediately. The copy is validated strictly, so a
        mistyped value (the string "false" for a flag, None for the
        language) raises pydantic.ValidationError.
        """
        if name not in type(self).model_fields:
            raise KeyError("Unknown setting: {}".format(name))
        data = self.model_dump()
        data[name] = value
        return type(self).model_validate(data, strict=True)


DEFAULT_SETTINGS = Settings()

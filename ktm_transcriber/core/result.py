"""Transcription outcomes and the result record shown to the user.

WHY: A transcription attempt either produces text or fails for a known
reason. The service reports this as a tagged outcome; the controller
turns it into the single TranscriptionResult the result view renders,
so success and every failure path share one shape.

HOW: Success and Failure are frozen dataclasses. TranscriptionResult is
built from an outcome; an escaped exception first becomes
Failure(UNEXPECTED). to_text() and outcome_from_text() keep the
"Transcription Failed:" string contract for callers that still exchange
plain strings, and the kind survives the trip.

RULES:
- FAILURE_MARKER is the fixed prefix of every failure rendered as text
- A TranscriptionResult is created once per attempt and never changed
- Failure titles are always "Transcription Failed"
- UNEXPECTED failures show the bare exception text as the transcript
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

FAILURE_MARKER = "Transcription Failed:"
SUCCESS_TITLE = "Transcription Successful"
FAILURE_TITLE = "Transcription Failed"
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."

INVALID_KEY_PREFIX = "Invalid API Key"
INVALID_KEY_MESSAGE = (
    INVALID_KEY_PREFIX + ". Please ensure your API key is configured correctly."
)
GENERIC_FAILURE_PREFIX = "An unexpected error occurred."
GENERIC_FAILURE_MESSAGE = GENERIC_FAILURE_PREFIX + " Details: {}"


class FailureKind(str, enum.Enum):
    """Why a transcription attempt failed."""

    INVALID_API_KEY = "invalid_api_key"
    API_ERROR = "api_error"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Success:
    text: str

    def to_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str

    def to_text(self) -> str:
        return "{} {}".format(FAILURE_MARKER, self.message)

    @classmethod
    def from_exception(cls, exc: BaseException) -> Failure:
        return cls(FailureKind.UNEXPECTED, str(exc) or UNKNOWN_ERROR_MESSAGE)


TranscriptionOutcome = Union[Success, Failure]


def _kind_for_message(message: str) -> FailureKind:
    if message.startswith(INVALID_KEY_PREFIX):
        return FailureKind.INVALID_API_KEY
    if message.startswith(GENERIC_FAILURE_PREFIX):
        return FailureKind.API_ERROR
    return FailureKind.UNEXPECTED


def outcome_from_text(text: str) -> TranscriptionOutcome:
    """Classify a plain-string response by its leading failure marker.

    The failure kind is recovered from the message wording, so
    outcome_from_text(outcome.to_text()) == outcome for every outcome the
    service and controller produce.
    """
    if text.startswith(FAILURE_MARKER):
        message = text[len(FAILURE_MARKER):].strip()
        return Failure(_kind_for_message(message), message)
    return Success(text)


class TranscriptionStatus(str, enum.Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass(frozen=True)
class TranscriptionResult:
    """What the result view displays for one attempt."""

    status: TranscriptionStatus
    title: str
    transcript: str

    @property
    def is_success(self) -> bool:
        return self.status is TranscriptionStatus.SUCCESS

    @classmethod
    def from_outcome(cls, outcome: TranscriptionOutcome) -> TranscriptionResult:
        if isinstance(outcome, Failure):
            if outcome.kind is FailureKind.UNEXPECTED:
                transcript = outcome.message
            else:
                transcript = outcome.to_text()
            return cls(
                status=TranscriptionStatus.FAILURE,
                title=FAILURE_TITLE,
                transcript=transcript,
            )
        return cls(
            status=TranscriptionStatus.SUCCESS,
            title=SUCCESS_TITLE,
            transcript=outcome.text,
        )

    @classmethod
    def from_exception(cls, exc: BaseException) -> TranscriptionResult:
        return cls.from_outcome(Failure.from_exception(exc))

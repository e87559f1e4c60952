"""Screen controller: the Main -> Loading -> Result state machine.

WHY: Which view is visible, which source is in flight, and which result
is on screen must change together. Putting those transitions in one
toolkit-independent class lets the GUI stay thin and lets tests drive
the whole flow with a fake service.

HOW: submit() moves to LOADING synchronously and records the source.
transcribe() awaits the service and always produces a
TranscriptionResult, converting escaped exceptions into a failure.
complete() stores the result and moves to RESULT. run() chains all
three for callers that own an event loop. The GUI instead calls
transcribe() on a worker thread and complete() back on the main thread.

RULES:
- MAIN --submit--> LOADING --complete--> RESULT --go_back/again--> MAIN
- No other transitions; illegal ones raise InvalidTransitionError
- go_back() and transcribe_again() are no-ops when already in MAIN
- There is no cancellation and no timeout
- Settings are replaced wholesale via update_settings()
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Optional

from ktm_transcriber.core.result import TranscriptionResult
from ktm_transcriber.core.settings import DEFAULT_SETTINGS, Settings
from ktm_transcriber.core.source import TranscriptionSource
from ktm_transcriber.service import TranscriptionService

logger = logging.getLogger(__name__)


class ScreenState(str, enum.Enum):
    MAIN = "MAIN"
    LOADING = "LOADING"
    RESULT = "RESULT"


class InvalidTransitionError(RuntimeError):
    """Raised when an action is not allowed from the current screen."""


class ScreenController:
    """Owns the active screen, settings, in-flight source, and last result."""

    def __init__(
        self,
        service: TranscriptionService,
        settings: Settings = DEFAULT_SETTINGS,
        on_change: Optional[Callable[[ScreenState], None]] = None,
    ) -> None:
        self._service = service
        self._on_change = on_change
        self.screen = ScreenState.MAIN
        self.settings = settings
        self.source: Optional[TranscriptionSource] = None
        self.result: Optional[TranscriptionResult] = None

    def _move_to(self, screen: ScreenState) -> None:
        logger.debug("Screen %s -> %s", self.screen.value, screen.value)
        self.screen = screen
        if self._on_change:
            self._on_change(screen)

    def _require(self, expected: ScreenState, action: str) -> None:
        if self.screen is not expected:
            raise InvalidTransitionError(
                "Cannot {} from {} (expected {})".format(
                    action, self.screen.value, expected.value
                )
            )

    def update_settings(self, settings: Settings) -> None:
        self.settings = settings

    def submit(self, source: TranscriptionSource) -> None:
        self._require(ScreenState.MAIN, "submit")
        self.source = source
        self.result = None
        self._move_to(ScreenState.LOADING)

    async def transcribe(self) -> TranscriptionResult:
        """Run the service for the submitted source; never raises."""
        self._require(ScreenState.LOADING, "transcribe")
        source = self.source
        settings = self.settings
        try:
            outcome = await self._service.transcribe(source, settings)
        except Exception as e:
            logger.exception("Transcription failed unexpectedly")
            return TranscriptionResult.from_exception(e)
        return TranscriptionResult.from_outcome(outcome)

    def complete(self, result: TranscriptionResult) -> None:
        self._require(ScreenState.LOADING, "complete")
        self.result = result
        self._move_to(ScreenState.RESULT)

    async def run(self, source: TranscriptionSource) -> TranscriptionResult:
        self.submit(source)
        result = await self.transcribe()
        self.complete(result)
        return result

    def go_back(self) -> None:
        if self.screen is ScreenState.MAIN:
            return
        self._require(ScreenState.RESULT, "go back")
        self.source = None
        self.result = None
        self._move_to(ScreenState.MAIN)

    def transcribe_again(self) -> None:
        self.go_back()

"""Cosmetic loading animation as a pure function of elapsed time.

WHY: Gemini gives no progress information for a single generateContent
call, but a frozen screen looks broken. The loading view cycles status
phrases and fills a progress bar on a fixed schedule instead.

HOW: message_at() and progress_at() map elapsed seconds to what should
be on screen. LoadingTicker remembers when loading started and reads an
injectable clock, so the view only has to poll it from .after() and tests
can drive it with a fake clock.

RULES:
- Messages advance every 2.5 s and wrap around
- Progress rises linearly to 90% over 30 s and then holds at 90%
- Nothing here knows whether the transcription has finished
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Tuple

LOADING_MESSAGES: List[str] = [
    "Warming up the AI model...",
    "Analyzing audio patterns...",
    "Converting speech to text...",
    "Applying punctuation and formatting...",
    "Finalizing the transcript...",
    "Almost there, Gemini is thinking hard!",
]

MESSAGE_INTERVAL_S = 2.5
PROGRESS_DURATION_S = 30.0
PROGRESS_CAP = 90.0


def message_at(elapsed_s: float) -> str:
    if elapsed_s < 0:
        elapsed_s = 0.0
    index = int(elapsed_s // MESSAGE_INTERVAL_S) % len(LOADING_MESSAGES)
    return LOADING_MESSAGES[index]


def progress_at(elapsed_s: float) -> float:
    """Percent complete to display, never above PROGRESS_CAP."""
    if elapsed_s <= 0:
        return 0.0
    return min(PROGRESS_CAP, elapsed_s / PROGRESS_DURATION_S * PROGRESS_CAP)


class LoadingTicker:
    """Tracks one loading period against a monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started_at: Optional[float] = None

    def start(self) -> None:
        self._started_at = self._clock()

    def stop(self) -> None:
        self._started_at = None

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        return self._clock() - self._started_at

    def snapshot(self) -> Tuple[str, float]:
        """Return (status message, progress percent) for right now."""
        elapsed = self.elapsed()
        return message_at(elapsed), progress_at(elapsed)

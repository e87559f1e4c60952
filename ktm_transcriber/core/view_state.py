"""Toolkit-independent state behind the input and result views.

WHY: The rules the views enforce (one source at a time, the 50 MB upload
limit, transient copy feedback) are worth testing without a display.
Keeping them here leaves gui.py with widget wiring only.

HOW: InputState holds the chosen file or URL plus the current error
message. CopyFeedback holds the copy button label and when it should
revert, against an injectable clock.

RULES:
- Selecting a file clears the URL; typing a URL clears the file
- An oversized or non-media file is rejected and leaves no file selected
- Any accepted selection clears the previous error
- A source exists only if exactly one of file/URL is set
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from ktm_transcriber.config import MAX_FILE_SIZE_BYTES, MAX_FILE_SIZE_MB
from ktm_transcriber.core.source import (
    FileSource,
    TranscriptionSource,
    UrlSource,
    is_media_type,
)

logger = logging.getLogger(__name__)

COPY_LABEL = "Copy"
COPIED_LABEL = "Copied!"
COPY_FAILED_LABEL = "Failed!"
COPY_FEEDBACK_S = 2.0


class InputState:
    """Source selection and validation for the input view."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE_BYTES) -> None:
        self._max_file_size = max_file_size
        self.file: Optional[FileSource] = None
        self.url: str = ""
        self.error: Optional[str] = None

    def select_file(self, candidate: FileSource) -> bool:
        """Accept candidate as the source, or record why it was rejected."""
        if candidate.size > self._max_file_size:
            self.error = "File is too large. Maximum size is {}MB.".format(
                MAX_FILE_SIZE_MB
            )
            self.file = None
            logger.info("Rejected %s (%d bytes): too large", candidate.name, candidate.size)
            return False

        if not is_media_type(candidate.mime_type):
            self.error = "Unsupported file type ({}). Choose an audio or video file.".format(
                candidate.mime_type
            )
            self.file = None
            logger.info("Rejected %s: type %s", candidate.name, candidate.mime_type)
            return False

        self.error = None
        self.file = candidate
        self.url = ""
        return True

    def select_path(self, path: Path) -> bool:
        """Stat path and select it; unreadable files become an error message."""
        try:
            candidate = FileSource.from_path(path)
        except OSError as e:
            self.error = "Cannot read file: {}".format(e)
            self.file = None
            return False
        return self.select_file(candidate)

    def set_url(self, url: str) -> None:
        self.url = url
        self.file = None
        self.error = None

    def clear(self) -> None:
        self.file = None
        self.url = ""
        self.error = None

    @property
    def can_submit(self) -> bool:
        return self.source() is not None

    def source(self) -> Optional[TranscriptionSource]:
        if self.file is not None:
            return self.file
        url = self.url.strip()
        if url:
            return UrlSource(url)
        return None


class CopyFeedback:
    """Copy button label that reverts to "Copy" after a short delay."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        duration_s: float = COPY_FEEDBACK_S,
    ) -> None:
        self._clock = clock
        self._duration_s = duration_s
        self._label = COPY_LABEL
        self._revert_at: Optional[float] = None

    def record(self, succeeded: bool) -> str:
        self._label = COPIED_LABEL if succeeded else COPY_FAILED_LABEL
        self._revert_at = self._clock() + self._duration_s
        return self._label

    @property
    def label(self) -> str:
        if self._revert_at is not None and self._clock() >= self._revert_at:
            self._label = COPY_LABEL
            self._revert_at = None
        return self._label

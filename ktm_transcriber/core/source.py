"""What is being transcribed: a local media file or a URL.

RULES:
- FileSource carries the path, MIME type, and size checked at selection
- UrlSource carries the URL exactly as typed (trimmed)
- display_name is what the loading view shows under "Transcribing"
- URLs longer than 60 characters are cut to 57 plus "..."
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ktm_transcriber.config import MEDIA_MIME_TYPES

_URL_DISPLAY_LIMIT = 60
_URL_DISPLAY_PREFIX = 57


@dataclass(frozen=True)
class FileSource:
    path: Path
    mime_type: str
    size: int

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def display_name(self) -> str:
        return "File: {}".format(self.name)

    @classmethod
    def from_path(cls, path: Path) -> FileSource:
        """Describe a file on disk; stat() errors propagate to the caller."""
        path = Path(path)
        return cls(
            path=path,
            mime_type=guess_mime_type(path) or "application/octet-stream",
            size=path.stat().st_size,
        )


@dataclass(frozen=True)
class UrlSource:
    url: str

    @property
    def display_name(self) -> str:
        return "From URL: {}".format(truncate_url(self.url))


TranscriptionSource = Union[FileSource, UrlSource]


def truncate_url(url: str) -> str:
    if len(url) > _URL_DISPLAY_LIMIT:
        return url[:_URL_DISPLAY_PREFIX] + "..."
    return url


def guess_mime_type(path: Path) -> Optional[str]:
    known = MEDIA_MIME_TYPES.get(Path(path).suffix.lower())
    if known:
        return known
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type


def is_media_type(mime_type: str) -> bool:
    return mime_type.startswith("audio/") or mime_type.startswith("video/")

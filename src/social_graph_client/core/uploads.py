"""Files attached to requests and resumable upload chunks."""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import GraphFileError

DEFAULT_MIMETYPE = "text/plain"


class UploadFile:
    """A local file sent as a multipart part.

    ``max_length``/``offset`` of ``-1`` mean "whole file" / "from the start".
    The file is opened and closed on every read.
    """

    def __init__(self, path: str | os.PathLike[str], max_length: int = -1, offset: int = -1) -> None:
        self._path = Path(path)
        self._max_length = max_length
        self._offset = offset
        if not self._path.is_file() or not os.access(self._path, os.R_OK):
            raise GraphFileError(f"Failed to create upload file. Unable to read resource: {self._path}.")

    @property
    def path(self) -> str:
        return str(self._path)

    @property
    def file_name(self) -> str:
        return self._path.name

    @property
    def mimetype(self) -> str:
        guessed, _ = mimetypes.guess_type(self._path.name)
        return guessed or DEFAULT_MIMETYPE

    def size(self) -> int:
        return self._path.stat().st_size

    def contents(self) -> bytes:
        try:
            with self._path.open("rb") as handle:
                if self._offset > 0:
                    handle.seek(self._offset)
                if self._max_length >= 0:
                    return handle.read(self._max_length)
                return handle.read()
        except OSError as exc:
            raise GraphFileError(f"Unable to read resource: {self._path}.") from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"


class VideoFile(UploadFile):
    """An upload routed to the video host."""


@dataclass(slots=True, frozen=True)
class TransferChunk:
    file: UploadFile
    upload_session_id: int
    video_id: int
    start_offset: int
    end_offset: int

    def is_last_chunk(self) -> bool:
        return self.start_offset == self.end_offset

    def partial_file(self) -> UploadFile:
        # Same kind as the source file, so video chunks keep the video host.
        return type(self.file)(
            self.file.path,
            max_length=self.end_offset - self.start_offset,
            offset=self.start_offset,
        )


__all__ = [
    "DEFAULT_MIMETYPE",
    "UploadFile",
    "VideoFile",
    "TransferChunk",
]

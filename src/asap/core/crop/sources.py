"""Image payloads consumed and produced by the crop engine."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from ...config import DEFAULT_SOURCE_MIME

NO_IMAGE_IDENTITY = "no-image"


@dataclass(frozen=True)
class LocalFileSource:
    """A file picked by the user, held in memory until submission."""

    name: str
    size: int
    last_modified: int
    """Modification time in integer milliseconds since the epoch."""

    data: bytes = field(repr=False)
    mime_type: str = ""

    @classmethod
    def from_path(cls, path: Path) -> "LocalFileSource":
        path = Path(path)
        stat = path.stat()
        data = path.read_bytes()
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            size=len(data),
            last_modified=int(stat.st_mtime * 1000),
            data=data,
            mime_type=guessed or "",
        )

    @property
    def effective_mime_type(self) -> str:
        return self.mime_type or DEFAULT_SOURCE_MIME

    def identity(self) -> str:
        return f"{self.name}|{self.size}|{self.last_modified}"


@dataclass(frozen=True)
class RemoteUrlSource:
    """An image previously stored for a project and fetched on demand."""

    url: str

    def identity(self) -> str:
        return self.url


ImageSource = Union[LocalFileSource, RemoteUrlSource]


def source_identity(source: ImageSource | None) -> str:
    """Return the cache identity of *source*."""

    if source is None:
        return NO_IMAGE_IDENTITY
    return source.identity()


@dataclass(frozen=True)
class ImageBlob:
    """A named, encoded image ready to hand to the upload flow."""

    name: str
    data: bytes = field(repr=False)
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_local_file(cls, source: LocalFileSource) -> "ImageBlob":
        return cls(name=source.name, data=source.data, mime_type=source.effective_mime_type)

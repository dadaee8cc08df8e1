"""Storage paths for uploaded project images."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from ..config import (
    FALLBACK_FILE_EXTENSION,
    PROJECT_IMAGES_BUCKET,
    PROJECT_IMAGES_PREFIX,
    UPLOAD_CACHE_CONTROL_SEC,
)
from ..core.crop.sources import ImageBlob


@dataclass(frozen=True)
class UploadRequest:
    """Everything the storage client needs to put one project image."""

    bucket: str
    path: str
    data: bytes = field(repr=False)
    content_type: str
    cache_control: str
    upsert: bool = False


def extract_file_extension(filename: str) -> str:
    """Return the text after the last dot, or ``dat`` when there is none."""

    parts = filename.split(".")
    if len(parts) > 1:
        return parts[-1] or FALLBACK_FILE_EXTENSION
    return FALLBACK_FILE_EXTENSION


def generate_file_name(extension: str) -> str:
    return f"{uuid.uuid4()}.{extension}"


def build_storage_path(user_id: str, filename: str) -> str:
    """Return ``projects/<user_id>/<random>.<ext>`` for an upload of *filename*."""

    if not user_id:
        raise ValueError("Authentication required")
    return f"{PROJECT_IMAGES_PREFIX}/{user_id}/{generate_file_name(extract_file_extension(filename))}"


def build_upload_request(user_id: str, blob: ImageBlob) -> UploadRequest:
    """Describe the upload of *blob*, typically the output of a crop submit."""

    return UploadRequest(
        bucket=PROJECT_IMAGES_BUCKET,
        path=build_storage_path(user_id, blob.name),
        data=blob.data,
        content_type=blob.mime_type,
        cache_control=str(UPLOAD_CACHE_CONTROL_SEC),
    )

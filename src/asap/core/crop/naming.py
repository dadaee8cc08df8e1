"""Output format selection and file naming for cropped images."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from ...config import (
    CROPPED_NAME_SUFFIX,
    FALLBACK_IMAGE_NAME,
    JPEG_QUALITY,
    SUPPORTED_OUTPUT_MIME_TYPES,
)

_EXTENSION_PATTERN = re.compile(r"\.[^/.]+$")

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

_PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
}


@dataclass(frozen=True)
class OutputFormat:
    """Encoding chosen for a cropped image."""

    mime_type: str
    pil_format: str
    extension: str
    quality: float | None = None


def derive_extension_from_mime(mime_type: str) -> str:
    return _EXTENSIONS.get(mime_type.strip().lower(), "png")


def resolve_output_format(original_mime: str | None, *, jpeg_quality: float = JPEG_QUALITY) -> OutputFormat:
    """Keep the source format when it is safe to re-encode, otherwise PNG."""

    normalised = (original_mime or "").split(";", 1)[0].strip().lower()
    if normalised == "image/jpg":
        normalised = "image/jpeg"
    if normalised not in SUPPORTED_OUTPUT_MIME_TYPES:
        normalised = "image/png"
    quality = jpeg_quality if normalised == "image/jpeg" else None
    return OutputFormat(
        mime_type=normalised,
        pil_format=_PIL_FORMATS[normalised],
        extension=derive_extension_from_mime(normalised),
        quality=quality,
    )


def strip_extension(name: str) -> str:
    return _EXTENSION_PATTERN.sub("", name)


def build_cropped_file_name(original_name: str, mime_type: str) -> str:
    """Return ``<base>-square.<ext>`` without doubling an existing suffix."""

    extension = derive_extension_from_mime(mime_type)
    base = strip_extension(original_name)
    suffix = "" if base.endswith(CROPPED_NAME_SUFFIX) else CROPPED_NAME_SUFFIX
    return f"{base}{suffix}.{extension}"


def infer_name_from_url(url: str, mime_type: str) -> str:
    """Derive a cropped file name from the last path segment of *url*."""

    try:
        path = urlsplit(url).path
    except ValueError:
        return build_cropped_file_name(FALLBACK_IMAGE_NAME, mime_type)
    last_segment = path.rsplit("/", 1)[-1] or FALLBACK_IMAGE_NAME
    if "." not in last_segment:
        last_segment = f"{last_segment}.{derive_extension_from_mime(mime_type)}"
    return build_cropped_file_name(last_segment, mime_type)

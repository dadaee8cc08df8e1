"""Signature-keyed single-slot cache for rasterized crops."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from ...config import SIGNATURE_PRECISION
from .geometry import clamp_zoom, ensure_crop_position
from .sources import ImageBlob, ImageSource, source_identity


def build_crop_signature(source: ImageSource | None, position: Any, zoom: Any) -> str:
    """Return the deterministic cache key for a (source, crop, zoom) triple."""

    crop = ensure_crop_position(position)
    normalised_zoom = clamp_zoom(zoom, maximum=math.inf)
    digits = SIGNATURE_PRECISION
    return (
        f"{source_identity(source)}|{crop.x_percent:.{digits}f}|"
        f"{crop.y_percent:.{digits}f}|{normalised_zoom:.{digits}f}"
    )


@dataclass(frozen=True)
class CropCacheEntry:
    signature: str
    output: ImageBlob


class CropCache:
    """Hold at most one rasterized output; a new signature evicts the old one."""

    def __init__(self) -> None:
        self._entry: CropCacheEntry | None = None

    @property
    def entry(self) -> CropCacheEntry | None:
        return self._entry

    def lookup(self, signature: str) -> ImageBlob | None:
        entry = self._entry
        if entry is None or entry.signature != signature:
            return None
        return entry.output

    def store(self, signature: str, output: ImageBlob) -> None:
        self._entry = CropCacheEntry(signature, output)

    def clear(self) -> None:
        self._entry = None

    def __bool__(self) -> bool:
        return self._entry is not None

"""
Square crop rasterization.

Resolves an :class:`~.sources.ImageSource` to bytes, decodes it through a
:class:`~.backends.CropBackend` and renders the region selected by the crop
state into a square image at the source's native short-side resolution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...config import JPEG_QUALITY
from ...errors import DecodeError
from ...io.fetcher import ImageFetcher
from .backends import CropBackend, PillowCropBackend
from .geometry import CropPosition, SquareCropPlan, ensure_crop_position, plan_square_crop
from .naming import build_cropped_file_name, infer_name_from_url, resolve_output_format
from .sources import ImageBlob, ImageSource, LocalFileSource, RemoteUrlSource

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedSource:
    """Raw bytes of a source together with the name and type used for output."""

    data: bytes = field(repr=False)
    name: str
    mime_type: str


class Rasterizer:
    """Produce square crops from image sources."""

    def __init__(
        self,
        backend: CropBackend | None = None,
        fetcher: ImageFetcher | None = None,
        *,
        jpeg_quality: float = JPEG_QUALITY,
    ) -> None:
        self._backend = backend or PillowCropBackend()
        self._fetcher = fetcher or ImageFetcher()
        self._jpeg_quality = jpeg_quality

    @property
    def backend(self) -> CropBackend:
        return self._backend

    @property
    def fetcher(self) -> ImageFetcher:
        return self._fetcher

    def resolve_source(self, source: ImageSource) -> ResolvedSource:
        """Return the bytes behind *source*, fetching remote URLs.

        Raises
        ------
        FetchError:
            When a remote source cannot be downloaded.
        """

        if isinstance(source, LocalFileSource):
            return ResolvedSource(
                data=source.data,
                name=source.name,
                mime_type=source.effective_mime_type,
            )
        if isinstance(source, RemoteUrlSource):
            fetched = self._fetcher.fetch(source.url)
            return ResolvedSource(
                data=fetched.data,
                name=infer_name_from_url(source.url, fetched.mime_type),
                mime_type=fetched.mime_type,
            )
        raise TypeError(f"Unsupported image source: {type(source).__name__}")

    def plan(self, width: int, height: int, position: CropPosition, zoom: float) -> SquareCropPlan:
        if width <= 0 or height <= 0:
            raise DecodeError("Selected image is missing size information.")
        return plan_square_crop(width, height, position, zoom)

    def rasterize(self, source: ImageSource, position: CropPosition, zoom: float) -> ImageBlob:
        """Render the square crop of *source* for the given crop state.

        Raises
        ------
        FetchError, DecodeError, RasterizationError:
            All recoverable; callers fall back to the untouched source.
        """

        resolved = self.resolve_source(source)
        crop = ensure_crop_position(position)
        output_format = resolve_output_format(resolved.mime_type, jpeg_quality=self._jpeg_quality)

        with self._backend.decode(resolved.data) as decoded:
            plan = self.plan(decoded.width, decoded.height, crop, zoom)
            payload = self._backend.draw_square_crop(decoded, plan, output_format)

        name = build_cropped_file_name(resolved.name, output_format.mime_type)
        _LOGGER.debug(
            "Cropped %s (%dx%d, zoom %.3f) into %s",
            resolved.name,
            plan.overflow_x + plan.source_side,
            plan.overflow_y + plan.source_side,
            zoom,
            name,
        )
        return ImageBlob(name=name, data=payload, mime_type=output_format.mime_type)

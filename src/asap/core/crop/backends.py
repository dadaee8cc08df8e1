"""Imaging backends that decode sources and draw square crops."""

from __future__ import annotations

import io
import logging
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError

from ...errors import DecodeError, RasterizationError
from .geometry import SquareCropPlan
from .naming import OutputFormat

_LOGGER = logging.getLogger(__name__)


class DecodedImage(ABC):
    """Backend specific handle to a decoded bitmap.

    Handles are context managers so the rasterizer releases the underlying
    buffers on every exit path, including failures while drawing.
    """

    @property
    @abstractmethod
    def width(self) -> int:
        """Native width in pixels after orientation has been applied."""

    @property
    @abstractmethod
    def height(self) -> int:
        """Native height in pixels after orientation has been applied."""

    @abstractmethod
    def dispose(self) -> None:
        """Release resources associated with the handle."""

    def __enter__(self) -> "DecodedImage":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()


class CropBackend(ABC):
    """Capability interface used by :class:`~.rasterizer.Rasterizer`."""

    name: str = "unknown"

    @abstractmethod
    def decode(self, data: bytes) -> DecodedImage:
        """Decode *data*; raise :class:`DecodeError` when it is not an image."""

    @abstractmethod
    def draw_square_crop(
        self,
        image: DecodedImage,
        plan: SquareCropPlan,
        output_format: OutputFormat,
    ) -> bytes:
        """Sample ``plan.source_box`` into a square canvas and encode it."""


@dataclass
class _PillowDecodedImage(DecodedImage):
    image: Image.Image
    _buffer: io.BytesIO | None = field(default=None, repr=False)
    _disposed: bool = False

    @property
    def width(self) -> int:
        return int(self.image.width)

    @property
    def height(self) -> int:
        return int(self.image.height)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self.image.close()
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None


class PillowCropBackend(CropBackend):
    """Decode and rasterize with Pillow."""

    name = "pillow"

    def __init__(self, *, resample: Image.Resampling = Image.Resampling.BILINEAR) -> None:
        self._resample = resample

    def decode(self, data: bytes) -> DecodedImage:
        if not data:
            raise DecodeError("Image data is empty.")
        buffer = io.BytesIO(data)
        opened: Image.Image | None = None
        decoded: _PillowDecodedImage | None = None
        try:
            try:
                with warnings.catch_warnings():
                    # Oversized inputs are rejected below instead of only warned about.
                    warnings.simplefilter("error", Image.DecompressionBombWarning)
                    opened = Image.open(buffer)
                    opened.load()
                # Browsers honour the EXIF orientation when drawing, so the crop
                # geometry is computed on the upright bitmap as well.
                upright = ImageOps.exif_transpose(opened)
            except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as exc:
                raise DecodeError("Unable to read image data for cropping.") from exc
            except (Image.DecompressionBombError, Image.DecompressionBombWarning) as exc:
                raise DecodeError("Image is too large to crop safely.") from exc
            if upright is not opened:
                opened.close()
            decoded = _PillowDecodedImage(upright, buffer)
        finally:
            if decoded is None:
                # Every failed step releases what was opened so far.
                if opened is not None:
                    opened.close()
                buffer.close()

        if decoded.width <= 0 or decoded.height <= 0:
            decoded.dispose()
            raise DecodeError("Selected image is missing size information.")
        return decoded

    def draw_square_crop(
        self,
        image: DecodedImage,
        plan: SquareCropPlan,
        output_format: OutputFormat,
    ) -> bytes:
        if not isinstance(image, _PillowDecodedImage):
            raise RasterizationError(f"{type(image).__name__} was not decoded by Pillow")

        try:
            region = image.image.crop(plan.source_box)
            canvas = region.resize(
                (plan.square_size, plan.square_size),
                resample=self._resample,
            )
            canvas = _prepare_mode(canvas, output_format)
            out = io.BytesIO()
            save_kwargs: dict[str, Any] = {}
            if output_format.quality is not None:
                save_kwargs["quality"] = int(round(output_format.quality * 100))
            canvas.save(out, format=output_format.pil_format, **save_kwargs)
        except (OSError, ValueError, KeyError) as exc:
            raise RasterizationError("Failed to produce cropped image data.") from exc

        payload = out.getvalue()
        if not payload:
            raise RasterizationError("Failed to produce cropped image data.")
        _LOGGER.debug(
            "Rendered %dx%d %s crop from %s",
            plan.square_size,
            plan.square_size,
            output_format.pil_format,
            plan.source_box,
        )
        return payload


def _prepare_mode(image: Image.Image, output_format: OutputFormat) -> Image.Image:
    """Convert *image* into a mode the target encoder accepts."""

    if output_format.pil_format == "JPEG":
        if image.mode in ("RGB", "L"):
            return image
        if "A" in image.getbands() or image.mode == "P":
            # Canvas exports flatten transparency onto black for JPEG.
            rgba = image.convert("RGBA")
            flattened = Image.new("RGB", rgba.size, (0, 0, 0))
            flattened.paste(rgba, mask=rgba.getchannel("A"))
            return flattened
        return image.convert("RGB")
    if output_format.pil_format == "PNG" and image.mode in ("RGB", "RGBA", "L", "LA"):
        return image
    if image.mode in ("RGB", "RGBA"):
        return image
    return image.convert("RGBA")

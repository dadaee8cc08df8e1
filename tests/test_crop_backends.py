"""Tests for the Pillow crop backend."""

import io
from unittest.mock import MagicMock

import numpy as np
import pytest
from PIL import Image, ImageOps

from asap.core.crop.backends import DecodedImage, PillowCropBackend
from asap.core.crop.geometry import CropPosition, plan_square_crop
from asap.core.crop.naming import resolve_output_format
from asap.errors import DecodeError, RasterizationError
from conftest import encode_image


@pytest.fixture
def backend():
    return PillowCropBackend()


def test_decode_reports_dimensions(backend, png_bytes):
    with backend.decode(png_bytes) as decoded:
        assert (decoded.width, decoded.height) == (1000, 800)


def test_decode_rejects_garbage(backend, corrupt_bytes):
    with pytest.raises(DecodeError):
        backend.decode(corrupt_bytes)


def test_decode_rejects_empty_payload(backend):
    with pytest.raises(DecodeError):
        backend.decode(b"")


def test_decode_applies_exif_orientation(backend):
    image = Image.new("RGB", (40, 20), (10, 20, 30))
    exif = Image.Exif()
    exif[0x0112] = 6  # Rotate 90 CW when displayed
    data = encode_image(image, "JPEG", exif=exif.tobytes())
    with backend.decode(data) as decoded:
        assert (decoded.width, decoded.height) == (20, 40)


def test_dispose_is_idempotent(backend, png_bytes):
    decoded = backend.decode(png_bytes)
    decoded.dispose()
    decoded.dispose()


def test_jpeg_output_flattens_transparency_onto_black(backend):
    image = Image.new("RGBA", (10, 10), (255, 255, 255, 0))
    with backend.decode(encode_image(image)) as decoded:
        plan = plan_square_crop(decoded.width, decoded.height, CropPosition(), 1.0)
        payload = backend.draw_square_crop(decoded, plan, resolve_output_format("image/jpeg"))

    with Image.open(io.BytesIO(payload)) as result:
        assert result.format == "JPEG"
        assert result.mode == "RGB"
        pixels = np.asarray(result)
    assert pixels.max() < 16


def test_png_output_keeps_alpha(backend):
    image = Image.new("RGBA", (12, 6), (0, 128, 255, 100))
    with backend.decode(encode_image(image)) as decoded:
        plan = plan_square_crop(decoded.width, decoded.height, CropPosition(), 1.0)
        payload = backend.draw_square_crop(decoded, plan, resolve_output_format("image/png"))

    with Image.open(io.BytesIO(payload)) as result:
        assert result.mode == "RGBA"
        assert result.size == (6, 6)
        assert result.getpixel((3, 3))[3] == 100


def test_palette_source_is_converted_for_webp(backend):
    image = Image.new("P", (8, 4))
    with backend.decode(encode_image(image, "GIF")) as decoded:
        plan = plan_square_crop(decoded.width, decoded.height, CropPosition(), 1.0)
        payload = backend.draw_square_crop(decoded, plan, resolve_output_format("image/webp"))

    with Image.open(io.BytesIO(payload)) as result:
        assert result.format == "WEBP"
        assert result.size == (4, 4)


def test_failed_orientation_closes_opened_image(backend, jpeg_bytes, monkeypatch):
    real_open = Image.open
    opened = []

    def recording_open(fp, *args, **kwargs):
        image = real_open(fp, *args, **kwargs)
        image.close = MagicMock(wraps=image.close)
        opened.append(image)
        return image

    def broken_transpose(image):
        raise ValueError("bad orientation tag")

    monkeypatch.setattr(Image, "open", recording_open)
    monkeypatch.setattr(ImageOps, "exif_transpose", broken_transpose)

    with pytest.raises(DecodeError):
        backend.decode(jpeg_bytes)
    assert len(opened) == 1
    assert opened[0].close.called


class _ForeignImage(DecodedImage):
    width = 10
    height = 10

    def dispose(self):
        pass


def test_draw_rejects_foreign_handles(backend):
    plan = plan_square_crop(10, 10, CropPosition(), 1.0)
    with pytest.raises(RasterizationError):
        backend.draw_square_crop(_ForeignImage(), plan, resolve_output_format("image/png"))


def test_encoder_failure_raises_rasterization_error(backend, png_bytes, monkeypatch):
    def broken_save(self, fp, format=None, **params):
        raise OSError("encoder unavailable")

    with backend.decode(png_bytes) as decoded:
        plan = plan_square_crop(decoded.width, decoded.height, CropPosition(), 1.0)
        monkeypatch.setattr(Image.Image, "save", broken_save)
        with pytest.raises(RasterizationError):
            backend.draw_square_crop(decoded, plan, resolve_output_format("image/png"))

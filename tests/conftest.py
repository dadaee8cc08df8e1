import io
import os
import sys
from pathlib import Path

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Widgets and workers are exercised without a display server.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

QUADRANT_COLOURS = {
    "top_left": (255, 0, 0),
    "top_right": (0, 255, 0),
    "bottom_left": (0, 0, 255),
    "bottom_right": (255, 255, 0),
}


def encode_image(image: Image.Image, fmt: str = "PNG", **kwargs) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **kwargs)
    return buffer.getvalue()


def make_quadrant_image(width: int, height: int, mode: str = "RGB") -> Image.Image:
    """Return an image split into four solid colour quadrants."""
    image = Image.new(mode, (width, height))
    half_w, half_h = width // 2, height // 2
    boxes = {
        "top_left": (0, 0, half_w, half_h),
        "top_right": (half_w, 0, width, half_h),
        "bottom_left": (0, half_h, half_w, height),
        "bottom_right": (half_w, half_h, width, height),
    }
    for key, box in boxes.items():
        colour = QUADRANT_COLOURS[key]
        if mode == "RGBA":
            colour = colour + (255,)
        image.paste(colour, box)
    return image


@pytest.fixture
def png_bytes():
    return encode_image(make_quadrant_image(1000, 800))


@pytest.fixture
def jpeg_bytes():
    return encode_image(make_quadrant_image(600, 400), "JPEG", quality=95)


@pytest.fixture
def corrupt_bytes():
    return b"\x89PNG\r\n\x1a\nthis is not really an image"

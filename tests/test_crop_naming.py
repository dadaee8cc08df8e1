"""Tests for output format selection and cropped file names."""

import pytest

from asap.core.crop.naming import (
    build_cropped_file_name,
    infer_name_from_url,
    resolve_output_format,
)


@pytest.mark.parametrize(
    "mime, expected",
    [
        ("image/png", "image/png"),
        ("image/jpeg", "image/jpeg"),
        ("image/jpg", "image/jpeg"),
        ("IMAGE/WEBP", "image/webp"),
        ("image/gif", "image/png"),
        ("image/heic", "image/png"),
        ("", "image/png"),
        (None, "image/png"),
        ("image/jpeg; charset=binary", "image/jpeg"),
    ],
)
def test_resolve_output_format(mime, expected):
    assert resolve_output_format(mime).mime_type == expected


def test_jpeg_keeps_quality():
    fmt = resolve_output_format("image/jpeg")
    assert fmt.pil_format == "JPEG"
    assert fmt.quality == pytest.approx(0.92)
    assert resolve_output_format("image/png").quality is None


@pytest.mark.parametrize(
    "name, mime, expected",
    [
        ("photo.jpg", "image/jpeg", "photo-square.jpg"),
        ("photo.jpeg", "image/jpeg", "photo-square.jpg"),
        ("photo-square.png", "image/png", "photo-square.png"),
        ("anim.gif", "image/png", "anim-square.png"),
        ("noext", "image/webp", "noext-square.webp"),
        ("archive.tar.png", "image/png", "archive.tar-square.png"),
    ],
)
def test_build_cropped_file_name(name, mime, expected):
    assert build_cropped_file_name(name, mime) == expected


def test_infer_name_from_url():
    assert (
        infer_name_from_url("https://cdn.example.com/projects/u1/cover.jpg?token=1", "image/jpeg")
        == "cover-square.jpg"
    )
    assert infer_name_from_url("https://cdn.example.com/", "image/png") == "project-image-square.png"
    assert infer_name_from_url("https://cdn.example.com/blob", "image/webp") == "blob-square.webp"

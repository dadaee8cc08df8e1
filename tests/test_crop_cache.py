"""Tests for crop signatures and the single-slot output cache."""

from asap.core.crop.cache import CropCache, build_crop_signature
from asap.core.crop.geometry import CropPosition
from asap.core.crop.sources import ImageBlob, LocalFileSource, RemoteUrlSource


def _local(name="cover.png", size=4, modified=1700000000000):
    return LocalFileSource(name=name, size=size, last_modified=modified, data=b"\0" * size)


def test_signature_format_for_local_file():
    signature = build_crop_signature(_local(), CropPosition(12.34567, 50), 2)
    assert signature == "cover.png|4|1700000000000|12.346|50.000|2.000"


def test_signature_for_url_and_missing_source():
    url = "https://cdn.example.com/a.png"
    assert build_crop_signature(RemoteUrlSource(url), None, 1).startswith(url + "|50.000|50.000|")
    assert build_crop_signature(None, None, 1) == "no-image|50.000|50.000|1.000"


def test_signature_normalises_inputs():
    assert build_crop_signature(None, (150, -2), float("nan")) == "no-image|100.000|0.000|1.000"


def test_signature_ignores_sub_precision_noise():
    first = build_crop_signature(_local(), CropPosition(10.0001, 20), 1.0)
    second = build_crop_signature(_local(), CropPosition(10.0002, 20), 1.0)
    assert first == second


def test_signature_changes_with_file_identity():
    assert build_crop_signature(_local(modified=1), None, 1) != build_crop_signature(
        _local(modified=2), None, 1
    )


def test_cache_holds_single_entry():
    cache = CropCache()
    first = ImageBlob("a-square.png", b"a", "image/png")
    second = ImageBlob("b-square.png", b"b", "image/png")
    assert not cache

    cache.store("sig-a", first)
    assert cache.lookup("sig-a") is first
    assert cache.lookup("sig-b") is None

    cache.store("sig-b", second)
    assert cache.lookup("sig-a") is None
    assert cache.lookup("sig-b") is second

    cache.clear()
    assert cache.entry is None
    assert not cache

"""Tests for remote image retrieval."""

import httpx
import pytest

from asap.errors import CropError, FetchError
from asap.io.fetcher import ImageFetcher


def _fetcher(handler):
    return ImageFetcher(transport=httpx.MockTransport(handler))


def test_fetch_returns_body_and_mime():
    def handler(request):
        assert request.url.path == "/cover.jpg"
        return httpx.Response(200, content=b"jpeg-bytes", headers={"content-type": "image/JPEG; q=1"})

    fetched = _fetcher(handler).fetch("https://cdn.example.com/cover.jpg")
    assert fetched.data == b"jpeg-bytes"
    assert fetched.mime_type == "image/jpeg"


def test_missing_content_type_defaults_to_png():
    fetched = _fetcher(lambda request: httpx.Response(200, content=b"x")).fetch(
        "https://cdn.example.com/blob"
    )
    assert fetched.mime_type == "image/png"


def test_http_error_status_raises_fetch_error():
    with pytest.raises(FetchError) as excinfo:
        _fetcher(lambda request: httpx.Response(404)).fetch("https://cdn.example.com/gone.png")
    assert excinfo.value.status_code == 404
    assert excinfo.value.url == "https://cdn.example.com/gone.png"
    assert isinstance(excinfo.value, CropError)


def test_transport_error_raises_fetch_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError) as excinfo:
        _fetcher(handler).fetch("https://cdn.example.com/cover.png")
    assert excinfo.value.status_code is None


def test_redirects_are_followed():
    def handler(request):
        if request.url.path == "/old.png":
            return httpx.Response(302, headers={"location": "https://cdn.example.com/new.png"})
        return httpx.Response(200, content=b"new", headers={"content-type": "image/png"})

    assert _fetcher(handler).fetch("https://cdn.example.com/old.png").data == b"new"

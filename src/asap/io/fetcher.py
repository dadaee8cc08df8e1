"""Retrieve remote image sources over HTTP."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from ..config import DEFAULT_SOURCE_MIME, FETCH_TIMEOUT_SEC
from ..errors import FetchError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedImage:
    url: str
    data: bytes = field(repr=False)
    mime_type: str


class ImageFetcher:
    """Download image bytes with a single attempt per call.

    ``transport`` allows tests (and embedding applications) to route requests
    through a custom :class:`httpx.BaseTransport` such as
    :class:`httpx.MockTransport`.
    """

    def __init__(
        self,
        *,
        timeout: float = FETCH_TIMEOUT_SEC,
        transport: httpx.BaseTransport | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._headers = dict(headers or {})

    def fetch(self, url: str) -> FetchedImage:
        """Return the body of *url*; non-2xx replies raise :class:`FetchError`."""

        try:
            with httpx.Client(
                timeout=self._timeout,
                transport=self._transport,
                headers=self._headers,
                follow_redirects=True,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
                data = response.content
                content_type = response.headers.get("content-type", "")
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            LOGGER.warning("Image fetch for %s failed with status %s", url, status)
            raise FetchError(
                f"Unable to fetch image for cropping (status {status}).",
                url=url,
                status_code=status,
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            LOGGER.warning("Image fetch for %s failed: %s", url, exc)
            raise FetchError(f"Unable to fetch image for cropping ({exc}).", url=url) from exc

        mime_type = content_type.split(";", 1)[0].strip().lower() or DEFAULT_SOURCE_MIME
        return FetchedImage(url=url, data=data, mime_type=mime_type)

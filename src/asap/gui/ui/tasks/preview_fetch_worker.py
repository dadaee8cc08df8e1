"""Worker that downloads remote preview images on a background thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from ....errors import FetchError
from ....io.fetcher import ImageFetcher

LOGGER = logging.getLogger(__name__)


class PreviewFetchSignals(QObject):
    """Signals emitted by :class:`PreviewFetchWorker`."""

    loaded = Signal(str, object)
    """Emitted with the URL and the downloaded bytes."""

    failed = Signal(str, str)


class PreviewFetchWorker(QRunnable):
    """Fetch the bytes behind a stored project image for the preview."""

    def __init__(self, fetcher: ImageFetcher, url: str) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._fetcher = fetcher
        self._url = url
        self.signals = PreviewFetchSignals()

    @property
    def url(self) -> str:
        return self._url

    def run(self) -> None:  # type: ignore[override]
        try:
            fetched = self._fetcher.fetch(self._url)
        except FetchError as exc:
            LOGGER.warning("Preview fetch failed for %s: %s", self._url, exc)
            self.signals.failed.emit(self._url, str(exc))
            return
        self.signals.loaded.emit(self._url, fetched.data)


__all__ = ["PreviewFetchSignals", "PreviewFetchWorker"]

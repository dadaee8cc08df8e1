"""
Crop session owning the selected source, crop state and cached output.

A session corresponds to one project form.  It replaces the module level
memo of a typical web form with instance data: the single-slot cache lives
and dies with the session and is cleared whenever the source changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from ...errors import CropError
from ...io.fetcher import ImageFetcher
from ...settings import CropSettings
from ...utils.logging import get_logger
from .backends import CropBackend
from .cache import CropCache, build_crop_signature
from .model import CropSessionModel
from .rasterizer import Rasterizer
from .sources import ImageBlob, ImageSource, LocalFileSource, RemoteUrlSource

logger = get_logger()


@dataclass(frozen=True)
class PreparedImage:
    """Image handed to the project-save flow on submit.

    ``file`` is the square crop when ``cropped`` is true.  On fallback it is
    the original local file, or ``None`` for remote sources where only
    ``preview_url`` is known.
    """

    file: ImageBlob | None
    preview_url: str | None
    cropped: bool = False
    error: str | None = None


class CropSession:
    """Coordinate the crop model, the rasterizer and the output cache."""

    def __init__(
        self,
        rasterizer: Rasterizer | None = None,
        *,
        model: CropSessionModel | None = None,
    ) -> None:
        self._rasterizer = rasterizer or Rasterizer()
        self._model = model or CropSessionModel()
        self._cache = CropCache()
        self._source: ImageSource | None = None

    @classmethod
    def from_settings(
        cls,
        settings: CropSettings,
        *,
        backend: CropBackend | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> "CropSession":
        """Build a session whose zoom bounds, encoder and fetcher follow *settings*."""

        fetcher = ImageFetcher(timeout=settings.fetch_timeout_sec, transport=transport)
        rasterizer = Rasterizer(backend, fetcher, jpeg_quality=settings.jpeg_quality)
        model = CropSessionModel(
            min_zoom=settings.min_zoom,
            max_zoom=settings.max_zoom,
            zoom_step=settings.zoom_step,
        )
        return cls(rasterizer, model=model)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def model(self) -> CropSessionModel:
        return self._model

    @property
    def cache(self) -> CropCache:
        return self._cache

    @property
    def rasterizer(self) -> Rasterizer:
        return self._rasterizer

    @property
    def source(self) -> ImageSource | None:
        return self._source

    def has_source(self) -> bool:
        return self._source is not None

    def preview_url(self) -> str | None:
        if isinstance(self._source, RemoteUrlSource):
            return self._source.url
        return None

    def current_signature(self) -> str:
        return build_crop_signature(self._source, self._model.position, self._model.zoom)

    # ------------------------------------------------------------------
    # Source lifecycle
    # ------------------------------------------------------------------
    def select_source(self, source: ImageSource, *, crop_position: Any = None) -> None:
        """Replace the source wholesale and reset crop and zoom."""

        self._source = source
        self._cache.clear()
        self._model.reset(crop_position)

    def clear_source(self) -> None:
        self._source = None
        self._cache.clear()
        self._model.reset()

    # ------------------------------------------------------------------
    # Crop state updates
    # ------------------------------------------------------------------
    def set_crop_position(self, candidate: Any) -> bool:
        changed = self._model.set_crop_position(candidate)
        if changed:
            self._cache.clear()
        return changed

    def set_zoom(self, candidate: Any) -> bool:
        if not self.has_source():
            return False
        return self._invalidate_if(self._model.set_zoom(candidate))

    def zoom_in(self) -> bool:
        if not self.has_source():
            return False
        return self._invalidate_if(self._model.zoom_in())

    def zoom_out(self) -> bool:
        if not self.has_source():
            return False
        return self._invalidate_if(self._model.zoom_out())

    def commit_zoom_text(self, raw: str) -> bool:
        if not self.has_source():
            return False
        return self._invalidate_if(self._model.commit_zoom_text(raw))

    def apply_drag_delta(
        self,
        delta_x: float,
        delta_y: float,
        viewport_width: float,
        viewport_height: float,
    ) -> bool:
        if not self.has_source():
            return False
        moved = self._model.apply_drag_delta(delta_x, delta_y, viewport_width, viewport_height)
        return self._invalidate_if(moved)

    def _invalidate_if(self, changed: bool) -> bool:
        if changed:
            self._cache.clear()
        return changed

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def cached_output(self) -> ImageBlob | None:
        return self._cache.lookup(self.current_signature())

    def accept_result(self, signature: str, output: ImageBlob) -> bool:
        """Cache *output* only if it still matches the current crop state.

        Asynchronous renders may finish after the user picked another image
        or moved the crop; such results are dropped.
        """

        if self._source is None or signature != self.current_signature():
            logger.debug("Discarding stale crop result for %s", signature)
            return False
        self._cache.store(signature, output)
        return True

    def build_prepared(self, output: ImageBlob) -> PreparedImage:
        return PreparedImage(file=output, preview_url=self.preview_url(), cropped=True)

    def fallback(self, error: str | None = None) -> PreparedImage:
        """Return the unmodified original source."""

        source = self._source
        original = ImageBlob.from_local_file(source) if isinstance(source, LocalFileSource) else None
        return PreparedImage(file=original, preview_url=self.preview_url(), cropped=False, error=error)

    def prepare_for_submit(self) -> PreparedImage:
        """Return the image to persist, rasterizing at most once per crop state.

        Crop failures never block submission; the original source is returned
        instead.
        """

        source = self._source
        if source is None:
            return PreparedImage(file=None, preview_url=None)

        signature = self.current_signature()
        cached = self._cache.lookup(signature)
        if cached is not None:
            return self.build_prepared(cached)

        try:
            output = self._rasterizer.rasterize(source, self._model.position, self._model.zoom)
        except CropError as exc:
            logger.error("Failed to crop project image: %s", exc)
            return self.fallback(str(exc))

        self.accept_result(signature, output)
        return self.build_prepared(output)

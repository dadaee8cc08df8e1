"""Background worker helpers for GUI tasks."""

from .crop_render_worker import CropRenderSignals, CropRenderWorker
from .preview_fetch_worker import PreviewFetchSignals, PreviewFetchWorker

__all__ = [
    "CropRenderSignals",
    "CropRenderWorker",
    "PreviewFetchSignals",
    "PreviewFetchWorker",
]

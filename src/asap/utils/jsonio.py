"""Helpers for reading and atomically writing JSON documents."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any

from ..errors import JsonReadError

_REPLACE_ATTEMPTS = 5


def read_json(path: Path) -> dict[str, Any]:
    """Read the JSON object stored at *path*."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise JsonReadError(f"JSON file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise JsonReadError(f"Invalid JSON data in {path}") from exc
    if not isinstance(payload, dict):
        raise JsonReadError(f"Expected a JSON object in {path}")
    return payload


def atomic_write_text(path: Path, data: str) -> None:
    """Write *data* to a sibling temp file and swap it into place."""

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    with tmp_path.open("w", encoding="utf-8") as handle:
        handle.write(data)
        handle.flush()
        os.fsync(handle.fileno())
    # Windows occasionally refuses the rename while another process (indexer,
    # antivirus) holds a handle; back off briefly instead of failing at once.
    for attempt in range(_REPLACE_ATTEMPTS):
        try:
            tmp_path.replace(path)
            return
        except PermissionError:
            if attempt == _REPLACE_ATTEMPTS - 1:
                tmp_path.unlink(missing_ok=True)
                raise
            time.sleep(0.05 * (attempt + 1))


def write_json(path: Path, data: dict[str, Any]) -> None:
    """Serialise *data* into *path* atomically."""

    payload = json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True)
    atomic_write_text(path, payload)

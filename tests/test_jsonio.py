"""Tests for JSON helpers."""

import pytest

from asap.errors import JsonReadError
from asap.utils.jsonio import read_json, write_json


def test_round_trip(tmp_path):
    path = tmp_path / "data.json"
    write_json(path, {"b": 1, "a": "ü"})
    assert read_json(path) == {"a": "ü", "b": 1}


def test_missing_file(tmp_path):
    with pytest.raises(JsonReadError):
        read_json(tmp_path / "missing.json")


def test_non_object_payload(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(JsonReadError):
        read_json(path)

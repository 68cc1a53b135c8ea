"""Tests for core/fileio.py — YAML/JSON reads and atomic replacement."""

import json

import pytest

from core.fileio import exclusive_lock, read_json, read_yaml, write_json_atomic, write_yaml_atomic


def test_missing_files_read_empty(tmp_path):
    assert read_json(tmp_path / "nope.json") == {}
    assert read_yaml(tmp_path / "nope.yaml") == {}


def test_non_mapping_reads_empty(tmp_path):
    (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
    (tmp_path / "list.yaml").write_text("- a\n- b\n", encoding="utf-8")
    assert read_json(tmp_path / "list.json") == {}
    assert read_yaml(tmp_path / "list.yaml") == {}


def test_corrupt_json_raises(tmp_path):
    (tmp_path / "bad.json").write_text("{oops", encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        read_json(tmp_path / "bad.json")


def test_write_creates_parents_and_leaves_no_temp(tmp_path):
    target = tmp_path / "data" / "store.json"
    write_json_atomic(target, {"tasks": [], "note": "café"})
    assert read_json(target) == {"tasks": [], "note": "café"}
    assert [p.name for p in target.parent.iterdir()] == ["store.json"]


def test_yaml_keeps_key_order(tmp_path):
    target = tmp_path / "config.yaml"
    write_yaml_atomic(target, {"user_id": 1, "api_url": "http://x"})
    assert target.read_text(encoding="utf-8").splitlines()[0] == "user_id: 1"
    assert read_yaml(target) == {"user_id": 1, "api_url": "http://x"}


def test_exclusive_lock_uses_sidecar_file(tmp_path):
    target = tmp_path / "store.json"
    with exclusive_lock(target):
        write_json_atomic(target, {"a": 1})
    assert (tmp_path / "store.json.lock").exists()
    assert read_json(target) == {"a": 1}

"""Tests for corrupted_registry module."""

import json
from datetime import date

import pytest

from frontpage.corrupted_registry import DEFAULT_CORRUPTED, CorruptedRegistry
from frontpage.exceptions import RegistryError


def test_missing_file_uses_known_bad_dates(tmp_path):
    registry = CorruptedRegistry.load(tmp_path / "corrupted-pdfs.json")
    assert len(registry.dates()) == len(DEFAULT_CORRUPTED)
    assert date(2018, 1, 10) in registry
    assert date(2018, 1, 14) not in registry
    assert not (tmp_path / "corrupted-pdfs.json").exists()


def test_load_existing_file(tmp_path):
    path = tmp_path / "corrupted-pdfs.json"
    path.write_text(json.dumps(["2020-05-01", "2020-05-01", "garbage"]))
    registry = CorruptedRegistry.load(path)
    assert registry.dates() == [date(2020, 5, 1)]


def test_mark_persists_sorted(tmp_path):
    path = tmp_path / "corrupted-pdfs.json"
    path.write_text(json.dumps(["2020-05-01"]))
    registry = CorruptedRegistry.load(path)

    assert registry.mark(date(2019, 3, 2)) is True
    assert json.loads(path.read_text()) == ["2019-03-02", "2020-05-01"]
    assert date(2019, 3, 2) in CorruptedRegistry.load(path)


def test_mark_is_idempotent(tmp_path, caplog):
    path = tmp_path / "corrupted-pdfs.json"
    registry = CorruptedRegistry.load(path)
    registry.mark(date(2019, 3, 2))
    before = registry.dates()
    written = path.read_text()

    with caplog.at_level("INFO"):
        assert registry.mark(date(2019, 3, 2)) is False
    assert registry.dates() == before
    assert path.read_text() == written
    assert "already registered" in caplog.text


def test_invalid_file(tmp_path):
    path = tmp_path / "corrupted-pdfs.json"
    path.write_text("{not json")
    with pytest.raises(RegistryError):
        CorruptedRegistry.load(path)

    path.write_text('{"2018-01-10": true}')
    with pytest.raises(RegistryError, match="array"):
        CorruptedRegistry.load(path)

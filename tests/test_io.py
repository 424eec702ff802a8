"""Unit tests for blob encoding, atomic writes and blob stores."""

import os
import sys
import pytest
from pathlib import Path
from unittest.mock import patch

from tasktrack.data.blobs import FileBlobStore, MemoryBlobStore
from tasktrack.data.io import DATA_JSON, DATA_YAML, atomic_write, decode, encode, read_bytes
from tasktrack.data.validate import validate_blob
from tasktrack.recovery import CorruptionError, FatalError, FileOperationError


class TestEncoding:
    """Test encode()/decode()."""

    @pytest.mark.parametrize("data_type", [DATA_JSON, DATA_YAML])
    def test_plain_data(self, data_type):
        data = [{"id": "abc", "title": "Milk", "count": 2, "done": False, "note": None}]
        assert decode(data_type, encode(data_type, data)) == data

    def test_unsupported_format(self):
        with pytest.raises(FatalError):
            encode(42, [])
        with pytest.raises(FatalError):
            decode(42, b"[]")

    def test_non_serializable_data(self):
        with pytest.raises(CorruptionError):
            encode(DATA_JSON, [object()])

    def test_corrupt_payloads(self):
        with pytest.raises(CorruptionError):
            decode(DATA_JSON, b"")
        with pytest.raises(CorruptionError):
            decode(DATA_JSON, b"{not json")
        with pytest.raises(CorruptionError):
            decode(DATA_JSON, b"\xff\xfe")
        with pytest.raises(CorruptionError):
            decode(DATA_YAML, b"key: [unclosed")

    @pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no integer digit limit")
    def test_oversized_integer(self):
        """Test integers past the interpreter digit limit are reported as corruption."""
        with pytest.raises(CorruptionError):
            decode(DATA_JSON, b"[" + b"1" * 5000 + b"]")

    def test_runaway_nesting(self):
        """Test nesting deeper than the parser can follow is reported as corruption."""
        with pytest.raises(CorruptionError):
            decode(DATA_JSON, b"[" * 100000 + b"]" * 100000)


class TestAtomicWrite:
    """Test atomic_write() and read_bytes()."""

    def test_write_and_read(self, tmp_path: Path):
        target = tmp_path / "nested" / "tasks.json"
        assert read_bytes(target) is None

        atomic_write(target, b"first", create_dirs=True)
        atomic_write(target, b"second")

        assert read_bytes(target) == b"second"
        assert [p.name for p in target.parent.iterdir()] == ["tasks.json"]

    def test_missing_directory_without_create(self, tmp_path: Path):
        with pytest.raises(FileOperationError):
            atomic_write(tmp_path / "missing" / "tasks.json", b"data")

    def test_failed_replace_keeps_previous_content(self, tmp_path: Path):
        target = tmp_path / "tasks.json"
        atomic_write(target, b"old")

        with patch("tasktrack.data.io.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(FileOperationError):
                atomic_write(target, b"new")

        assert target.read_bytes() == b"old"
        assert os.listdir(tmp_path) == ["tasks.json"]


class TestBlobStores:
    """Test the in-memory and file blob stores."""

    def test_memory_store(self):
        store = MemoryBlobStore()
        assert store.read("SavedTasks") is None
        store.write("SavedTasks", b"one")
        store.write("SavedTasks", b"two")
        assert store.read("SavedTasks") == b"two"

    def test_file_store(self, tmp_path: Path):
        store = FileBlobStore(tmp_path / "data")
        assert store.read("SavedTasks") is None
        store.write("SavedTasks", b"payload")
        assert store.read("SavedTasks") == b"payload"
        assert (tmp_path / "data" / "SavedTasks.json").read_bytes() == b"payload"

    def test_file_store_sanitizes_keys(self, tmp_path: Path):
        store = FileBlobStore(tmp_path, suffix=".yml")
        assert store.path_for("../Saved Tasks") == tmp_path / "SavedTasks.yml"
        with pytest.raises(ValueError):
            store.path_for("../")


class TestValidateBlob:
    """Test the blob envelope check."""

    def test_list_of_objects(self):
        assert validate_blob([]) is True
        assert validate_blob([{"id": "x"}, {}]) is True

    def test_wrong_shapes(self):
        assert validate_blob(None) is False
        assert validate_blob({"tasks": []}) is False
        assert validate_blob([1, 2]) is False

"""Tests for file copy and byte comparison."""

import os

import pytest

from conftest import BASE_NS
from dirsyncer.services.file_io import FileIOService


@pytest.fixture
def io_service():
    # Small chunks so multi-chunk paths are exercised with tiny files
    return FileIOService(buffer_size=4, verify_chunk_size=4)


class TestCompare:
    def test_identical_content(self, tmp_path, io_service):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"0123456789")
        b.write_bytes(b"0123456789")

        assert io_service.compare_files_binary(a, b) == (True, None)
        assert io_service.files_equal(a, b)

    def test_first_byte_differs(self, tmp_path, io_service):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"0123456789")
        b.write_bytes(b"X123456789")

        assert io_service.compare_files_binary(a, b) == (False, 0)

    def test_last_byte_differs(self, tmp_path, io_service):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"0123456789")
        b.write_bytes(b"012345678X")

        assert io_service.compare_files_binary(a, b) == (False, 9)

    def test_length_only_differs(self, tmp_path, io_service):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"0123456789")
        b.write_bytes(b"01234567890")

        assert not io_service.files_equal(a, b)

    def test_empty_files_are_equal(self, tmp_path, io_service):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"")
        b.write_bytes(b"")

        assert io_service.files_equal(a, b)

    def test_same_path_is_equal_without_reading(self, tmp_path, io_service, monkeypatch):
        a = tmp_path / "a"
        a.write_bytes(b"data")

        def no_open(*args, **kwargs):
            raise AssertionError("file was opened")

        monkeypatch.setattr("builtins.open", no_open)

        assert io_service.files_equal(a, str(a))
        assert io_service.files_equal(a, tmp_path / "." / "a")


class TestCopy:
    def test_copies_content_and_timestamps(self, tmp_path, io_service):
        src = tmp_path / "src.bin"
        src.write_bytes(b"hello world")
        os.utime(src, ns=(BASE_NS, BASE_NS))
        dst = tmp_path / "deep" / "er" / "dst.bin"

        result = io_service.copy_file(src, dst)

        assert dst.read_bytes() == b"hello world"
        assert result.bytes_copied == 11
        assert result.source_mtime_ns == BASE_NS
        assert os.stat(dst).st_mtime_ns == BASE_NS

    def test_overwrites_longer_destination(self, tmp_path, io_service):
        src = tmp_path / "src"
        src.write_bytes(b"short")
        dst = tmp_path / "dst"
        dst.write_bytes(b"a much longer previous content")

        io_service.copy_file(src, dst)

        assert dst.read_bytes() == b"short"

    def test_missing_source_raises(self, tmp_path, io_service):
        with pytest.raises(FileNotFoundError):
            io_service.copy_file(tmp_path / "nope", tmp_path / "dst")

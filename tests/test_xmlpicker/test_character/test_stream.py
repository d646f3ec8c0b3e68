"""Tests for input opening and gzip detection."""

import gzip
import io
import sys
from types import SimpleNamespace

import pytest

from xmlpicker.character import GZIP_MAGIC, auto_decompress, open_input, open_source


class TestAutoDecompress:
    """Test transparent decompression."""

    def test_plain_stream_is_replayed(self):
        """Test the peeked bytes are not lost."""
        stream = auto_decompress(io.BytesIO(b"<a>plain</a>"))
        assert stream.read() == b"<a>plain</a>"

    def test_gzip_stream_is_decompressed(self):
        """Test gzip input is detected by its magic number."""
        payload = gzip.compress(b"<a>zipped</a>")
        assert payload[:2] == GZIP_MAGIC
        stream = auto_decompress(io.BytesIO(payload))
        assert stream.read() == b"<a>zipped</a>"

    @pytest.mark.parametrize("data", [b"", b"<"])
    def test_short_streams(self, data):
        """Test inputs shorter than the magic number."""
        assert auto_decompress(io.BytesIO(data)).read() == data

    def test_small_reads(self):
        """Test reading in pieces across the replayed prefix."""
        stream = auto_decompress(io.BytesIO(b"abcdef"))
        assert stream.read(1) == b"a"
        assert stream.read(3) == b"bcd"
        assert stream.read() == b"ef"


class TestOpenInput:
    """Test opening named inputs."""

    def test_file(self, tmp_path):
        """Test regular files are opened in binary mode."""
        path = tmp_path / "doc.xml"
        path.write_bytes(b"<a/>")
        with open_input(str(path)) as stream:
            assert stream.read() == b"<a/>"

    def test_stdin(self, monkeypatch):
        """Test '-' reads standard input without closing it."""
        stdin = io.BytesIO(b"<a/>")
        monkeypatch.setattr(sys, "stdin", SimpleNamespace(buffer=stdin))
        stream = open_input("-")
        assert stream.read() == b"<a/>"
        stream.close()
        assert not stdin.closed

    def test_missing_file(self, tmp_path):
        """Test missing files raise OSError."""
        with pytest.raises(OSError):
            open_input(str(tmp_path / "missing.xml"))


class TestOpenSource:
    """Test the combined context manager."""

    def test_gzip_file(self, tmp_path):
        """Test compressed files are decompressed and closed afterwards."""
        path = tmp_path / "doc.xml.gz"
        path.write_bytes(gzip.compress(b"<a>1</a>"))
        with open_source(path) as stream:
            assert stream.read() == b"<a>1</a>"
        assert stream.closed

    def test_decompression_disabled(self, tmp_path):
        """Test raw bytes are returned when decompression is off."""
        payload = gzip.compress(b"<a/>")
        path = tmp_path / "doc.xml.gz"
        path.write_bytes(payload)
        with open_source(path, decompress=False) as stream:
            assert stream.read() == payload

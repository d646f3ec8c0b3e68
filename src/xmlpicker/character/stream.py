"""Byte source handling: opening inputs and transparent gzip decompression."""

import gzip
import io
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from xmlpicker.shared.logging import get_logger

GZIP_MAGIC = b"\x1f\x8b"
STDIN_NAME = "-"

logger = get_logger(__name__, component="input_stream")


class _ReplayStream(io.RawIOBase):
    """Raw stream returning already consumed ``head`` bytes before the rest."""

    def __init__(self, head: bytes, stream: BinaryIO) -> None:
        super().__init__()
        self._head = head
        self._stream = stream

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[no-untyped-def]
        if self._head:
            count = min(len(buffer), len(self._head))
            buffer[:count] = self._head[:count]
            self._head = self._head[count:]
            return count
        data = self._stream.read(len(buffer))
        count = len(data)
        buffer[:count] = data
        return count


def open_input(name: Union[str, Path]) -> BinaryIO:
    """Open a named input for binary reading; ``-`` means standard input.

    Standard input is wrapped so that closing the result leaves it open.
    """
    if str(name) == STDIN_NAME:
        return io.BufferedReader(_ReplayStream(b"", sys.stdin.buffer))
    return open(name, "rb")


def auto_decompress(stream: BinaryIO) -> BinaryIO:
    """Wrap ``stream`` in a gzip reader when it starts with the gzip magic number."""
    head = stream.read(len(GZIP_MAGIC))
    buffered = io.BufferedReader(_ReplayStream(head, stream))
    if head == GZIP_MAGIC:
        logger.debug("Detected gzip compressed input")
        return gzip.GzipFile(fileobj=buffered, mode="rb")  # type: ignore[return-value]
    return buffered


@contextmanager
def open_source(name: Union[str, Path], decompress: bool = True) -> Iterator[BinaryIO]:
    """Open an input, decompressing it when needed, and close it afterwards."""
    raw = open_input(name)
    try:
        if decompress:
            reader = auto_decompress(raw)
            try:
                yield reader
            finally:
                reader.close()
        else:
            yield raw
    finally:
        raw.close()

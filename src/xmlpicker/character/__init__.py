"""Input layer: opening byte sources and transparent decompression.

Key Components:
    open_input: Opens a file path, or standard input for ``-``
    auto_decompress: Detects gzip streams by their magic number
    open_source: Context manager combining both
"""

from .stream import GZIP_MAGIC, STDIN_NAME, auto_decompress, open_input, open_source

__all__ = [
    "GZIP_MAGIC",
    "STDIN_NAME",
    "auto_decompress",
    "open_input",
    "open_source",
]

"""Command-line interface module for xmlpicker.

This module provides the ``xmlpicker json`` and ``xmlpicker xml`` commands
that stream documents and print every selected sub-document.
"""

from .main import main

__all__ = ["main"]

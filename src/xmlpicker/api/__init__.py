"""Public picking API.

Key Components:
    XMLPicker: Configured, reusable picker
    pick, pick_string, pick_file: Convenience functions
"""

from .parser import XMLPicker, pick, pick_file, pick_string

__all__ = [
    "XMLPicker",
    "pick",
    "pick_file",
    "pick_string",
]

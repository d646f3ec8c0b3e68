"""Output layer: XML re-serialization and dictionary projection of matches.

Key Components:
    XMLExporter: Writes matches, optionally wrapped in their ancestor chain
    XMLWriter: Token-level XML encoder with namespace declaration handling
    SimpleMapper: Maps a match to nested dicts for JSON output
"""

from .mapper import SimpleMapper
from .writer import XMLWriter, escape_attribute, escape_text, prefix_for_uri
from .xml_exporter import XMLExporter, to_xml

__all__ = [
    "SimpleMapper",
    "XMLExporter",
    "XMLWriter",
    "escape_attribute",
    "escape_text",
    "prefix_for_uri",
    "to_xml",
]

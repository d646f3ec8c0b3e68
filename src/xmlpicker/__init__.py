"""xmlpicker.

A streaming XML sub-document picker. A path selector chooses elements; each
chosen element is retained with its subtree and handed out as soon as its end
tag is read, while everything else is discarded. Namespaces can be expanded
to URIs, stripped, or kept as literal prefixes.

Progressive API Disclosure:
- Level 1: Simple functions - pick(), pick_string(), pick_file()
- Level 2: Configured picker - XMLPicker class
- Level 3: Tree builder over a token stream - XMLTreeBuilder
"""

__version__ = "0.1.0"

# Progressive API disclosure - Level 1 and Level 2
from .api import XMLPicker, pick, pick_file, pick_string

# Output
from .export import SimpleMapper, XMLExporter, XMLWriter, to_xml

# Configuration classes for advanced usage
from .shared.config import LimitsConfig, NamespaceMode, PickerConfig, StreamConfig
from .shared.errors import PickerError

# Core objects for all API levels
from .tree import Element, Node, PathSelector, Text, XMLTreeBuilder

__all__ = [
    # Version and metadata
    "__version__",

    # Level 1: Simple picking functions
    "pick",
    "pick_string",
    "pick_file",

    # Level 2: Configured picker
    "XMLPicker",

    # Level 3: Tree building
    "XMLTreeBuilder",
    "PathSelector",

    # Nodes and output
    "Element",
    "Node",
    "Text",
    "SimpleMapper",
    "XMLExporter",
    "XMLWriter",
    "to_xml",

    # Configuration and errors
    "LimitsConfig",
    "NamespaceMode",
    "PickerConfig",
    "StreamConfig",
    "PickerError",
]

"""Tree building engine for streaming XML picking.

Key Components:
    XMLTreeBuilder: Pull-based producer of one retained subtree per match
    PathSelector: Fixed-depth, per-segment wildcard path predicate
    NamespaceScope: Namespace policy applied to element and attribute names
    Element, Text: The two Node variants
"""

from .builder import BuilderState, XMLTreeBuilder
from .namespaces import (
    XML_NAMESPACE,
    NamespaceScope,
    in_scope,
    is_declaration,
    resolve,
)
from .node import Attribute, Element, Node, Text
from .selector import PathSelector, Selector, compile_selector

__all__ = [
    "XML_NAMESPACE",
    "Attribute",
    "BuilderState",
    "Element",
    "NamespaceScope",
    "Node",
    "PathSelector",
    "Selector",
    "Text",
    "XMLTreeBuilder",
    "compile_selector",
    "in_scope",
    "is_declaration",
    "resolve",
]

"""Namespace scope tracking for the tree builder and exporter.

Three policies are supported. EXPAND relies on the tokenizer to resolve
names, STRIP throws namespace information away, and PREFIX keeps literal
prefixes while recording on each element only the bindings it declares
itself. Lookups walk the ancestor chain, so a child never copies or mutates
an ancestor's bindings.
"""

from typing import Dict, List, Optional, Tuple

from xmlpicker.shared.config import NamespaceMode
from xmlpicker.tokenization import QName, Token, TokenizerMode

from .node import Attribute, Element

XML_PREFIX = "xml"
XMLNS_PREFIX = "xmlns"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def is_declaration(name: QName) -> bool:
    """Check whether an attribute name is an ``xmlns``/``xmlns:*`` declaration."""
    return name.space == XMLNS_PREFIX or (not name.space and name.local == XMLNS_PREFIX)


def declared_prefix(name: QName) -> str:
    """Prefix bound by a declaration attribute (empty for the default namespace)."""
    return name.local if name.space == XMLNS_PREFIX else ""


def resolve(element: Optional[Element], prefix: str) -> Optional[str]:
    """Resolve ``prefix`` from ``element`` upward.

    The reserved ``xml`` prefix is always bound. Returns None when no
    ancestor declares the prefix.
    """
    if prefix == XML_PREFIX:
        return XML_NAMESPACE
    if element is None:
        return None
    return element.lookup_prefix(prefix)


def in_scope(element: Element) -> Dict[str, str]:
    """All bindings visible at ``element``, nearest declaration winning."""
    chain = [element]
    chain.extend(element.iter_ancestors())
    bindings: Dict[str, str] = {}
    for node in reversed(chain):
        if node.namespaces:
            bindings.update(node.namespaces)
    return bindings


class NamespaceScope:
    """Builds elements from start tags under one namespace policy."""

    def __init__(self, mode: NamespaceMode = NamespaceMode.PREFIX) -> None:
        self.mode = mode

    @property
    def tokenizer_mode(self) -> TokenizerMode:
        """Tokenizer mode this policy needs."""
        if self.mode is NamespaceMode.EXPAND:
            return TokenizerMode.RESOLVE
        return TokenizerMode.RAW

    @property
    def checks_end_space(self) -> bool:
        """Whether end tags must repeat the start tag's namespace."""
        return self.mode is not NamespaceMode.STRIP

    def element_name(self, name: QName) -> QName:
        """Name as stored on the node under this policy."""
        if self.mode is NamespaceMode.STRIP and name.space:
            return QName(name.local)
        return name

    def split_attributes(
        self, attributes: List[Tuple[QName, str]]
    ) -> Tuple[List[Attribute], Optional[Dict[str, str]]]:
        """Separate namespace declarations from ordinary attributes.

        Returns:
            The attribute list to keep and the element's own bindings (only
            in prefix mode, and only when it declares something)
        """
        kept: List[Attribute] = []
        bindings: Optional[Dict[str, str]] = None
        for name, value in attributes:
            if self.mode is not NamespaceMode.EXPAND and is_declaration(name):
                if self.mode is NamespaceMode.PREFIX:
                    if bindings is None:
                        bindings = {}
                    bindings[declared_prefix(name)] = value
                continue
            if self.mode is NamespaceMode.STRIP and name.space:
                name = QName(name.local)
            kept.append(Attribute(name, value))
        return kept, bindings

    def open_element(self, token: Token, parent: Optional[Element]) -> Element:
        """Create the element for a start tag, linked to its enclosing element."""
        assert token.name is not None
        attributes, bindings = self.split_attributes(token.attributes)
        element = Element(
            name=self.element_name(token.name),
            attributes=attributes,
            namespaces=bindings,
        )
        element._link_parent(parent, owned=False)
        return element

    def end_name_matches(self, element: Element, name: QName) -> bool:
        """Check an end tag against the open element."""
        if element.name.local != name.local:
            return False
        if self.checks_end_space and element.name.space != name.space:
            return False
        return True

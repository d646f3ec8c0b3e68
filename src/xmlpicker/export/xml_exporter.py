"""Re-serialization of matches as standalone XML fragments.

A match can be exported on its own (``encode_node``) or wrapped in start and
end tags of its ancestors (``start_path`` / ``end_path``), which recreates
the context the fragment needs, in particular the namespace declarations
in scope. Under the prefix policy the exporter rewrites names into their
literal ``prefix:local`` form, validates every prefix against the ancestor
chain and declares only bindings the output has not declared yet.
"""

import io
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from xmlpicker.shared import NamespaceMode, NamespaceResolutionError, get_logger
from xmlpicker.tokenization import QName
from xmlpicker.tree.namespaces import XML_PREFIX, XMLNS_PREFIX, in_scope, resolve
from xmlpicker.tree.node import Attribute, Element, Node, Text

from .writer import XMLWriter


class XMLExporter:
    """Serialize matches produced by the tree builder."""

    def __init__(
        self,
        writer: XMLWriter,
        namespace_mode: NamespaceMode = NamespaceMode.PREFIX,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the exporter.

        Args:
            writer: Destination for the serialized tokens
            namespace_mode: Policy the nodes were built with
            correlation_id: Optional correlation ID for log records
        """
        self.writer = writer
        self.namespace_mode = namespace_mode
        self.logger = get_logger(__name__, correlation_id, "xml_exporter")
        # Bindings written per open element, innermost last
        self._declared: List[Dict[str, str]] = []
        self._buffered = False

    @contextmanager
    def _fragment(self) -> Iterator[None]:
        """Write to the real stream only if the whole call succeeds.

        On failure nothing reaches the stream and the exporter and writer
        are back in the state they had on entry, so the exporter can be
        reused for the next match.
        """
        if self._buffered:
            yield
            return
        stream = self.writer.stream
        buffer = io.StringIO()
        declared = len(self._declared)
        depth = self.writer.depth
        self.writer.stream = buffer
        self._buffered = True
        succeeded = False
        try:
            yield
            succeeded = True
        finally:
            self.writer.stream = stream
            self._buffered = False
            if succeeded:
                stream.write(buffer.getvalue())
            else:
                del self._declared[declared:]
                self.writer.truncate(depth)

    def encode_match(self, node: Node) -> None:
        """Write ``node`` wrapped in its ancestor chain."""
        with self._fragment():
            self.start_path(node.parent)
            self.encode_node(node)
            self.end_path(node.parent)

    def start_path(self, node: Optional[Element]) -> None:
        """Open every element from the document root down to ``node``."""
        if node is None:
            return
        chain = [node]
        chain.extend(node.iter_ancestors())
        with self._fragment():
            for element in reversed(chain):
                self._start_element(element)

    def end_path(self, node: Optional[Element]) -> None:
        """Close every element from ``node`` up to the document root."""
        if node is None:
            return
        self._end_element()
        for _ in node.iter_ancestors():
            self._end_element()

    def encode_node(self, node: Node) -> None:
        """Write ``node`` and its retained subtree."""
        with self._fragment():
            self._encode(node)

    def _encode(self, node: Node) -> None:
        if isinstance(node, Text):
            self.writer.characters(node.value)
            return
        self._start_element(node)
        for child in node.children or []:
            self._encode(child)
        self._end_element()

    def _start_element(self, element: Element) -> None:
        if self.namespace_mode is not NamespaceMode.PREFIX:
            self.writer.start_element(element.name, element.attributes)
            self._declared.append({})
            return

        name = self._literal_name(element, element.name)
        attributes = [
            Attribute(self._literal_name(element, attribute.name), attribute.value)
            for attribute in element.attributes
        ]
        declarations = self._pending_declarations(element)
        for prefix in sorted(declarations):
            declaration = f"{XMLNS_PREFIX}:{prefix}" if prefix else XMLNS_PREFIX
            attributes.append(Attribute(QName(declaration), declarations[prefix]))
        self.writer.start_element(name, attributes)
        self._declared.append(declarations)

    def _end_element(self) -> None:
        self.writer.end_element()
        self._declared.pop()

    def _literal_name(self, element: Element, name: QName) -> QName:
        if not name.space:
            return name
        if name.space != XML_PREFIX and resolve(element, name.space) is None:
            path = element.path()
            self.logger.error(
                "Undeclared namespace prefix",
                extra={"prefix": name.space, "path": path},
            )
            raise NamespaceResolutionError(name.space, path)
        return QName(f"{name.space}:{name.local}")

    def _pending_declarations(self, element: Element) -> Dict[str, str]:
        # The first element of a fragment carries everything in scope so the
        # fragment stays namespace-valid when ancestors are left out.
        candidates = in_scope(element) if not self._declared else element.namespaces
        pending: Dict[str, str] = {}
        for prefix, uri in (candidates or {}).items():
            written = self._written_binding(prefix)
            if written is None and not prefix:
                written = ""
            if written != uri:
                pending[prefix] = uri
        return pending

    def _written_binding(self, prefix: str) -> Optional[str]:
        for declared in reversed(self._declared):
            if prefix in declared:
                return declared[prefix]
        return None


def to_xml(
    node: Node,
    namespace_mode: NamespaceMode = NamespaceMode.PREFIX,
    include_ancestors: bool = True,
) -> str:
    """Serialize a single match to a string.

    Args:
        node: Match returned by the tree builder
        namespace_mode: Policy the node was built with
        include_ancestors: Wrap the match in its ancestor chain

    Returns:
        The XML fragment
    """
    buffer = io.StringIO()
    exporter = XMLExporter(XMLWriter(buffer), namespace_mode)
    if include_ancestors:
        exporter.encode_match(node)
    else:
        exporter.encode_node(node)
    return buffer.getvalue()

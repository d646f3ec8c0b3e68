"""Projection of matches onto plain dictionaries for JSON output."""

from typing import Any, Dict, List

from xmlpicker.tree.node import Element, Node, Text

TEXT_KEY = "#text"
NAME_KEY = "_name"
ATTRIBUTE_PREFIX = "@"


class SimpleMapper:
    """Map a node to nested dicts keyed by local names.

    The top-level dict carries the element's local name under ``_name``.
    Attributes appear as ``@name``; children are grouped in lists under their
    local name, text leaves under ``#text``. Namespaces are not represented.
    """

    def from_node(self, node: Node) -> Dict[str, Any]:
        """Map ``node`` and its retained subtree."""
        if isinstance(node, Text):
            return {TEXT_KEY: [node.value]}
        out: Dict[str, Any] = {NAME_KEY: node.name.local}
        self._fill(out, node)
        return out

    def _fill(self, out: Dict[str, Any], element: Element) -> None:
        for attribute in element.attributes:
            out[ATTRIBUTE_PREFIX + attribute.name.local] = attribute.value
        for child in element.children or []:
            value: Any
            if isinstance(child, Text):
                key = TEXT_KEY
                value = child.value
            else:
                key = child.name.local
                value = {}
                self._fill(value, child)
            values: List[Any] = out.setdefault(key, [])
            values.append(value)

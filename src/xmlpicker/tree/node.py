"""Node model for extracted sub-documents.

A Node is either an Element or a Text leaf. Parent links never form an
ownership cycle: an element whose parent records its children refers to it
through a weak reference, while a link to an idle-spine ancestor (which never
holds its children) is a plain reference. Holding on to a match therefore
keeps its ancestor chain reachable, and dropping it frees everything.
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from xmlpicker.tokenization import QName


@dataclass(frozen=True)
class Attribute:
    """Attribute name and value, in source order."""

    name: QName
    value: str


class _ParentLink:
    """Mixin resolving the strong or weak parent reference."""

    _parent_ref: Any

    @property
    def parent(self) -> Optional["Element"]:
        """The enclosing element, or None at the document root."""
        ref = self._parent_ref
        if isinstance(ref, weakref.ReferenceType):
            return ref()
        return ref

    def _link_parent(self, parent: Optional["Element"], owned: bool) -> None:
        if parent is not None and owned:
            self._parent_ref = weakref.ref(parent)
        else:
            self._parent_ref = parent

    def iter_ancestors(self) -> Iterator["Element"]:
        """Yield enclosing elements from the parent up to the document root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def depth(self) -> int:
        """Depth from the document root; the root element has depth 1."""
        return 1 + sum(1 for _ in self.iter_ancestors())


@dataclass(eq=False)
class Text(_ParentLink):
    """Non-blank, trimmed character data inside a retained subtree."""

    value: str
    _parent_ref: Any = field(default=None, repr=False)

    def path(self) -> str:
        """Path of the enclosing element."""
        parent = self.parent
        return parent.path() if parent is not None else "/"


@dataclass(eq=False)
class Element(_ParentLink):
    """XML element.

    ``children`` is None while the element sits on the idle spine and a list
    once it is a retention root or a descendant of one. ``namespaces`` holds
    only the bindings this element itself declares (prefix mode) and is None
    otherwise.
    """

    name: QName
    attributes: List[Attribute] = field(default_factory=list)
    namespaces: Optional[Dict[str, str]] = None
    children: Optional[List["Node"]] = None
    _parent_ref: Any = field(default=None, repr=False)

    @property
    def is_recording(self) -> bool:
        """Check whether this element retains its children."""
        return self.children is not None

    def start_recording(self) -> None:
        """Mark this element as retained."""
        if self.children is None:
            self.children = []

    def append_child(self, child: "Node") -> int:
        """Append a child and return the new child count.

        Raises:
            ValueError: If this element is not recording
        """
        if self.children is None:
            raise ValueError(f"element <{self.name}> does not retain children")
        child._link_parent(self, owned=True)
        self.children.append(child)
        return len(self.children)

    def lookup_prefix(self, prefix: str) -> Optional[str]:
        """Resolve ``prefix`` through this element and its ancestors."""
        node: Optional[Element] = self
        while node is not None:
            if node.namespaces and prefix in node.namespaces:
                return node.namespaces[prefix]
            node = node.parent
        return None

    def get_attribute(
        self, local: str, space: str = "", default: Optional[str] = None
    ) -> Optional[str]:
        """Get attribute value with optional default."""
        for attribute in self.attributes:
            if attribute.name.local == local and attribute.name.space == space:
                return attribute.value
        return default

    def element_children(self) -> List["Element"]:
        """Child elements only, in document order."""
        return [child for child in self.children or [] if isinstance(child, Element)]

    def text_content(self) -> str:
        """Text leaves of the whole subtree joined by single spaces."""
        parts: List[str] = []
        for child in self.children or []:
            if isinstance(child, Text):
                parts.append(child.value)
            else:
                nested = child.text_content()
                if nested:
                    parts.append(nested)
        return " ".join(parts)

    def path(self) -> str:
        """Textual path like ``/a/x:b`` used in diagnostics."""
        names = [str(self.name)]
        names.extend(str(ancestor.name) for ancestor in self.iter_ancestors())
        return "/" + "/".join(reversed(names))


Node = Union[Element, Text]

"""Token-level XML serialization.

XMLWriter writes start tags, end tags and character data to a text stream.
Names whose ``space`` is set are treated as carrying a resolved namespace
URI: the writer declares the default namespace whenever it changes and
invents prefixes for namespaced attributes. Names without a space are
written verbatim, which is how literal ``prefix:local`` names pass through.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, TextIO

from xmlpicker.tokenization import QName
from xmlpicker.tree.namespaces import XML_NAMESPACE, XML_PREFIX
from xmlpicker.tree.node import Attribute

_PREFIX_NAME = re.compile(r"^[^\W\d][\w.\-]*$")

_TEXT_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\n": "&#10;",
    "\r": "&#13;",
})

_ATTRIBUTE_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "\n": "&#10;",
    "\r": "&#13;",
    "\t": "&#9;",
})


def escape_text(text: str) -> str:
    """Escape character data; line breaks become character references."""
    return text.translate(_TEXT_ESCAPES)


def escape_attribute(value: str) -> str:
    """Escape a double-quoted attribute value."""
    return value.translate(_ATTRIBUTE_ESCAPES)


def prefix_for_uri(uri: str) -> str:
    """Derive a readable prefix from the last path segment of a namespace URI."""
    prefix = uri.rstrip("/")
    prefix = prefix[prefix.rfind("/") + 1:]
    if not prefix or ":" in prefix or not _PREFIX_NAME.match(prefix):
        prefix = "_"
    if prefix[:3].lower() == "xml":
        prefix = "_" + prefix
    return prefix


@dataclass
class _Frame:
    tag: str
    default_namespace: str
    prefixes: Dict[str, str] = field(default_factory=dict)  # uri -> prefix


class XMLWriter:
    """Streaming writer for well-formed XML fragments."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._stack: List[_Frame] = []

    @property
    def depth(self) -> int:
        """Number of start tags not yet closed."""
        return len(self._stack)

    def start_element(self, name: QName, attributes: Sequence[Attribute] = ()) -> None:
        """Write a start tag."""
        inherited = self._stack[-1].default_namespace if self._stack else ""
        frame = _Frame(tag=name.local, default_namespace=inherited)
        parts = [name.local]
        if name.space != inherited:
            frame.default_namespace = name.space
            parts.append(f'xmlns="{escape_attribute(name.space)}"')
        for attribute in attributes:
            attribute_name = attribute.name.local
            if attribute.name.space:
                prefix = self._attribute_prefix(attribute.name.space, frame, parts)
                attribute_name = f"{prefix}:{attribute_name}"
            parts.append(f'{attribute_name}="{escape_attribute(attribute.value)}"')
        self.stream.write("<" + " ".join(parts) + ">")
        self._stack.append(frame)

    def end_element(self) -> None:
        """Close the most recently opened element."""
        if not self._stack:
            raise ValueError("end_element() called with no open element")
        frame = self._stack.pop()
        self.stream.write(f"</{frame.tag}>")

    def characters(self, text: str) -> None:
        """Write character data."""
        self.stream.write(escape_text(text))

    def truncate(self, depth: int) -> None:
        """Forget open elements above ``depth`` without writing end tags."""
        del self._stack[depth:]

    def write_raw(self, data: str) -> None:
        """Write ``data`` unmodified, e.g. a fragment separator."""
        self.stream.write(data)

    def flush(self) -> None:
        """Flush the underlying stream when it supports it."""
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()

    def _attribute_prefix(self, uri: str, frame: _Frame, parts: List[str]) -> str:
        if uri == XML_NAMESPACE:
            return XML_PREFIX
        frames = self._stack + [frame]
        for candidate in reversed(frames):
            if uri in candidate.prefixes:
                return candidate.prefixes[uri]

        in_use = {prefix for f in frames for prefix in f.prefixes.values()}
        base = prefix_for_uri(uri)
        prefix = base
        sequence = 0
        while prefix in in_use:
            sequence += 1
            prefix = f"{base}_{sequence}"
        frame.prefixes[uri] = prefix
        parts.append(f'xmlns:{prefix}="{escape_attribute(uri)}"')
        return prefix

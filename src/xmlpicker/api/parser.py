"""Picker API with progressive disclosure.

Module-level functions cover the common cases; XMLPicker holds a complete
configuration and can be reused across inputs.
"""

from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from xmlpicker.character import open_source
from xmlpicker.shared import NamespaceMode, PickerConfig, get_logger
from xmlpicker.tokenization.tokenizer import SourceType
from xmlpicker.tree import Element, XMLTreeBuilder


class XMLPicker:
    """Configured, reusable sub-document picker.

    Attributes:
        config: Effective picker configuration
        correlation_id: Correlation ID attached to log records

    Examples:
        >>> picker = XMLPicker(selector="/feed/entry")
        >>> [node.get_attribute("id") for node in picker.iter_matches(data)]
        ['1', '2']

        Tight caps for untrusted input:
        >>> picker = XMLPicker(PickerConfig.untrusted_input("/feed/entry"))
    """

    def __init__(self, config: Optional[PickerConfig] = None, **overrides: Any) -> None:
        """Initialize picker.

        Args:
            config: Base configuration (defaults to ``PickerConfig.default()``)
            **overrides: Field overrides, e.g. ``selector="/a/b"`` or
                ``limits__max_depth=64``
        """
        config = config or PickerConfig.default()
        if overrides:
            config = config.override(**overrides)
        self.config = config
        self.correlation_id = config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_picker")

        self._runs = 0
        self._matches = 0

    def builder(self, source: SourceType) -> XMLTreeBuilder:
        """Create a tree builder for ``source`` with this picker's configuration."""
        self._runs += 1
        self.logger.debug(
            "Starting pick",
            extra={
                "input_type": type(source).__name__,
                "selector": self.config.selector,
                "namespace_mode": self.config.namespace_mode.value,
            },
        )
        return XMLTreeBuilder.from_config(source, self.config)

    def iter_matches(self, source: SourceType) -> Iterator[Element]:
        """Lazily yield every match in ``source``."""
        for node in self.builder(source):
            self._matches += 1
            yield node

    def pick_file(self, path: Union[str, Path]) -> Iterator[Element]:
        """Lazily yield every match in the file at ``path``.

        ``-`` reads standard input. Gzip compressed files are decompressed
        when ``stream.auto_decompress`` is set. The file stays open until the
        iterator is exhausted or closed.
        """
        with open_source(path, self.config.stream.auto_decompress) as stream:
            yield from self.iter_matches(stream)

    @property
    def statistics(self) -> Dict[str, Any]:
        """Usage counters across all runs of this picker."""
        return {
            "runs": self._runs,
            "matches": self._matches,
            "correlation_id": self.correlation_id,
        }


def pick(
    source: SourceType,
    selector: str = "",
    namespace_mode: Union[NamespaceMode, str] = NamespaceMode.PREFIX,
    **overrides: Any,
) -> Iterator[Element]:
    """Lazily yield the matches of ``selector`` in ``source``.

    Args:
        source: bytes, str, a binary stream, or an iterable of byte chunks
        selector: Path pattern such as ``/feed/entry`` or ``/*/``
        namespace_mode: ``expand``, ``strip`` or ``prefix``
        **overrides: Further configuration overrides (``limits__max_depth=...``)

    Returns:
        Iterator over completed matches in document order

    Examples:
        >>> [n.name.local for n in pick(b"<a><b/><c/></a>", "/a/")]
        ['b', 'c']
    """
    picker = XMLPicker(selector=selector, namespace_mode=namespace_mode, **overrides)
    return picker.iter_matches(source)


def pick_string(
    xml_string: Union[str, bytes],
    selector: str = "",
    namespace_mode: Union[NamespaceMode, str] = NamespaceMode.PREFIX,
    **overrides: Any,
) -> List[Element]:
    """Pick all matches from an in-memory document.

    Returns:
        List of matches; each keeps its ancestor chain reachable
    """
    return list(pick(xml_string, selector, namespace_mode, **overrides))


def pick_file(
    path: Union[str, Path],
    selector: str = "",
    namespace_mode: Union[NamespaceMode, str] = NamespaceMode.PREFIX,
    **overrides: Any,
) -> Iterator[Element]:
    """Lazily yield the matches in the file at ``path`` (``-`` for stdin)."""
    picker = XMLPicker(selector=selector, namespace_mode=namespace_mode, **overrides)
    return picker.pick_file(path)

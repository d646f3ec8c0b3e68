"""Streaming, selector-driven tree building.

XMLTreeBuilder consumes tokens one at a time and keeps only the spine of
currently open elements plus the subtree under the current retention root.
Everything outside a match is discarded as soon as its end tag is seen, so
memory stays bounded by MaxDepth and the size of a single match.
"""

from enum import Enum, auto
from typing import Iterable, Iterator, List, Optional, Union

from xmlpicker.shared import (
    BuildStatistics,
    ChildLimitError,
    DepthLimitError,
    LimitsConfig,
    MismatchedEndElementError,
    NamespaceMode,
    ParserStateError,
    PickerConfig,
    TokenLimitError,
    UnexpectedEndElementError,
    UnexpectedEOFError,
    UnexpectedTokenError,
    get_logger,
)
from xmlpicker.tokenization import Token, TokenType, XMLTokenizer
from xmlpicker.tokenization.tokenizer import SourceType

from .namespaces import NamespaceScope
from .node import Element, Text
from .selector import PathSelector, Selector

# Token kinds that carry nothing the tree keeps
_IGNORED_TOKENS = frozenset({
    TokenType.COMMENT,
    TokenType.PROCESSING_INSTRUCTION,
    TokenType.DIRECTIVE,
})


class BuilderState(Enum):
    """Lifecycle of a tree builder."""

    READY = auto()   # More matches may follow
    DONE = auto()    # Input cleanly exhausted
    FAILED = auto()  # An error was raised; no further tokens are consumed


class XMLTreeBuilder:
    """Pull-based producer of one retained Node per selector match.

    Matches come out in document order. A returned match stays valid, with
    its ancestors reachable through ``parent``, until the caller drops it;
    callers should do so before asking for the next one.

    Example:
        >>> builder = XMLTreeBuilder.from_source(b"<a><b/><c/></a>", "/a/")
        >>> [node.name.local for node in builder]
        ['b', 'c']
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        selector: Selector,
        namespace_mode: NamespaceMode = NamespaceMode.PREFIX,
        limits: Optional[LimitsConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            tokens: Token stream, tokenized in the mode the policy needs
            selector: Decides which elements become retention roots
            namespace_mode: Namespace policy for element and attribute names
            limits: Resource caps (defaults apply when omitted)
            correlation_id: Optional correlation ID for log records
        """
        self.selector = selector
        self.namespace_mode = namespace_mode
        self.limits = limits or LimitsConfig()
        self.correlation_id = correlation_id
        self.statistics = BuildStatistics()
        self.state = BuilderState.READY
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder").bind(
            namespace_mode=namespace_mode.value
        )

        self._tokens: Iterator[Token] = iter(tokens)
        self._scope = NamespaceScope(namespace_mode)
        self._spine: List[Element] = []

    @classmethod
    def from_source(
        cls,
        source: SourceType,
        selector: Union[str, Selector] = "",
        namespace_mode: NamespaceMode = NamespaceMode.PREFIX,
        limits: Optional[LimitsConfig] = None,
        chunk_size: Optional[int] = None,
        correlation_id: Optional[str] = None,
    ) -> "XMLTreeBuilder":
        """Create a builder reading ``source`` with a matching tokenizer.

        Args:
            source: bytes, str, a binary stream, or an iterable of byte chunks
            selector: Pattern string or compiled selector
            namespace_mode: Namespace policy
            limits: Resource caps
            chunk_size: Tokenizer chunk size
            correlation_id: Optional correlation ID for log records
        """
        if isinstance(selector, str):
            selector = PathSelector(selector)
        tokenizer_mode = NamespaceScope(namespace_mode).tokenizer_mode
        if chunk_size is None:
            tokenizer = XMLTokenizer(tokenizer_mode, correlation_id=correlation_id)
        else:
            tokenizer = XMLTokenizer(tokenizer_mode, chunk_size, correlation_id)
        return cls(
            tokenizer.tokenize(source),
            selector,
            namespace_mode,
            limits,
            correlation_id,
        )

    @classmethod
    def from_config(cls, source: SourceType, config: PickerConfig) -> "XMLTreeBuilder":
        """Create a builder for ``source`` from a complete configuration."""
        return cls.from_source(
            source,
            config.selector,
            config.namespace_mode,
            config.limits,
            config.stream.chunk_size,
            config.correlation_id,
        )

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._spine)

    def __iter__(self) -> "XMLTreeBuilder":
        return self

    def __next__(self) -> Element:
        node = self.next_match()
        if node is None:
            raise StopIteration
        return node

    def next_match(self) -> Optional[Element]:
        """Consume tokens until the next match completes.

        Returns:
            The completed match, or None once the input is cleanly exhausted

        Raises:
            ParserStateError: If called after a previous error
            PickerError: Any syntax, structure or limit violation; the
                builder is failed afterwards
        """
        if self.state is BuilderState.FAILED:
            raise ParserStateError(
                "will no longer consume tokens, next_match() called after error"
            )
        if self.state is BuilderState.DONE:
            return None
        try:
            return self._advance()
        except Exception as e:
            self._fail(e)
            raise

    def _fail(self, error: Exception) -> None:
        self.state = BuilderState.FAILED
        self.statistics.finish()
        self._spine = []
        self.logger.warning(
            "Tree building stopped",
            extra={
                "error": str(error),
                "error_type": type(error).__name__,
                "tokens_consumed": self.statistics.tokens_consumed,
            },
        )

    def _advance(self) -> Optional[Element]:
        max_tokens = self.limits.max_tokens
        for token in self._tokens:
            self.statistics.tokens_consumed += 1
            if max_tokens is not None and self.statistics.tokens_consumed > max_tokens:
                raise TokenLimitError(max_tokens)

            if token.type is TokenType.START_ELEMENT:
                self._start_element(token)
            elif token.type is TokenType.END_ELEMENT:
                match = self._end_element(token)
                if match is not None:
                    return match
            elif token.type is TokenType.CHARACTER_DATA:
                self._character_data(token)
            elif token.type not in _IGNORED_TOKENS:
                raise UnexpectedTokenError(token)

        if self._spine:
            raise UnexpectedEOFError(self._spine[-1].path())
        self.state = BuilderState.DONE
        self.statistics.finish()
        self.logger.debug(
            "Input exhausted",
            extra=dict(
                self.statistics.to_dict(),
                tokens_per_second=round(self.statistics.tokens_per_second, 1),
            ),
        )
        return None

    def _start_element(self, token: Token) -> None:
        parent = self._spine[-1] if self._spine else None
        element = self._scope.open_element(token, parent)
        self._spine.append(element)
        self.statistics.elements_seen += 1

        depth = len(self._spine)
        if depth > self.statistics.max_depth_seen:
            self.statistics.max_depth_seen = depth
        if depth > self.limits.max_depth:
            raise DepthLimitError(self.limits.max_depth)

        if parent is None or not parent.is_recording:
            if self.selector.matches(element):
                element.start_recording()
            return

        element.start_recording()
        if parent.append_child(element) > self.limits.max_children:
            raise ChildLimitError(self.limits.max_children)

    def _end_element(self, token: Token) -> Optional[Element]:
        assert token.name is not None
        if not self._spine:
            raise UnexpectedEndElementError(token.name.local)
        element = self._spine[-1]
        if not self._scope.end_name_matches(element, token.name):
            raise MismatchedEndElementError(
                element.name.local,
                token.name.local,
                element.name.space,
                token.name.space,
            )
        self._spine.pop()

        parent = self._spine[-1] if self._spine else None
        if element.is_recording and (parent is None or not parent.is_recording):
            self.statistics.matches_yielded += 1
            if self.logger.is_debug_enabled():
                self.logger.debug(
                    "Match completed",
                    extra={
                        "path": element.path(),
                        "match_index": self.statistics.matches_yielded,
                    },
                )
            return element
        return None

    def _character_data(self, token: Token) -> None:
        if not self._spine:
            return
        element = self._spine[-1]
        if not element.is_recording:
            return
        text = token.text.strip()
        if not text:
            return
        self.statistics.text_nodes_recorded += 1
        if element.append_child(Text(text)) > self.limits.max_children:
            raise ChildLimitError(self.limits.max_children)

"""Pull-based XML tokenization on top of the expat push parser.

expat reports markup through callbacks while it is being fed. XMLTokenizer
feeds the source one chunk at a time, collects the callbacks of that chunk
into a small queue and hands them out as Token objects, so memory use is
bounded by the chunk size no matter how large the document is.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, BinaryIO, Deque, Iterable, Iterator, List, Optional, Tuple, Union
from xml.parsers import expat

from xmlpicker.shared.config import DEFAULT_CHUNK_SIZE
from xmlpicker.shared.errors import XMLSyntaxError
from xmlpicker.shared.logging import get_logger

# Separator handed to expat in resolving mode; namespace names cannot contain it
_NS_SEPARATOR = " "
_NO_ELEMENTS = expat.errors.codes[expat.errors.XML_ERROR_NO_ELEMENTS]

SourceType = Union[bytes, bytearray, str, BinaryIO, Iterable[bytes]]


class TokenType(Enum):
    """XML token kinds produced by the tokenizer."""

    START_ELEMENT = auto()
    END_ELEMENT = auto()
    CHARACTER_DATA = auto()
    COMMENT = auto()
    PROCESSING_INSTRUCTION = auto()
    DIRECTIVE = auto()


class TokenizerMode(Enum):
    """How element and attribute names are reported."""

    RESOLVE = auto()  # space holds the resolved namespace URI
    RAW = auto()      # space holds the literal prefix, xmlns attributes kept


@dataclass(frozen=True)
class QName:
    """Qualified name: local part plus a namespace identifier.

    What ``space`` holds depends on the namespace mode: a resolved URI, a
    literal prefix, or the empty string.
    """

    local: str
    space: str = ""

    def __str__(self) -> str:
        if self.space:
            return f"{self.space}:{self.local}"
        return self.local


@dataclass(frozen=True)
class TokenPosition:
    """Position of a token in the source (1-based)."""

    line: int
    column: int


@dataclass
class Token:
    """Single XML token.

    ``name`` is set for element tokens and processing instructions,
    ``attributes`` only for START_ELEMENT, ``text`` for everything that
    carries content.
    """

    type: TokenType
    name: Optional[QName] = None
    attributes: List[Tuple[QName, str]] = field(default_factory=list)
    text: str = ""
    position: Optional[TokenPosition] = None


def split_resolved_name(name: str) -> QName:
    """Split an expat ``URI local`` name."""
    space, _, local = name.rpartition(_NS_SEPARATOR)
    return QName(local, space)


def split_raw_name(name: str) -> QName:
    """Split a literal ``prefix:local`` name."""
    prefix, sep, local = name.partition(":")
    if not sep:
        return QName(name)
    return QName(local, prefix)


def iter_chunks(source: SourceType, chunk_size: int) -> Iterator[Any]:
    """Yield successive chunks from bytes, text, a readable stream or an iterable."""
    if isinstance(source, (bytes, bytearray, str)):
        for start in range(0, len(source), chunk_size):
            yield source[start:start + chunk_size]
        return
    if hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                return
            yield chunk
    else:
        for chunk in source:
            if chunk:
                yield chunk


class _ExpatSession:
    """Callback sink for one expat parser instance."""

    def __init__(self, mode: TokenizerMode) -> None:
        self.mode = mode
        self.pending: Deque[Token] = deque()
        self.depth = 0
        self.seen_element = False
        self._text: List[str] = []
        self._text_position: Optional[TokenPosition] = None
        if mode is TokenizerMode.RESOLVE:
            self.parser = expat.ParserCreate(namespace_separator=_NS_SEPARATOR)
            self._split = split_resolved_name
        else:
            self.parser = expat.ParserCreate()
            self._split = split_raw_name
        parser = self.parser
        parser.ordered_attributes = True
        parser.buffer_text = True
        parser.SetParamEntityParsing(expat.XML_PARAM_ENTITY_PARSING_NEVER)
        parser.StartElementHandler = self._start_element
        parser.EndElementHandler = self._end_element
        parser.CharacterDataHandler = self._character_data
        parser.CommentHandler = self._comment
        parser.ProcessingInstructionHandler = self._processing_instruction
        parser.XmlDeclHandler = self._xml_decl
        parser.StartDoctypeDeclHandler = self._doctype

    def _position(self) -> TokenPosition:
        return TokenPosition(
            self.parser.CurrentLineNumber, self.parser.CurrentColumnNumber + 1
        )

    def _emit(self, token: Token) -> None:
        self.flush_text()
        self.pending.append(token)

    def flush_text(self) -> None:
        """Turn buffered character data into a single token."""
        if not self._text:
            return
        self.pending.append(Token(
            TokenType.CHARACTER_DATA,
            text="".join(self._text),
            position=self._text_position,
        ))
        self._text = []
        self._text_position = None

    def _start_element(self, name: str, attributes: List[str]) -> None:
        split = self._split
        pairs = [
            (split(attributes[i]), attributes[i + 1])
            for i in range(0, len(attributes), 2)
        ]
        self.depth += 1
        self.seen_element = True
        self._emit(Token(
            TokenType.START_ELEMENT,
            name=split(name),
            attributes=pairs,
            position=self._position(),
        ))

    def _end_element(self, name: str) -> None:
        self.depth -= 1
        self._emit(Token(
            TokenType.END_ELEMENT, name=self._split(name), position=self._position()
        ))

    def _character_data(self, data: str) -> None:
        if not self._text:
            self._text_position = self._position()
        self._text.append(data)

    def _comment(self, data: str) -> None:
        self._emit(Token(TokenType.COMMENT, text=data, position=self._position()))

    def _processing_instruction(self, target: str, data: str) -> None:
        self._emit(Token(
            TokenType.PROCESSING_INSTRUCTION,
            name=QName(target),
            text=data,
            position=self._position(),
        ))

    def _xml_decl(
        self, version: Optional[str], encoding: Optional[str], standalone: int
    ) -> None:
        parts = [f'version="{version or "1.0"}"']
        if encoding:
            parts.append(f'encoding="{encoding}"')
        if standalone != -1:
            parts.append(f'standalone="{"yes" if standalone else "no"}"')
        self._emit(Token(
            TokenType.PROCESSING_INSTRUCTION,
            name=QName("xml"),
            text=" ".join(parts),
            position=self._position(),
        ))

    def _doctype(
        self,
        doctype_name: str,
        system_id: Optional[str],
        public_id: Optional[str],
        has_internal_subset: int,
    ) -> None:
        self._emit(Token(
            TokenType.DIRECTIVE,
            text=f"DOCTYPE {doctype_name}",
            position=self._position(),
        ))


class XMLTokenizer:
    """Conformant XML tokenizer producing a lazy stream of tokens.

    Works in two modes: RESOLVE performs namespace processing and reports
    resolved URIs, RAW keeps literal prefixes and leaves ``xmlns``
    declarations in the attribute list.
    """

    def __init__(
        self,
        mode: TokenizerMode = TokenizerMode.RESOLVE,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            mode: Name reporting mode
            chunk_size: Number of bytes (or characters) fed to expat at once
            correlation_id: Optional correlation ID for log records
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        self.mode = mode
        self.chunk_size = chunk_size
        self.logger = get_logger(__name__, correlation_id, "xml_tokenizer")

    def tokenize(self, source: SourceType) -> Iterator[Token]:
        """Lazily tokenize ``source``.

        Args:
            source: bytes, str, a binary stream, or an iterable of byte chunks

        Yields:
            Tokens in document order

        Raises:
            XMLSyntaxError: If the markup is malformed
        """
        session = _ExpatSession(self.mode)
        for chunk in iter_chunks(source, self.chunk_size):
            yield from self._feed(session, chunk, final=False)
        yield from self._feed(session, b"", final=True)

    def _feed(self, session: _ExpatSession, data: Any, final: bool) -> Iterator[Token]:
        error: Optional[XMLSyntaxError] = None
        try:
            session.parser.Parse(data, final)
        except expat.ExpatError as e:
            if final and e.code == _NO_ELEMENTS and (
                session.depth > 0 or not session.seen_element
            ):
                # Empty documents end cleanly; an open element is left for the
                # tree builder to report as an unexpected end of input.
                self.logger.debug(
                    "Input ended without closing the document",
                    extra={"open_elements": session.depth},
                )
            else:
                error = XMLSyntaxError(
                    expat.errors.messages.get(e.code, str(e)), e.lineno, e.offset + 1
                )
        if final or error is not None:
            session.flush_text()
        while session.pending:
            yield session.pending.popleft()
        if error is not None:
            self.logger.debug(
                "Tokenizer rejected input",
                extra={"line": error.line, "column": error.column},
            )
            raise error

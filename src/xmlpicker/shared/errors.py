"""Error taxonomy for streaming XML picking.

Every failure raised by the tokenizer, tree builder and exporter derives from
PickerError so callers can stop a whole run with a single except clause.
Once the tree builder raised any of these it is poisoned and must not be
asked for further matches.
"""

from typing import Optional

_PREFIX = "xmlpicker: "


class PickerError(Exception):
    """Base exception for all picker failures."""


class XMLSyntaxError(PickerError):
    """Lexical error reported by the tokenizer (malformed markup)."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None
    ) -> None:
        self.reason = message
        self.line = line
        self.column = column
        if line is not None:
            message = f"XML syntax error on line {line}: {message}"
        else:
            message = f"XML syntax error: {message}"
        super().__init__(message)


class StructuralError(PickerError):
    """Structure violation detected by the tree builder itself."""

    def __init__(self, message: str) -> None:
        super().__init__(_PREFIX + message)


class MismatchedEndElementError(StructuralError):
    """End tag does not close the currently open element."""

    def __init__(
        self,
        start_local: str,
        end_local: str,
        start_space: str = "",
        end_space: str = "",
    ) -> None:
        self.start_local = start_local
        self.end_local = end_local
        self.start_space = start_space
        self.end_space = end_space
        if start_local != end_local:
            message = f"element <{start_local}> closed by </{end_local}>"
        else:
            message = (
                f"element <{start_local}> in space {start_space} "
                f"closed by </{end_local}> in space {end_space}"
            )
        super().__init__(message)


class UnexpectedEndElementError(StructuralError):
    """End tag seen while no element is open."""

    def __init__(self, local: str) -> None:
        self.local = local
        super().__init__(f"unexpected end element </{local}>")


class UnexpectedEOFError(StructuralError):
    """Input ended while an element was still open."""

    def __init__(self, path: str = "") -> None:
        self.path = path
        message = "unexpected EOF"
        if path:
            message = f"{message} inside {path}"
        super().__init__(message)


class UnexpectedTokenError(StructuralError):
    """Tokenizer produced a token kind the builder does not know."""

    def __init__(self, token: object) -> None:
        self.token = token
        super().__init__(f"unexpected xml token {token!r}")


class LimitExceededError(PickerError):
    """A configured resource cap was exceeded."""

    description = "limit"

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"{_PREFIX}{self.description} reached {limit}")


class DepthLimitError(LimitExceededError):
    """Open element stack grew beyond max_depth."""

    description = "depth limit"


class ChildLimitError(LimitExceededError):
    """A single node received more than max_children children."""

    description = "maximum node child limit"


class TokenLimitError(LimitExceededError):
    """More than max_tokens tokens were consumed."""

    description = "token limit"


class NamespaceResolutionError(PickerError):
    """Exporter met a prefix that no ancestor declares."""

    def __init__(self, prefix: str, path: str) -> None:
        self.prefix = prefix
        self.path = path
        super().__init__(f"{_PREFIX}undeclared prefix {prefix} at {path}")


class ParserStateError(PickerError):
    """Tree builder used after it failed."""

    def __init__(self, message: str) -> None:
        super().__init__(_PREFIX + message)

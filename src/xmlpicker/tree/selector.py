"""Fixed-depth path selectors.

A selector is compiled once from a ``/``-separated pattern and then used as a
pure predicate over a candidate element's ancestor chain:

    ""          the root element (same as "/" and "*")
    "/a"        the root element if it is named ``a``
    "/a/"       every child of the root ``a`` (trailing slash adds one level)
    "/*/b"      every ``b`` child of the root, whatever the root is called
    "/a//c"     an empty interior segment is a wildcard too

Only local names are compared; namespaces never take part in matching.
"""

from typing import Optional, Protocol, Sequence, Tuple

from .node import Element

WILDCARD = "*"


class Selector(Protocol):
    """Anything that can decide whether an element starts a match."""

    def matches(self, element: Element) -> bool:
        ...


class PathSelector:
    """Selector matching elements at an exact depth by local name."""

    def __init__(self, pattern: str = "") -> None:
        self.pattern = pattern
        segments = [segment.strip() for segment in pattern.strip().split("/")]
        if len(segments) > 1 and segments[0] == "":
            segments = segments[1:]
        self.match_length = len(segments)
        # Stored leaf first so matching walks upward from the candidate
        self._matchers: Tuple[Optional[str], ...] = tuple(
            None if segment in ("", WILDCARD) else segment
            for segment in reversed(segments)
        )

    @property
    def segments(self) -> Sequence[Optional[str]]:
        """Segment matchers from the root downward; None is a wildcard."""
        return tuple(reversed(self._matchers))

    def matches(self, element: Element) -> bool:
        """Check whether ``element`` is a retention root for this pattern."""
        if element.depth != self.match_length:
            return False
        node: Optional[Element] = element
        for matcher in self._matchers:
            if node is None:
                return False
            if matcher is not None and matcher != node.name.local:
                return False
            node = node.parent
        return True

    def __repr__(self) -> str:
        return f"PathSelector({self.pattern!r})"


def compile_selector(pattern: str = "") -> PathSelector:
    """Compile a textual pattern into a selector."""
    return PathSelector(pattern)

"""Tokenization layer for streaming XML picking.

Key Components:
    XMLTokenizer: Pull-based tokenizer over a byte or text source
    Token: Single start/end element, character data, comment, PI or directive
    TokenType: Enumeration of token kinds
    TokenizerMode: Resolved-namespace or raw-prefix name reporting
    QName: Local name plus namespace identifier
"""

from .tokenizer import (
    QName,
    Token,
    TokenizerMode,
    TokenPosition,
    TokenType,
    XMLTokenizer,
    iter_chunks,
    split_raw_name,
    split_resolved_name,
)

__all__ = [
    "QName",
    "Token",
    "TokenizerMode",
    "TokenPosition",
    "TokenType",
    "XMLTokenizer",
    "iter_chunks",
    "split_raw_name",
    "split_resolved_name",
]

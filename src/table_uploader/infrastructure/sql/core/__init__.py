"""Core SQL utilities package."""

from .identifier import (
    escape_identifier,
    escape_identifiers,
    escape_value,
    needs_quoting,
    qualify_table,
    quote_literal,
    unescape_value,
)
from .reserved_words import check_reserved_words, is_reserved_word

__all__ = [
    "escape_identifier",
    "escape_identifiers",
    "escape_value",
    "needs_quoting",
    "qualify_table",
    "quote_literal",
    "unescape_value",
    "check_reserved_words",
    "is_reserved_word",
]

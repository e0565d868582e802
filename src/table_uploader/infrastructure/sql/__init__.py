"""
SQL module for upload statement generation.

Identifier escaping, per-dialect statement rendering and the CTAS literal
builder live here; nothing in this package talks to a database.
"""

from .core.identifier import escape_identifiers, qualify_table, quote_literal
from .dialects import Dialect, get_dialect, register_dialect
from .operations import CtasBuilder, InsertBuilder

__all__ = [
    "escape_identifiers",
    "qualify_table",
    "quote_literal",
    "Dialect",
    "get_dialect",
    "register_dialect",
    "CtasBuilder",
    "InsertBuilder",
]

"""
SQL identifier and literal escaping.

Plain identifiers (letter first, then letters, digits or underscores) are
emitted as-is; anything else is wrapped in the connection's quote character.
Escaping always handles backslashes first and the quote character second, so
``unescape_value`` can reverse it exactly.
"""

import re
from typing import Iterable, List, Optional

from table_uploader.io.loader.models import IdentifierQuotingError

PLAIN_IDENTIFIER = re.compile(r"[A-Za-z][A-Za-z0-9_]*")

LITERAL_QUOTE = "'"


def needs_quoting(name: str) -> bool:
    """Return True when ``name`` cannot be used as a bare SQL identifier."""
    return PLAIN_IDENTIFIER.fullmatch(name) is None


def escape_value(value: str, quote: Optional[str] = '"') -> str:
    """
    Escape ``value`` and wrap it in ``quote``.

    Examples:
        >>> escape_value('my col')
        '"my col"'
        >>> escape_value('a"b')
        '"a\\\\"b"'
        >>> escape_value("it's", quote="'")
        "'it\\\\'s'"
    """
    quote = quote or ""
    escaped = str(value).replace("\\", "\\\\")
    if quote:
        escaped = escaped.replace(quote, "\\" + quote)
    return f"{quote}{escaped}{quote}"


def unescape_value(quoted: str, quote: Optional[str] = '"') -> str:
    """Reverse escape_value."""
    quote = quote or ""
    body = quoted
    if quote and len(body) >= 2 * len(quote) and body.startswith(quote) and body.endswith(quote):
        body = body[len(quote) : -len(quote)]
    result: List[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            result.append(body[i + 1])
            i += 2
            continue
        result.append(char)
        i += 1
    return "".join(result)


def quote_literal(value: str) -> str:
    """Quote a text value for embedding in a SQL statement as a string literal."""
    return escape_value(value, LITERAL_QUOTE)


def escape_identifiers(names: Iterable[str], quote: Optional[str]) -> List[str]:
    """
    Make identifiers safe to embed in SQL.

    Args:
        names: Table or column names
        quote: Identifier quote character, or None when the connection
            doesn't support quoted identifiers

    Returns:
        Names in the same order, quoted only where required

    Raises:
        IdentifierQuotingError: If a name needs quoting and ``quote`` is None
    """
    names = [str(name) for name in names]
    offending = [name for name in names if needs_quoting(name)]
    if offending and not quote:
        raise IdentifierQuotingError(offending)
    return [escape_value(name, quote) if needs_quoting(name) else name for name in names]


def escape_identifier(name: str, quote: Optional[str]) -> str:
    return escape_identifiers([name], quote)[0]


def qualify_table(
    table: str,
    schema: Optional[str] = None,
    quote: Optional[str] = '"',
) -> str:
    """
    Create a table reference with an optional schema prefix.

    Schema and table are escaped separately so a dot never ends up inside
    a quoted identifier.

    Examples:
        >>> qualify_table("person", schema="scratch")
        'scratch.person'
        >>> qualify_table("my table", schema="scratch")
        'scratch."my table"'
    """
    quoted_table = escape_identifier(table, quote)
    if schema:
        return f"{escape_identifier(schema, quote)}.{quoted_table}"
    return quoted_table

"""
CREATE TABLE AS SELECT statement builder.

Each row becomes ``SELECT <literal>, <literal>`` and rows are joined with
UNION ALL. The first row casts every cell to its inferred type and carries
the column aliases, which fixes the column types of the whole union.
"""

import datetime
import math
from typing import Any, Iterable, List, Sequence

import pandas as pd

from table_uploader.io.loader.models import ColumnDescriptor, InsertPlan, SemanticType

from ..core.identifier import quote_literal
from ..dialects.base import Dialect

NULL_LITERAL = "NULL"


def is_missing(value: Any) -> bool:
    if value is None or value is pd.NaT:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def format_literal(value: Any, semantic_type: SemanticType) -> str:
    """
    Render one cell as a SQL literal.

    Numbers are unquoted, text and dates are quoted string literals and
    missing values (including non-finite floats) become NULL.

    Examples:
        >>> format_literal(42, SemanticType.INTEGER32)
        '42'
        >>> format_literal("O'Hara", SemanticType.TEXT)
        "'O\\\\'Hara'"
        >>> format_literal(None, SemanticType.TEXT)
        'NULL'
    """
    if is_missing(value):
        return NULL_LITERAL
    if semantic_type in (SemanticType.INTEGER32, SemanticType.INTEGER64):
        return str(int(value))
    if semantic_type == SemanticType.FLOAT:
        number = float(value)
        if not math.isfinite(number):
            return NULL_LITERAL
        return repr(number)
    if semantic_type == SemanticType.DATETIME:
        return quote_literal(pd.Timestamp(value).to_pydatetime().isoformat(sep=" "))
    if semantic_type == SemanticType.DATE:
        if isinstance(value, datetime.datetime):
            value = value.date()
        return quote_literal(value.isoformat())
    return quote_literal(str(value))


def build_select_rows(
    columns: Sequence[ColumnDescriptor],
    quoted_columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
) -> str:
    """Build the ``SELECT ... UNION ALL SELECT ...`` body for the given rows."""
    selects: List[str] = []
    for index, row in enumerate(rows):
        literals = [format_literal(value, col.semantic_type) for value, col in zip(row, columns)]
        if index == 0:
            cells = [
                f"CAST({literal} AS {col.sql_type}) AS {name}"
                for literal, col, name in zip(literals, columns, quoted_columns)
            ]
        else:
            cells = literals
        selects.append("SELECT " + ", ".join(cells))
    return " UNION ALL ".join(selects)


class CtasBuilder:
    def __init__(self, dialect: Dialect):
        self.dialect = dialect

    def build(self, plan: InsertPlan, rows: Iterable[Sequence[Any]]) -> str:
        body = build_select_rows(plan.columns, plan.quoted_columns, rows)
        return self.dialect.build_ctas(
            plan.qualified_name, body, temporary=plan.target.is_temporary
        )

"""
Base SQL dialect.

A dialect bundles everything that differs between backends for an upload:
identifier quoting, the temp-table convention, bulk-load and CTAS
eligibility, statement rendering and parameter placeholder syntax. The
connection collaborator picks one dialect when it is constructed.
"""

from typing import Any, List, Optional, Sequence

from ..core.identifier import qualify_table

QMARK = "qmark"
FORMAT = "format"
NUMERIC = "numeric"


class Dialect:
    """Generic dialect; SQL Server syntax for statements, ``#`` temp tables."""

    name = "generic"
    identifier_quote: Optional[str] = '"'
    paramstyle = QMARK
    # "prefix": temp tables are named "#name"; "session": CREATE TEMP TABLE name
    temp_table_style = "prefix"
    temp_table_prefix = "#"
    supports_ctas = False
    bulk_load_creates_table = False

    def __init__(self, name: Optional[str] = None):
        if name:
            self.name = name

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    # Capabilities -----------------------------------------------------

    def supports_bulk_load(self, create_table: bool, temporary: bool) -> bool:
        """Whether a native bulk loader can target this table."""
        return False

    def prefers_ctas(self, create_table: bool, row_count: int) -> bool:
        """Whether a freshly created, non-empty table should be built with CTAS."""
        return self.supports_ctas and create_table and row_count > 0

    # Naming -----------------------------------------------------------

    def qualify(
        self,
        table: str,
        schema: Optional[str] = None,
        temporary: bool = False,
        quote: Optional[str] = '"',
    ) -> str:
        """
        Create the table reference used in every generated statement.

        Temp tables are never schema-qualified; prefix-style dialects put the
        temp marker in front of the escaped name.
        """
        if temporary:
            quoted = qualify_table(table, None, quote)
            if self.temp_table_style == "prefix":
                return f"{self.temp_table_prefix}{quoted}"
            return quoted
        return qualify_table(table, schema, quote)

    # Statements -------------------------------------------------------

    def build_drop_if_exists(self, qualified_table: str, temporary: bool = False) -> str:
        catalog_name = f"tempdb..{qualified_table}" if temporary else qualified_table
        catalog_name = catalog_name.replace("'", "''")
        return (
            f"IF OBJECT_ID('{catalog_name}', 'U') IS NOT NULL "
            f"DROP TABLE {qualified_table};"
        )

    def create_table_keyword(self, temporary: bool = False) -> str:
        if temporary and self.temp_table_style == "session":
            return "CREATE TEMP TABLE"
        return "CREATE TABLE"

    def build_create_table(
        self,
        qualified_table: str,
        columns: Sequence[str],
        sql_types: Sequence[str],
        temporary: bool = False,
    ) -> str:
        definition = ", ".join(f"{col} {sql_type}" for col, sql_type in zip(columns, sql_types))
        return f"{self.create_table_keyword(temporary)} {qualified_table} ({definition});"

    def build_insert(self, qualified_table: str, columns: Sequence[str]) -> str:
        placeholders = ",".join("?" for _ in columns)
        return f"INSERT INTO {qualified_table} ({','.join(columns)}) VALUES ({placeholders})"

    def build_ctas(
        self,
        qualified_table: str,
        select_body: str,
        temporary: bool = False,
    ) -> str:
        return f"{self.create_table_keyword(temporary)} {qualified_table} AS SELECT * FROM ({select_body}) t;"

    # Parameters -------------------------------------------------------

    def translate_placeholders(self, sql: str) -> str:
        """
        Rewrite generic ``?`` placeholders into this dialect's paramstyle.

        Question marks inside quoted literals or quoted identifiers are left
        untouched; for the ``format`` style literal percent signs are doubled.
        """
        if self.paramstyle == QMARK:
            return sql

        out: List[str] = []
        quote_char: Optional[str] = None
        position = 0
        i = 0
        while i < len(sql):
            char = sql[i]
            if quote_char:
                out.append(char)
                if char == "\\" and i + 1 < len(sql):
                    out.append(sql[i + 1])
                    i += 2
                    continue
                if char == quote_char:
                    quote_char = None
            elif char in ("'", '"', "`"):
                quote_char = char
                out.append(char)
            elif char == "?":
                position += 1
                out.append(":%d" % position if self.paramstyle == NUMERIC else "%s")
            else:
                out.append(char)
            if char == "%" and self.paramstyle == FORMAT:
                out.append("%")
            i += 1
        return "".join(out)

    def execute_batch(self, cursor: Any, sql: str, rows: Sequence[Sequence[Any]]) -> None:
        """Send one batch of parameter rows through a DB-API cursor."""
        cursor.executemany(sql, rows)

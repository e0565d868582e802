"""
PostgreSQL-family SQL dialects.

PostgreSQL and Redshift share double-quoted identifiers, ``%s`` placeholders
for psycopg2, ``DROP TABLE IF EXISTS`` and session temp tables
(``CREATE TEMP TABLE name``).
"""

from typing import Any, Sequence

from psycopg2.extras import execute_batch

from .base import FORMAT, Dialect


class PostgreSQLDialect(Dialect):
    """PostgreSQL SQL dialect implementation."""

    name = "postgresql"
    paramstyle = FORMAT
    temp_table_style = "session"

    def supports_bulk_load(self, create_table: bool, temporary: bool) -> bool:
        # psql \copy runs in its own session and cannot see our temp tables
        return not temporary

    def build_drop_if_exists(self, qualified_table: str, temporary: bool = False) -> str:
        return f"DROP TABLE IF EXISTS {qualified_table};"

    def execute_batch(self, cursor: Any, sql: str, rows: Sequence[Sequence[Any]]) -> None:
        """Use psycopg2's paged execution instead of one round trip per row."""
        execute_batch(cursor, sql, rows, page_size=max(len(rows), 1))


class RedshiftDialect(PostgreSQLDialect):
    """Amazon Redshift: S3-staged COPY and CTAS for new tables."""

    name = "redshift"
    supports_ctas = True

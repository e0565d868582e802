"""
Insert strategy selection.

Rules, first match wins:

1. Bulk load was requested and the dialect can bulk load into this table
   (Hive only when the table is being created; Redshift, PDW and PostgreSQL
   only for non-temp tables).
2. The dialect is MPP-style (PDW, Redshift, BigQuery, Hive), the table is
   being created and there is at least one row: one CREATE TABLE AS SELECT.
3. Otherwise: batched parameterized inserts.
"""

from table_uploader.infrastructure.sql.dialects import Dialect, get_dialect
from table_uploader.io.loader.models import InsertStrategy


def select_strategy(
    dialect,
    create_table: bool,
    is_temporary: bool,
    bulk_load_requested: bool,
    row_count: int,
) -> InsertStrategy:
    """
    Decide how to move the rows to the server.

    Args:
        dialect: Dialect instance or dialect name
        create_table: Whether the call creates the table
        is_temporary: Whether the target is a temp table
        bulk_load_requested: Whether the caller asked for bulk loading
        row_count: Number of rows to upload

    Examples:
        >>> select_strategy("redshift", True, False, False, 5)
        <InsertStrategy.CTAS_HACK: 'ctas_hack'>
        >>> select_strategy("redshift", True, False, True, 5)
        <InsertStrategy.BULK_LOAD: 'bulk_load'>
    """
    if not isinstance(dialect, Dialect):
        dialect = get_dialect(dialect)

    if bulk_load_requested and dialect.supports_bulk_load(create_table, is_temporary):
        return InsertStrategy.BULK_LOAD
    if dialect.prefers_ctas(create_table, row_count):
        return InsertStrategy.CTAS_HACK
    return InsertStrategy.DIRECT_INSERT

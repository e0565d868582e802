"""
Upload path for SQLAlchemy engines and connections.

The inferred columns become a SQLAlchemy ``Table``; drop and create go
through the metadata API and rows are inserted in batches with executemany
semantics. An Engine gets its own transaction; a Connection is used as-is
and the caller owns its transaction.
"""

import time
from typing import Any, Dict, List, Sequence, Union

import pandas as pd
from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
)
from sqlalchemy.engine import Connection, Engine

from table_uploader.io.loader.binding import bind_rows, iter_batches
from table_uploader.io.loader.models import ColumnDescriptor, SemanticType, TableTarget
from table_uploader.io.loader.progress import UploadProgress
from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)

SqlAlchemyConnectable = Union[Engine, Connection]


def is_sqlalchemy_connectable(connection: Any) -> bool:
    return isinstance(connection, (Engine, Connection))


def column_type(column: ColumnDescriptor):
    if column.semantic_type == SemanticType.INTEGER32:
        return Integer()
    if column.semantic_type == SemanticType.INTEGER64:
        return BigInteger()
    if column.semantic_type == SemanticType.FLOAT:
        return Float()
    if column.semantic_type == SemanticType.DATE:
        return Date()
    if column.semantic_type == SemanticType.DATETIME:
        return DateTime()
    return String(column.max_text_length)


def build_table(target: TableTarget, columns: Sequence[ColumnDescriptor]) -> Table:
    """Create the SQLAlchemy Table for an upload target."""
    metadata = MetaData()
    if target.is_temporary:
        return Table(
            target.name,
            metadata,
            *[Column(col.name, column_type(col)) for col in columns],
            prefixes=["TEMPORARY"],
        )
    return Table(
        target.name,
        metadata,
        *[Column(col.name, column_type(col)) for col in columns],
        schema=target.schema,
    )


class SqlAlchemyTableWriter:
    """Writes a frame through SQLAlchemy Core."""

    def __init__(
        self,
        connectable: SqlAlchemyConnectable,
        batch_size: int,
        progress_bar: bool = False,
        progress_callback=None,
    ):
        self.connectable = connectable
        self.batch_size = batch_size
        self.progress_bar = progress_bar
        self.progress_callback = progress_callback

    def write(
        self,
        target: TableTarget,
        columns: Sequence[ColumnDescriptor],
        frame: pd.DataFrame,
        drop_table_if_exists: bool,
        create_table: bool,
    ) -> int:
        """Returns the number of batches executed."""
        table = build_table(target, columns)
        if isinstance(self.connectable, Engine):
            with self.connectable.begin() as conn:
                return self._write(conn, table, columns, frame, drop_table_if_exists, create_table)
        return self._write(
            self.connectable, table, columns, frame, drop_table_if_exists, create_table
        )

    def _write(
        self,
        conn: Connection,
        table: Table,
        columns: Sequence[ColumnDescriptor],
        frame: pd.DataFrame,
        drop_table_if_exists: bool,
        create_table: bool,
    ) -> int:
        if drop_table_if_exists:
            table.drop(conn, checkfirst=True)
        if create_table:
            table.create(conn)

        names = [col.name for col in columns]
        progress = UploadProgress(
            len(frame), show_bar=self.progress_bar, callback=self.progress_callback
        )
        progress.start()
        batches = 0
        try:
            for batch in iter_batches(frame, self.batch_size):
                started = time.perf_counter()
                records: List[Dict[str, Any]] = [
                    dict(zip(names, row)) for row in bind_rows(batch, columns)
                ]
                conn.execute(table.insert(), records)
                batches += 1
                progress.update(len(records))
                logger.debug(
                    "insert.batch.executed",
                    table=table.name,
                    batch=batches,
                    rows=len(records),
                    duration_ms=(time.perf_counter() - started) * 1000,
                )
        finally:
            progress.finish()
        return batches

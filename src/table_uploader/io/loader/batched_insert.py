"""
Batched parameterized inserts.

Rows are bound per semantic type and sent in fixed-size batches, strictly
in source order. When the connection is in auto-commit mode it is switched
to manual commit for the duration of the call and every batch is committed
as one unit; the original setting is restored on every exit path.
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

import pandas as pd

from table_uploader.config import DEFAULT_BATCH_SIZE
from table_uploader.infrastructure.sql.operations.insert import InsertBuilder
from table_uploader.io.connectors.connection import DatabaseConnection
from table_uploader.io.loader.binding import bind_rows, bind_values, iter_batches
from table_uploader.io.loader.models import InsertPlan, Int64TransportError, SemanticType
from table_uploader.io.loader.progress import UploadProgress
from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)

# Values straddling the 32-bit boundary in both directions
INT64_CHECK_VALUES = [1, -1, 8589934592, -8589934592]


def _try_setting_autocommit(connection: DatabaseConnection, value: bool) -> bool:
    try:
        connection.set_autocommit(value)
        return True
    except Exception as exc:  # pragma: no cover - driver specific
        logger.warning("insert.autocommit.toggle_failed", value=value, error=str(exc))
        return False


@contextmanager
def suspended_autocommit(connection: DatabaseConnection) -> Iterator[bool]:
    """
    Turn auto-commit off for the enclosed block if it is on, then restore it.

    Yields True when the connection is in manual-commit mode inside the block.
    """
    was_autocommit = connection.get_autocommit()
    if not was_autocommit:
        yield True
        return

    suspended = _try_setting_autocommit(connection, False)
    try:
        yield suspended
    finally:
        if suspended:
            _try_setting_autocommit(connection, True)


def validate_int64_transport(connection: DatabaseConnection) -> None:
    """
    Check that 64-bit integers survive binding before any BIGINT data is sent.

    Raises:
        Int64TransportError: If a check value is altered or rejected
    """
    expected = pd.Series(INT64_CHECK_VALUES, dtype="int64")
    bound = bind_values(expected.tolist(), SemanticType.INTEGER64)
    if bound != INT64_CHECK_VALUES or not connection.validate_int64(bound):
        raise Int64TransportError("Error converting 64-bit integers for the database driver")


class BatchedInsertExecutor:
    """Executes DirectInsert plans."""

    def __init__(
        self,
        connection: DatabaseConnection,
        batch_size: int = DEFAULT_BATCH_SIZE,
        progress_bar: bool = False,
        progress_callback: Optional[Callable[[float], None]] = None,
        temp_emulation_schema: Optional[str] = None,
    ):
        self.connection = connection
        self.temp_emulation_schema = temp_emulation_schema
        self.batch_size = batch_size
        self.progress_bar = progress_bar
        self.progress_callback = progress_callback
        self.statements: List[str] = []

    def build_statement(self, plan: InsertPlan) -> str:
        """INSERT with one placeholder per column, translated for the connection."""
        sql = InsertBuilder(self.connection.dialect).insert(plan)
        return self.connection.dialect.translate_placeholders(
            self.connection.translate(sql, temp_emulation_schema=self.temp_emulation_schema)
        )

    def execute(self, plan: InsertPlan, frame: pd.DataFrame) -> int:
        """
        Send every row of ``frame`` into the plan's table.

        Returns:
            Number of batches executed

        Raises:
            Int64TransportError: If a BIGINT column exists and the check fails
        """
        if any(column.sql_type == "BIGINT" for column in plan.columns):
            validate_int64_transport(self.connection)

        sql = self.build_statement(plan)
        self.statements.append(sql)
        total_rows = len(frame)
        batches = 0

        with suspended_autocommit(self.connection) as manual_commit:
            if total_rows == 0:
                return 0

            progress = UploadProgress(
                total_rows, show_bar=self.progress_bar, callback=self.progress_callback
            )
            progress.start()
            try:
                for batch in iter_batches(frame, self.batch_size):
                    started = time.perf_counter()
                    rows = bind_rows(batch, plan.columns)
                    self.connection.execute_batch(sql, rows)
                    if manual_commit:
                        self.connection.commit()
                    batches += 1
                    progress.update(len(rows))
                    logger.debug(
                        "insert.batch.executed",
                        table=plan.qualified_name,
                        batch=batches,
                        rows=len(rows),
                        duration_ms=(time.perf_counter() - started) * 1000,
                    )
            finally:
                progress.finish()

        return batches

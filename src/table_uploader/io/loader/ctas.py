"""CREATE TABLE AS SELECT materialization for MPP-style dialects."""

import time
from typing import List, Optional

import pandas as pd

from table_uploader.infrastructure.sql.operations.ctas import CtasBuilder
from table_uploader.io.connectors.connection import DatabaseConnection
from table_uploader.io.loader.models import InsertPlan
from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)


class CtasMaterializer:
    """
    Creates and fills the target table with one CTAS statement.

    The table must not exist yet; the create step is skipped for this strategy.
    """

    def __init__(
        self, connection: DatabaseConnection, temp_emulation_schema: Optional[str] = None
    ):
        self.connection = connection
        self.temp_emulation_schema = temp_emulation_schema
        self.statements: List[str] = []

    def build_statement(self, plan: InsertPlan, frame: pd.DataFrame) -> str:
        rows = frame.itertuples(index=False, name=None)
        sql = CtasBuilder(self.connection.dialect).build(plan, rows)
        return self.connection.translate(sql, temp_emulation_schema=self.temp_emulation_schema)

    def execute(self, plan: InsertPlan, frame: pd.DataFrame) -> int:
        """Run the statement; returns the number of statements executed."""
        started = time.perf_counter()
        sql = self.build_statement(plan, frame)
        self.statements.append(sql)
        self.connection.execute(sql)
        logger.info(
            "insert.ctas.executed",
            table=plan.qualified_name,
            rows=len(frame),
            sql_length=len(sql),
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return 1

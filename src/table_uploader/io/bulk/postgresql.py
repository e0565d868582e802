"""PostgreSQL bulk load through psql's client-side \\copy."""

import time

import pandas as pd

from table_uploader.io.bulk.base import BulkLoadAdapter
from table_uploader.io.bulk.config import PostgresBulkConfig
from table_uploader.io.loader.models import InsertPlan
from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)


class PostgresBulkLoader(BulkLoadAdapter):
    backend = "postgresql"
    config: PostgresBulkConfig

    def verify(self) -> None:
        self.require_executable(self.config.psql_executable, "POSTGRES_PATH")

    def build_copy(self, plan: InsertPlan, file_path: str) -> str:
        columns = ", ".join(plan.quoted_columns)
        return (
            f"\\copy {plan.qualified_name} ({columns}) FROM '{file_path}' "
            "NULL '' DELIMITER ',' CSV HEADER;"
        )

    def build_command(self, plan: InsertPlan, file_path: str):
        details = self.connection.details
        args = [self.config.psql_executable, "-h", details.host, "-d", details.database]
        if details.port:
            args.extend(["-p", str(details.port)])
        args.extend(["-U", details.user, "-c", self.build_copy(plan, file_path)])
        return args

    def load(self, plan: InsertPlan, frame: pd.DataFrame) -> int:
        started = time.perf_counter()
        file_path = self.transport.write_file(
            self.staging_file_name(".csv"), self.render_delimited(plan, frame)
        )
        try:
            command = self.build_command(plan, file_path)
            self.statements.append(command[-1])
            # Password travels in the child environment, never on the command line
            self.run_checked(command, env={"PGPASSWORD": self.connection.details.password})
        finally:
            self.remove_quietly(file_path)

        logger.info(
            "bulk_load.postgresql.copy",
            table=plan.qualified_name,
            rows=len(frame),
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return len(frame)

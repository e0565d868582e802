"""PDW bulk load through the dwloader client."""

import time

import pandas as pd

from table_uploader.io.bulk.base import REDACTED, BulkLoadAdapter
from table_uploader.io.bulk.config import PdwBulkConfig
from table_uploader.io.loader.models import InsertPlan
from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)

FIELD_DELIMITER = "|"


class PdwBulkLoader(BulkLoadAdapter):
    backend = "pdw"
    config: PdwBulkConfig

    def verify(self) -> None:
        self.require_executable(self.config.dwloader_path, "DWLOADER_PATH")

    def build_command(self, plan: InsertPlan, file_path: str, redact: bool = False):
        details = self.connection.details
        server = f"{details.host},{details.port}" if details.port else details.host
        return [
            self.config.dwloader_path,
            "-M", "append",
            "-e", "UTF8",
            "-i", file_path,
            "-T", plan.qualified_name,
            "-R", f"{file_path}.rejects",
            "-fh", "1",
            "-t", FIELD_DELIMITER,
            "-r", "\\n",
            "-D", "ymd",
            "-E",
            "-se",
            "-rv", "1",
            "-S", server,
            "-U", details.user,
            "-P", REDACTED if redact else details.password,
        ]

    def load(self, plan: InsertPlan, frame: pd.DataFrame) -> int:
        started = time.perf_counter()
        payload = self.render_delimited(plan, frame, sep=FIELD_DELIMITER, compress=True)
        file_path = self.transport.write_file(self.staging_file_name(".txt.gz"), payload)
        try:
            self.statements.append(" ".join(self.build_command(plan, file_path, redact=True)))
            self.run_checked(self.build_command(plan, file_path))
        finally:
            self.remove_quietly(file_path)

        logger.info(
            "bulk_load.pdw.dwloader",
            table=plan.qualified_name,
            rows=len(frame),
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return len(frame)

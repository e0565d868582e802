"""
Hive bulk load.

The rows are written as a ``\\x01``-delimited text file, copied to an edge
node with scp, pushed into HDFS with ``hadoop fs -put`` over ssh, and the
table is then declared as a text table over that HDFS directory. The
upstream CREATE TABLE is skipped for this path.
"""

import posixpath
import time
from typing import List

import pandas as pd

from table_uploader.io.bulk.base import BulkLoadAdapter
from table_uploader.io.bulk.config import HiveBulkConfig
from table_uploader.io.loader.models import InsertPlan
from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)

FIELD_DELIMITER = "\x01"
NULL_MARKER = "\\N"


class HiveBulkLoader(BulkLoadAdapter):
    backend = "hive"
    config: HiveBulkConfig

    def verify(self) -> None:
        self.require_executable("scp", "scp")
        self.require_executable("ssh", "ssh")

    def _key_args(self) -> List[str]:
        return ["-i", self.config.hive_keyfile] if self.config.hive_keyfile else []

    def hdfs_location(self, plan: InsertPlan) -> str:
        return posixpath.join(self.config.hive_hdfs_folder, plan.target.name)

    def build_scp(self, local_path: str, remote_path: str) -> List[str]:
        return (
            ["scp", "-P", str(self.config.hive_ssh_port)]
            + self._key_args()
            + [local_path, f"{self.config.ssh_target}:{remote_path}"]
        )

    def build_ssh(self, remote_command: str) -> List[str]:
        return (
            ["ssh", "-p", str(self.config.hive_ssh_port)]
            + self._key_args()
            + [self.config.ssh_target, remote_command]
        )

    def build_create(self, plan: InsertPlan) -> str:
        definition = ", ".join(
            f"{name} {sql_type}" for name, sql_type in zip(plan.quoted_columns, plan.sql_types)
        )
        return (
            f"CREATE TABLE {plan.qualified_name} ({definition}) "
            "ROW FORMAT DELIMITED FIELDS TERMINATED BY '\\001' "
            f"STORED AS TEXTFILE LOCATION '{self.hdfs_location(plan)}';"
        )

    def load(self, plan: InsertPlan, frame: pd.DataFrame) -> int:
        started = time.perf_counter()
        file_name = self.staging_file_name(".txt")
        payload = self.render_delimited(
            plan, frame, sep=FIELD_DELIMITER, na_rep=NULL_MARKER, header=False
        )
        local_path = self.transport.write_file(file_name, payload)
        remote_path = posixpath.join(self.config.hive_node_folder, file_name)
        location = self.hdfs_location(plan)
        try:
            self.run_checked(self.build_scp(local_path, remote_path))
            self.run_checked(
                self.build_ssh(
                    f"hadoop fs -mkdir -p {location} && "
                    f"hadoop fs -put -f {remote_path} {location}/ && "
                    f"rm -f {remote_path}"
                )
            )
        finally:
            self.remove_quietly(local_path)

        sql = self.translate(self.build_create(plan))
        self.statements.append(sql)
        self.connection.execute(sql)

        logger.info(
            "bulk_load.hive.loaded",
            table=plan.qualified_name,
            rows=len(frame),
            location=location,
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return len(frame)

"""Redshift bulk load: gzip CSV staged in S3, then COPY."""

import time

import pandas as pd

from table_uploader.io.bulk.base import REDACTED, BulkLoadAdapter
from table_uploader.io.bulk.config import RedshiftBulkConfig
from table_uploader.io.loader.models import BulkLoadConfigurationError, InsertPlan
from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)


class RedshiftBulkLoader(BulkLoadAdapter):
    backend = "redshift"
    config: RedshiftBulkConfig

    def __init__(self, connection, config: RedshiftBulkConfig, transport):
        super().__init__(connection, config, transport)
        self.store = transport.object_store(config)

    def verify(self) -> None:
        try:
            exists = self.store.bucket_exists(self.config.aws_bucket_name)
        except Exception as exc:
            raise BulkLoadConfigurationError(
                self.backend, reason=f"S3 bucket check failed: {exc}"
            ) from exc
        if not exists:
            raise BulkLoadConfigurationError(
                self.backend, reason=f"S3 bucket {self.config.aws_bucket_name} does not exist"
            )

    def build_copy(self, plan: InsertPlan, object_name: str, redact: bool = False) -> str:
        key_id = REDACTED if redact else self.config.aws_access_key_id
        secret = REDACTED if redact else self.config.aws_secret_access_key
        return (
            f"COPY {plan.qualified_name} "
            f"FROM 's3://{self.config.aws_bucket_name}/{object_name}' "
            f"CREDENTIALS 'aws_access_key_id={key_id};aws_secret_access_key={secret}' "
            f"REGION '{self.config.aws_default_region}' "
            "CSV TRUNCATECOLUMNS ACCEPTINVCHARS DELIMITER ',' EMPTYASNULL IGNOREHEADER 1 GZIP;"
        )

    def load(self, plan: InsertPlan, frame: pd.DataFrame) -> int:
        started = time.perf_counter()
        file_name = self.staging_file_name(".csv.gz")
        local_path = self.transport.write_file(
            file_name, self.render_delimited(plan, frame, compress=True)
        )
        bucket = self.config.aws_bucket_name
        object_name = self.config.object_name(file_name)
        uploaded = False
        try:
            self.store.put_file(bucket, object_name, local_path)
            uploaded = True
            self.statements.append(self.build_copy(plan, object_name, redact=True))
            sql = self.translate(self.build_copy(plan, object_name))
            self.connection.execute(sql)
        finally:
            if uploaded:
                try:
                    self.store.remove(bucket, object_name)
                except Exception as exc:
                    logger.warning(
                        "bulk_load.redshift.cleanup_failed", object_name=object_name, error=str(exc)
                    )
            self.remove_quietly(local_path)

        logger.info(
            "bulk_load.redshift.copy",
            table=plan.qualified_name,
            rows=len(frame),
            bucket=bucket,
            object_name=object_name,
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return len(frame)

"""
Per-backend bulk-load configuration.

Each model is built from Settings and validated when the adapter is
constructed, so a missing credential is reported before any table is
dropped or created.
"""

from typing import ClassVar, List, Optional, Tuple

from pydantic import BaseModel, Field

from table_uploader.config import Settings


class BulkConfig(BaseModel):
    """Shared behavior: report which required fields are unset."""

    required_fields: ClassVar[Tuple[str, ...]] = ()
    # Environment variable names, for error messages
    env_names: ClassVar[dict] = {}

    def missing_fields(self) -> List[str]:
        missing = []
        for name in self.required_fields:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(self.env_names.get(name, name))
        return missing


class RedshiftBulkConfig(BulkConfig):
    required_fields: ClassVar[Tuple[str, ...]] = (
        "aws_access_key_id",
        "aws_secret_access_key",
        "aws_bucket_name",
        "aws_default_region",
    )
    env_names: ClassVar[dict] = {
        "aws_access_key_id": "AWS_ACCESS_KEY_ID",
        "aws_secret_access_key": "AWS_SECRET_ACCESS_KEY",
        "aws_bucket_name": "AWS_BUCKET_NAME",
        "aws_default_region": "AWS_DEFAULT_REGION",
    }

    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_default_region: Optional[str] = None
    aws_bucket_name: Optional[str] = None
    aws_object_key: Optional[str] = Field(default=None, description="Key prefix inside the bucket")
    aws_sse_type: Optional[str] = None
    aws_s3_endpoint: str = "s3.amazonaws.com"

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedshiftBulkConfig":
        return cls(
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            aws_default_region=settings.aws_default_region,
            aws_bucket_name=settings.aws_bucket_name,
            aws_object_key=settings.aws_object_key,
            aws_sse_type=settings.aws_sse_type,
            aws_s3_endpoint=settings.aws_s3_endpoint,
        )

    def object_name(self, file_name: str) -> str:
        prefix = (self.aws_object_key or "").strip("/")
        return f"{prefix}/{file_name}" if prefix else file_name


class PdwBulkConfig(BulkConfig):
    required_fields: ClassVar[Tuple[str, ...]] = ("dwloader_path",)
    env_names: ClassVar[dict] = {"dwloader_path": "DWLOADER_PATH"}

    dwloader_path: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PdwBulkConfig":
        return cls(dwloader_path=settings.dwloader_path)


class PostgresBulkConfig(BulkConfig):
    required_fields: ClassVar[Tuple[str, ...]] = ("postgres_path",)
    env_names: ClassVar[dict] = {"postgres_path": "POSTGRES_PATH"}

    postgres_path: Optional[str] = Field(default=None, description="Directory holding psql")

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostgresBulkConfig":
        return cls(postgres_path=settings.postgres_path)

    @property
    def psql_executable(self) -> str:
        base = (self.postgres_path or "").rstrip("/\\")
        if base.endswith("psql") or base.endswith("psql.exe"):
            return base
        return f"{base}/psql" if base else "psql"


class HiveBulkConfig(BulkConfig):
    required_fields: ClassVar[Tuple[str, ...]] = ("hive_node_host", "hive_hdfs_folder")
    env_names: ClassVar[dict] = {
        "hive_node_host": "HIVE_NODE_HOST",
        "hive_hdfs_folder": "HIVE_HDFS_FOLDER",
    }

    hive_node_host: Optional[str] = None
    hive_ssh_user: str = "root"
    hive_ssh_port: int = 2222
    hive_keyfile: Optional[str] = None
    hive_node_folder: str = "/tmp"
    hive_hdfs_folder: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "HiveBulkConfig":
        return cls(
            hive_node_host=settings.hive_node_host,
            hive_ssh_user=settings.hive_ssh_user,
            hive_ssh_port=settings.hive_ssh_port,
            hive_keyfile=settings.hive_keyfile,
            hive_node_folder=settings.hive_node_folder,
            hive_hdfs_folder=settings.hive_hdfs_folder,
        )

    @property
    def ssh_target(self) -> str:
        return f"{self.hive_ssh_user}@{self.hive_node_host}"

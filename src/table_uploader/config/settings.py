"""
Configuration management for table-uploader.

Settings come from the environment (and an optional ``.env`` file) through
Pydantic BaseSettings. Field aliases keep the variable names operators
already export for bulk loading, e.g. ``AWS_BUCKET_NAME`` or ``DWLOADER_PATH``.
"""

import os
import warnings
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("TABLE_UPLOADER_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE

DEFAULT_BATCH_SIZE = 10000


def parse_flag(value: Any) -> bool:
    """Interpret a bulk-load style flag.

    Environment variables arrive as strings; only a case-insensitive
    ``"TRUE"`` (or ``"1"``/``"yes"``) switches the flag on.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Core fields:
    - LOG_LEVEL: Logging level (uppercase)
    - INSERT_BATCH_SIZE: Rows per batch for direct inserts
    - DATABASE_CONNECTOR_BULK_UPLOAD: Enable bulk loading where supported
    - USE_MPP_BULK_LOAD: Deprecated spelling of the bulk-load flag
    - TEMP_EMULATION_SCHEMA: Schema used by dialects that emulate temp tables

    Bulk-load fields are grouped per backend and converted into the
    ``*BulkConfig`` models consumed by the bulk loaders.
    """

    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )
    batch_size: int = Field(
        default=DEFAULT_BATCH_SIZE,
        gt=0,
        validation_alias=AliasChoices("INSERT_BATCH_SIZE", "BATCH_SIZE"),
        description="Rows per batch for direct inserts",
    )
    bulk_load: bool = Field(
        default=False,
        validation_alias="DATABASE_CONNECTOR_BULK_UPLOAD",
        description="Use native bulk loading where the dialect supports it",
    )
    use_mpp_bulk_load: Optional[str] = Field(
        default=None,
        validation_alias="USE_MPP_BULK_LOAD",
        description="Deprecated alias for DATABASE_CONNECTOR_BULK_UPLOAD",
    )
    temp_emulation_schema: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("TEMP_EMULATION_SCHEMA", "SQL_RENDER_TEMP_EMULATION_SCHEMA"),
        description="Schema with write access used to emulate temp tables",
    )

    # Redshift: staged through S3
    aws_access_key_id: Optional[str] = Field(default=None, validation_alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(
        default=None, validation_alias="AWS_SECRET_ACCESS_KEY"
    )
    aws_default_region: Optional[str] = Field(default=None, validation_alias="AWS_DEFAULT_REGION")
    aws_bucket_name: Optional[str] = Field(default=None, validation_alias="AWS_BUCKET_NAME")
    aws_object_key: Optional[str] = Field(default=None, validation_alias="AWS_OBJECT_KEY")
    aws_sse_type: Optional[str] = Field(default=None, validation_alias="AWS_SSE_TYPE")
    aws_s3_endpoint: str = Field(default="s3.amazonaws.com", validation_alias="AWS_S3_ENDPOINT")

    # PDW: dwloader executable
    dwloader_path: Optional[str] = Field(default=None, validation_alias="DWLOADER_PATH")

    # PostgreSQL: directory holding the psql binary
    postgres_path: Optional[str] = Field(default=None, validation_alias="POSTGRES_PATH")

    # Hive: edge node reachable over ssh
    hive_node_host: Optional[str] = Field(default=None, validation_alias="HIVE_NODE_HOST")
    hive_ssh_user: str = Field(default="root", validation_alias="HIVE_SSH_USER")
    hive_ssh_port: int = Field(default=2222, validation_alias="HIVE_SSH_PORT")
    hive_keyfile: Optional[str] = Field(default=None, validation_alias="HIVE_KEYFILE")
    hive_node_folder: str = Field(default="/tmp", validation_alias="HIVE_NODE_FOLDER")
    hive_hdfs_folder: Optional[str] = Field(default=None, validation_alias="HIVE_HDFS_FOLDER")

    @field_validator("bulk_load", mode="before")
    @classmethod
    def _parse_bulk_load(cls, value: Any) -> bool:
        return parse_flag(value)

    @model_validator(mode="after")
    def _apply_deprecated_bulk_flag(self) -> "Settings":
        """Let USE_MPP_BULK_LOAD override the modern flag, with a warning."""
        if self.use_mpp_bulk_load:
            warnings.warn(
                "USE_MPP_BULK_LOAD is deprecated. Use DATABASE_CONNECTOR_BULK_UPLOAD instead.",
                category=DeprecationWarning,
                stacklevel=2,
            )
            self.bulk_load = parse_flag(self.use_mpp_bulk_load)
            self.use_mpp_bulk_load = None
        return self

    model_config = SettingsConfigDict(
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Tests that change the environment call ``get_settings.cache_clear()``.
    """
    return Settings()

"""Pytest configuration and shared fixtures.

An optional ``.env.test`` at the repository root is loaded before the
package is imported; real environment variables take precedence.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

_TEST_ENV_FILE = Path(__file__).parent.parent / ".env.test"
if _TEST_ENV_FILE.exists():
    load_dotenv(_TEST_ENV_FILE, override=False)

import pandas as pd
import pytest

from table_uploader.config import Settings, get_settings
from tests.fixtures.fakes import RecordingConnection, RecordingTransport

_SETTINGS_ENV_VARS = (
    "LOG_LEVEL",
    "INSERT_BATCH_SIZE",
    "BATCH_SIZE",
    "DATABASE_CONNECTOR_BULK_UPLOAD",
    "USE_MPP_BULK_LOAD",
    "TEMP_EMULATION_SCHEMA",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_DEFAULT_REGION",
    "AWS_BUCKET_NAME",
    "AWS_OBJECT_KEY",
    "AWS_SSE_TYPE",
    "DWLOADER_PATH",
    "POSTGRES_PATH",
    "HIVE_NODE_HOST",
    "HIVE_HDFS_FOLDER",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep operator environment out of unit tests."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings without any bulk-load configuration and no .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def bulk_settings() -> Settings:
    """Settings with every backend's bulk-load configuration filled in."""
    return Settings(
        _env_file=None,
        aws_access_key_id="AKIAEXAMPLE",
        aws_secret_access_key="wJalrXUtnFEMI",
        aws_default_region="us-east-1",
        aws_bucket_name="staging-bucket",
        aws_object_key="uploads",
        dwloader_path="/opt/pdw/dwloader",
        postgres_path="/usr/lib/postgresql/16/bin",
        hive_node_host="hive-edge",
        hive_hdfs_folder="/user/hive/uploads",
    )


@pytest.fixture
def connection() -> RecordingConnection:
    return RecordingConnection("sql server")


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def person_frame() -> pd.DataFrame:
    return pd.DataFrame({"person_id": [1, 2, 3], "name": ["a", "b", None]})

"""
Side-effect boundary for bulk loaders.

Adapters never touch the filesystem, object storage or child processes
directly; they go through a BulkTransport so tests can record the calls.
"""

import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence

from minio import Minio
from minio.sse import SseS3

from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""


class BulkTransport(Protocol):
    def write_file(self, name: str, payload: bytes) -> str: ...
    def remove_file(self, path: str) -> None: ...
    def run(self, args: Sequence[str], env: Optional[Dict[str, str]] = None) -> CommandResult: ...
    def which(self, executable: str) -> bool: ...
    def object_store(self, config: Any) -> "ObjectStore": ...


class ObjectStore(Protocol):
    def bucket_exists(self, bucket: str) -> bool: ...
    def put_file(self, bucket: str, key: str, path: str) -> None: ...
    def remove(self, bucket: str, key: str) -> None: ...


STAGING_DIR_NAME = "table_uploader"


def default_staging_dir() -> Path:
    """Shared staging directory under the system temp dir; files in it are per-load."""
    return Path(tempfile.gettempdir()) / STAGING_DIR_NAME


class LocalTransport:
    """Temp files in a staging directory and blocking child processes."""

    def __init__(self, staging_dir: Optional[str] = None):
        self.staging_dir = Path(staging_dir) if staging_dir else default_staging_dir()
        self.staging_dir.mkdir(parents=True, exist_ok=True)

    def write_file(self, name: str, payload: bytes) -> str:
        path = self.staging_dir / name
        path.write_bytes(payload)
        return str(path)

    def remove_file(self, path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass

    def run(self, args: Sequence[str], env: Optional[Dict[str, str]] = None) -> CommandResult:
        child_env = None
        if env:
            child_env = dict(os.environ)
            child_env.update(env)
        logger.debug("bulk_load.command.started", executable=args[0], arg_count=len(args))
        completed = subprocess.run(list(args), capture_output=True, text=True, env=child_env)
        return CommandResult(completed.returncode, completed.stdout, completed.stderr)

    def which(self, executable: str) -> bool:
        path = Path(executable)
        if path.is_file():
            return os.access(path, os.X_OK)
        return shutil.which(executable) is not None

    def object_store(self, config: Any) -> "MinioObjectStore":
        """Open the S3 store described by a RedshiftBulkConfig."""
        return MinioObjectStore(
            access_key=config.aws_access_key_id,
            secret_key=config.aws_secret_access_key,
            region=config.aws_default_region,
            endpoint=config.aws_s3_endpoint,
            sse_type=config.aws_sse_type,
        )


class MinioObjectStore:
    """S3 access through the MinIO client (works against AWS S3 endpoints)."""

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        region: Optional[str] = None,
        endpoint: str = "s3.amazonaws.com",
        sse_type: Optional[str] = None,
        secure: bool = True,
    ):
        self.client = Minio(
            endpoint=endpoint,
            access_key=access_key,
            secret_key=secret_key,
            region=region,
            secure=secure,
        )
        self.sse_type = sse_type

    def bucket_exists(self, bucket: str) -> bool:
        return self.client.bucket_exists(bucket)

    def put_file(self, bucket: str, key: str, path: str) -> None:
        # Only server-managed keys (AES256) are supported for uploads
        sse = SseS3() if self.sse_type else None
        self.client.fput_object(bucket, key, path, content_type="application/gzip", sse=sse)

    def remove(self, bucket: str, key: str) -> None:
        self.client.remove_object(bucket, key)


def split_command_output(result: CommandResult) -> List[str]:
    """Non-empty output lines, stderr first, for error messages."""
    lines = (result.stderr or "").splitlines() + (result.stdout or "").splitlines()
    return [line for line in lines if line.strip()]

"""
Bulk-load adapter base class.

An adapter is constructed (and its configuration validated) before the
target table is dropped or created, and ``verify`` confirms that the
external mechanism is reachable. ``load`` then moves the whole frame in
one shot through the backend's native loader.
"""

import gzip
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

import pandas as pd

from table_uploader.io.bulk.config import BulkConfig
from table_uploader.io.bulk.transport import BulkTransport, CommandResult, split_command_output
from table_uploader.io.connectors.connection import DatabaseConnection
from table_uploader.io.loader.binding import bind_rows
from table_uploader.io.loader.models import (
    BulkLoadConfigurationError,
    BulkLoadError,
    InsertPlan,
)
from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)

REDACTED = "***"


class BulkLoadAdapter(ABC):
    """Common plumbing for the per-backend bulk loaders."""

    backend: str = "generic"

    def __init__(
        self,
        connection: DatabaseConnection,
        config: BulkConfig,
        transport: BulkTransport,
    ):
        missing = config.missing_fields()
        if missing:
            raise BulkLoadConfigurationError(self.backend, missing_fields=missing)
        self.connection = connection
        self.config = config
        self.transport = transport
        self.statements: List[str] = []
        self.temp_emulation_schema: Optional[str] = None

    @abstractmethod
    def verify(self) -> None:
        """
        Confirm the external mechanism is reachable.

        Raises:
            BulkLoadConfigurationError: If it is not
        """

    @abstractmethod
    def load(self, plan: InsertPlan, frame: pd.DataFrame) -> int:
        """Load every row of ``frame``; returns the number of rows sent."""

    # Helpers ------------------------------------------------------------

    def translate(self, sql: str) -> str:
        return self.connection.translate(sql, temp_emulation_schema=self.temp_emulation_schema)

    def staging_file_name(self, suffix: str) -> str:
        return f"insert_{uuid.uuid4().hex}{suffix}"

    def render_delimited(
        self,
        plan: InsertPlan,
        frame: pd.DataFrame,
        sep: str = ",",
        na_rep: str = "",
        header: bool = True,
        compress: bool = False,
    ) -> bytes:
        """
        Render the frame as a delimited text file.

        Values go through the same binding as parameterized inserts, so
        integers stay exact and non-finite floats become missing.
        """
        names = [column.name for column in plan.columns]
        bound = pd.DataFrame(bind_rows(frame, plan.columns), columns=names, dtype=object)
        text = bound.to_csv(index=False, sep=sep, na_rep=na_rep, header=header, lineterminator="\n")
        payload = text.encode("utf-8")
        return gzip.compress(payload) if compress else payload

    def run_checked(self, args: List[str], env: Optional[dict] = None) -> CommandResult:
        """Run a native client; a non-zero exit raises BulkLoadError."""
        result = self.transport.run(args, env=env)
        if result.returncode != 0:
            detail = "; ".join(split_command_output(result)) or "no output"
            logger.error(
                f"bulk_load.{self.backend}.command_failed",
                returncode=result.returncode,
                detail=detail,
            )
            raise BulkLoadError(self.backend, detail, returncode=result.returncode)
        return result

    def require_executable(self, executable: str, setting: str) -> None:
        if not self.transport.which(executable):
            raise BulkLoadConfigurationError(
                self.backend, reason=f"{setting} does not point to an executable ({executable})"
            )

    def remove_quietly(self, path: str) -> None:
        try:
            self.transport.remove_file(path)
        except OSError as exc:
            logger.warning(f"bulk_load.{self.backend}.cleanup_failed", path=path, error=str(exc))

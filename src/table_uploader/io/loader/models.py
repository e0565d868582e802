from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple


class TableUploadError(Exception):
    """Base class for errors raised while uploading a table."""


class InvalidDataError(TableUploadError):
    """Raised when the input data cannot be uploaded (e.g. it has no columns)."""


class IdentifierQuotingError(TableUploadError):
    """Raised when identifiers need quoting but the connection cannot quote."""

    def __init__(self, identifiers: Sequence[str]):
        self.identifiers = list(identifiers)
        super().__init__(
            "The connection doesn't support quoted identifiers, but table/column "
            f"names contain characters that must be quoted ({','.join(self.identifiers)})"
        )


class Int64TransportError(TableUploadError):
    """Raised when 64-bit integers do not survive parameter binding intact."""


class BulkLoadConfigurationError(TableUploadError):
    """Raised when bulk-load credentials or paths are missing or unreachable."""

    def __init__(self, backend: str, missing_fields: Sequence[str] = (), reason: str = ""):
        self.backend = backend
        self.missing_fields = list(missing_fields)
        self.reason = reason
        parts = [f"Bulk load credentials for {backend} could not be confirmed"]
        if self.missing_fields:
            parts.append(f"missing: {', '.join(self.missing_fields)}")
        if reason:
            parts.append(reason)
        super().__init__(". ".join(parts) + ". Please review them or disable bulk loading.")


class BulkLoadError(TableUploadError):
    """Raised when a backend bulk-load mechanism reports failure."""

    def __init__(self, backend: str, message: str, returncode: Optional[int] = None):
        self.backend = backend
        self.returncode = returncode
        super().__init__(f"Bulk load into {backend} failed: {message}")


class SemanticType(str, Enum):
    """Value semantics of a column, independent of any SQL dialect."""

    INTEGER32 = "integer32"
    INTEGER64 = "integer64"
    FLOAT = "float"
    DATE = "date"
    DATETIME = "datetime"
    TEXT = "text"


class InsertStrategy(str, Enum):
    DIRECT_INSERT = "direct_insert"
    BULK_LOAD = "bulk_load"
    CTAS_HACK = "ctas_hack"


@dataclass(frozen=True)
class TableTarget:
    """Destination table. ``name`` is the bare table name without any temp prefix."""

    name: str
    schema: Optional[str] = None
    is_temporary: bool = False


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    semantic_type: SemanticType
    sql_type: str
    max_text_length: Optional[int] = None


@dataclass(frozen=True)
class InsertPlan:
    """Everything decided up front for one insert call."""

    target: TableTarget
    columns: Tuple[ColumnDescriptor, ...]
    strategy: InsertStrategy
    qualified_name: str
    quoted_columns: Tuple[str, ...]
    row_count: int

    @property
    def sql_types(self) -> List[str]:
        return [column.sql_type for column in self.columns]


@dataclass
class LoadResult:
    """Structured response for insert_table."""

    strategy: InsertStrategy
    rows_inserted: int
    batches: int
    duration_ms: float
    execution_id: str
    statements: List[str] = field(default_factory=list)

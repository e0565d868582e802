"""
table-uploader - upload pandas data frames into database tables.

Column types are inferred from the frame, names are escaped for the target
dialect and rows are moved by batched inserts, a native bulk loader or a
single CREATE TABLE AS SELECT, whichever fits the backend.
"""

from table_uploader.infrastructure.sql.dialects import get_dialect
from table_uploader.io.connectors.connection import ConnectionDetails, DbapiConnection
from table_uploader.io.loader.core import insert_table
from table_uploader.io.loader.models import (
    BulkLoadConfigurationError,
    BulkLoadError,
    IdentifierQuotingError,
    InsertStrategy,
    Int64TransportError,
    InvalidDataError,
    LoadResult,
    TableUploadError,
)

__version__ = "0.1.0"

__all__ = [
    "BulkLoadConfigurationError",
    "BulkLoadError",
    "ConnectionDetails",
    "DbapiConnection",
    "IdentifierQuotingError",
    "InsertStrategy",
    "Int64TransportError",
    "InvalidDataError",
    "LoadResult",
    "TableUploadError",
    "get_dialect",
    "insert_table",
]

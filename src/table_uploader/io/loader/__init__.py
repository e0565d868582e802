"""
Table upload engine.

The entry point is ``table_uploader.io.loader.core.insert_table``; this
package namespace only exposes the shared data model and errors.
"""

from .models import (
    BulkLoadConfigurationError,
    BulkLoadError,
    ColumnDescriptor,
    IdentifierQuotingError,
    InsertPlan,
    InsertStrategy,
    Int64TransportError,
    InvalidDataError,
    LoadResult,
    SemanticType,
    TableTarget,
    TableUploadError,
)

__all__ = [
    "BulkLoadConfigurationError",
    "BulkLoadError",
    "ColumnDescriptor",
    "IdentifierQuotingError",
    "InsertPlan",
    "InsertStrategy",
    "Int64TransportError",
    "InvalidDataError",
    "LoadResult",
    "SemanticType",
    "TableTarget",
    "TableUploadError",
]

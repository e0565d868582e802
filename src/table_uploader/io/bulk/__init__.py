"""
Native bulk loaders, one per backend.

Use build_bulk_loader to pick the adapter for a connection's dialect.
"""

from typing import Dict, Optional, Tuple, Type

from table_uploader.config import Settings
from table_uploader.io.connectors.connection import DatabaseConnection
from table_uploader.io.loader.models import BulkLoadConfigurationError

from .base import BulkLoadAdapter
from .config import (
    BulkConfig,
    HiveBulkConfig,
    PdwBulkConfig,
    PostgresBulkConfig,
    RedshiftBulkConfig,
)
from .hive import HiveBulkLoader
from .pdw import PdwBulkLoader
from .postgresql import PostgresBulkLoader
from .redshift import RedshiftBulkLoader
from .transport import BulkTransport, CommandResult, LocalTransport, MinioObjectStore

BULK_LOADERS: Dict[str, Tuple[Type[BulkLoadAdapter], Type[BulkConfig]]] = {
    "redshift": (RedshiftBulkLoader, RedshiftBulkConfig),
    "pdw": (PdwBulkLoader, PdwBulkConfig),
    "postgresql": (PostgresBulkLoader, PostgresBulkConfig),
    "hive": (HiveBulkLoader, HiveBulkConfig),
}


def build_bulk_loader(
    connection: DatabaseConnection,
    settings: Settings,
    transport: Optional[BulkTransport] = None,
    temp_emulation_schema: Optional[str] = None,
) -> BulkLoadAdapter:
    """
    Build the bulk loader for the connection's dialect.

    Raises:
        BulkLoadConfigurationError: If the dialect has no bulk loader or its
            configuration is incomplete
    """
    name = connection.dialect.name
    if name not in BULK_LOADERS:
        raise BulkLoadConfigurationError(name, reason="no bulk loader for this dialect")
    loader_class, config_class = BULK_LOADERS[name]
    config = config_class.from_settings(settings)
    loader = loader_class(connection, config, transport or LocalTransport())
    loader.temp_emulation_schema = temp_emulation_schema
    return loader


__all__ = [
    "BULK_LOADERS",
    "BulkConfig",
    "BulkLoadAdapter",
    "BulkTransport",
    "CommandResult",
    "HiveBulkConfig",
    "HiveBulkLoader",
    "LocalTransport",
    "MinioObjectStore",
    "PdwBulkConfig",
    "PdwBulkLoader",
    "PostgresBulkConfig",
    "PostgresBulkLoader",
    "RedshiftBulkConfig",
    "RedshiftBulkLoader",
    "build_bulk_loader",
]

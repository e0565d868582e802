"""
Dialect registry.

``get_dialect`` resolves a dialect name once, when a connection is built.
Names without a dedicated class get the generic dialect under that name, so
new backends are added by registering a class rather than by editing the
existing ones.
"""

from typing import Dict, Type

from .base import Dialect
from .hive import BigQueryDialect, HiveDialect
from .postgresql import PostgreSQLDialect, RedshiftDialect
from .sql_server import PdwDialect, SqlServerDialect

_REGISTRY: Dict[str, Type[Dialect]] = {}


def register_dialect(dialect_cls: Type[Dialect]) -> Type[Dialect]:
    """Register a dialect class under its ``name``; usable as a decorator."""
    _REGISTRY[dialect_cls.name.lower()] = dialect_cls
    return dialect_cls


def get_dialect(name: str) -> Dialect:
    """
    Return a dialect instance for ``name`` (case-insensitive).

    Examples:
        >>> get_dialect("Redshift").supports_ctas
        True
        >>> get_dialect("sqlite").name
        'sqlite'
    """
    key = name.strip().lower()
    dialect_cls = _REGISTRY.get(key)
    if dialect_cls is None:
        return Dialect(name=key)
    return dialect_cls()


for _cls in (
    SqlServerDialect,
    PdwDialect,
    PostgreSQLDialect,
    RedshiftDialect,
    HiveDialect,
    BigQueryDialect,
):
    register_dialect(_cls)

__all__ = [
    "Dialect",
    "SqlServerDialect",
    "PdwDialect",
    "PostgreSQLDialect",
    "RedshiftDialect",
    "HiveDialect",
    "BigQueryDialect",
    "get_dialect",
    "register_dialect",
]

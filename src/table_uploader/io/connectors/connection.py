"""
Connection collaborator consumed by the uploader.

Establishing connections is the caller's job. The uploader only needs the
narrow surface described by DatabaseConnection; DbapiConnection provides it
for any DB-API 2 connection that exposes an ``autocommit`` attribute
(psycopg2, pyodbc and most modern drivers).
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence, runtime_checkable

from table_uploader.infrastructure.sql.dialects import Dialect, get_dialect

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_DIALECT_DEFAULT = object()


@dataclass(frozen=True)
class ConnectionDetails:
    """Server coordinates, used by bulk loaders that shell out to native clients."""

    host: str = ""
    port: Optional[int] = None
    database: str = ""
    user: str = ""
    password: str = ""

    def __repr__(self) -> str:
        return (
            f"ConnectionDetails(host={self.host!r}, port={self.port!r}, "
            f"database={self.database!r}, user={self.user!r}, password='***')"
        )


@runtime_checkable
class DatabaseConnection(Protocol):
    """Protocol for the connection an upload borrows for one call."""

    dialect: Dialect
    details: ConnectionDetails

    @property
    def identifier_quote(self) -> Optional[str]: ...
    def translate(self, sql: str, temp_emulation_schema: Optional[str] = None) -> str: ...
    def execute(self, sql: str) -> None: ...
    def execute_batch(self, sql: str, rows: Sequence[Sequence[Any]]) -> None: ...
    def get_autocommit(self) -> bool: ...
    def set_autocommit(self, value: bool) -> None: ...
    def commit(self) -> None: ...
    def validate_int64(self, values: Sequence[int]) -> bool: ...


class DbapiConnection:
    """
    DatabaseConnection over a raw DB-API 2 connection.

    Args:
        raw: DB-API connection (e.g. from ``psycopg2.connect`` or ``pyodbc.connect``)
        dialect: Dialect instance or name
        details: Server coordinates for bulk loaders
        identifier_quote: Override the dialect's quote character; None means
            the driver cannot quote identifiers
        translator: Optional SQL translation hook applied to every statement,
            called as ``translator(sql, temp_emulation_schema=...)``
    """

    def __init__(
        self,
        raw: Any,
        dialect: Any,
        details: Optional[ConnectionDetails] = None,
        identifier_quote: Any = _DIALECT_DEFAULT,
        translator: Optional[Callable[..., str]] = None,
    ):
        self.raw = raw
        self.dialect = get_dialect(dialect) if isinstance(dialect, str) else dialect
        self.details = details or ConnectionDetails()
        self._identifier_quote = (
            self.dialect.identifier_quote
            if identifier_quote is _DIALECT_DEFAULT
            else identifier_quote
        )
        self._translator = translator

    @property
    def identifier_quote(self) -> Optional[str]:
        return self._identifier_quote

    def translate(self, sql: str, temp_emulation_schema: Optional[str] = None) -> str:
        if self._translator is None:
            return sql
        return self._translator(sql, temp_emulation_schema=temp_emulation_schema)

    def execute(self, sql: str) -> None:
        cursor = self.raw.cursor()
        try:
            cursor.execute(sql)
        finally:
            cursor.close()

    def execute_batch(self, sql: str, rows: Sequence[Sequence[Any]]) -> None:
        cursor = self.raw.cursor()
        try:
            self.dialect.execute_batch(cursor, sql, rows)
        finally:
            cursor.close()

    def get_autocommit(self) -> bool:
        return bool(getattr(self.raw, "autocommit", False))

    def set_autocommit(self, value: bool) -> None:
        self.raw.autocommit = value

    def commit(self) -> None:
        self.raw.commit()

    def validate_int64(self, values: Sequence[int]) -> bool:
        """DB-API drivers bind Python ints exactly within the signed 64-bit range."""
        return all(
            type(value) is int and INT64_MIN <= value <= INT64_MAX for value in values
        )

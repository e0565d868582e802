"""SQL Server and Parallel Data Warehouse dialects."""

from .base import QMARK, Dialect


class SqlServerDialect(Dialect):
    name = "sql server"
    paramstyle = QMARK


class PdwDialect(SqlServerDialect):
    """Parallel Data Warehouse: MPP, so row-by-row inserts are avoided."""

    name = "pdw"
    supports_ctas = True

    def supports_bulk_load(self, create_table: bool, temporary: bool) -> bool:
        # dwloader cannot target session-scoped temp tables
        return not temporary

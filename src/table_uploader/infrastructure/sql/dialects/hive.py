"""Apache Hive and Google BigQuery dialects (backtick quoting)."""

from .base import FORMAT, Dialect


class HiveDialect(Dialect):
    name = "hive"
    identifier_quote = "`"
    paramstyle = FORMAT
    supports_ctas = True
    # The bulk loader declares the table over the uploaded HDFS files
    bulk_load_creates_table = True

    def supports_bulk_load(self, create_table: bool, temporary: bool) -> bool:
        return create_table

    def build_drop_if_exists(self, qualified_table: str, temporary: bool = False) -> str:
        return f"DROP TABLE IF EXISTS {qualified_table};"


class BigQueryDialect(Dialect):
    name = "bigquery"
    identifier_quote = "`"
    paramstyle = FORMAT
    supports_ctas = True

    def build_drop_if_exists(self, qualified_table: str, temporary: bool = False) -> str:
        return f"DROP TABLE IF EXISTS {qualified_table};"

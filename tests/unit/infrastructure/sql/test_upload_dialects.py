"""
Unit tests for upload dialects and InsertBuilder.
"""

from unittest.mock import MagicMock, patch

import pytest

from table_uploader.infrastructure.sql.dialects import (
    BigQueryDialect,
    Dialect,
    HiveDialect,
    PdwDialect,
    PostgreSQLDialect,
    RedshiftDialect,
    SqlServerDialect,
    get_dialect,
    register_dialect,
)
from table_uploader.infrastructure.sql.dialects.base import NUMERIC
from table_uploader.infrastructure.sql.operations.insert import InsertBuilder
from table_uploader.io.loader.models import (
    ColumnDescriptor,
    InsertPlan,
    InsertStrategy,
    SemanticType,
    TableTarget,
)


def _plan(qualified_name="scratch.person", temporary=False):
    columns = (
        ColumnDescriptor("person_id", SemanticType.INTEGER32, "INTEGER"),
        ColumnDescriptor("name", SemanticType.TEXT, "VARCHAR(255)", 255),
    )
    return InsertPlan(
        target=TableTarget("person", "scratch", temporary),
        columns=columns,
        strategy=InsertStrategy.DIRECT_INSERT,
        qualified_name=qualified_name,
        quoted_columns=("person_id", "name"),
        row_count=3,
    )


@pytest.mark.unit
class TestDialectRegistry:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("sql server", SqlServerDialect),
            ("PDW", PdwDialect),
            ("postgresql", PostgreSQLDialect),
            ("Redshift", RedshiftDialect),
            ("hive", HiveDialect),
            ("bigquery", BigQueryDialect),
        ],
    )
    def test_known_dialects(self, name, expected):
        assert type(get_dialect(name)) is expected

    def test_unknown_dialect_falls_back_to_generic(self):
        dialect = get_dialect("SQLite")
        assert type(dialect) is Dialect
        assert dialect.name == "sqlite"

    def test_register_new_dialect(self):
        @register_dialect
        class DuckDbDialect(Dialect):
            name = "duckdb_test"

        assert type(get_dialect("duckdb_test")) is DuckDbDialect


@pytest.mark.unit
class TestTempTableNaming:
    def test_prefix_style_drops_schema(self):
        assert get_dialect("sql server").qualify("person", "scratch", temporary=True) == "#person"

    def test_prefix_applies_after_escaping(self):
        assert get_dialect("pdw").qualify("my temp", temporary=True) == '#"my temp"'

    def test_redshift_session_temp_table(self):
        dialect = get_dialect("redshift")
        assert dialect.qualify("person", "scratch", temporary=True) == "person"
        assert dialect.create_table_keyword(temporary=True) == "CREATE TEMP TABLE"

    def test_postgresql_session_temp_table(self):
        dialect = get_dialect("postgresql")
        assert dialect.qualify("person", "scratch", temporary=True) == "person"
        assert dialect.create_table_keyword(temporary=True) == "CREATE TEMP TABLE"

    def test_permanent_table_keeps_schema(self):
        assert get_dialect("redshift").qualify("person", "scratch") == "scratch.person"

    def test_hive_backtick_quoting(self):
        dialect = get_dialect("hive")
        assert dialect.qualify("my table", "db", quote=dialect.identifier_quote) == "db.`my table`"


@pytest.mark.unit
class TestPlaceholderTranslation:
    def test_qmark_unchanged(self):
        sql = "INSERT INTO t (a,b) VALUES (?,?)"
        assert get_dialect("sql server").translate_placeholders(sql) == sql

    def test_format_style(self):
        sql = "INSERT INTO t (a,b) VALUES (?,?)"
        assert get_dialect("postgresql").translate_placeholders(sql) == (
            "INSERT INTO t (a,b) VALUES (%s,%s)"
        )

    def test_question_marks_inside_quotes_untouched(self):
        sql = 'INSERT INTO "what?" (a) VALUES (?)'
        assert get_dialect("postgresql").translate_placeholders(sql) == (
            'INSERT INTO "what?" (a) VALUES (%s)'
        )

    def test_percent_doubled_for_format(self):
        sql = 'INSERT INTO "100%" (a) VALUES (?)'
        assert get_dialect("postgresql").translate_placeholders(sql) == (
            'INSERT INTO "100%%" (a) VALUES (%s)'
        )

    def test_numeric_style(self):
        dialect = Dialect("oracle")
        dialect.paramstyle = NUMERIC
        assert dialect.translate_placeholders("VALUES (?,?)") == "VALUES (:1,:2)"


@pytest.mark.unit
class TestCapabilities:
    @pytest.mark.parametrize(
        "name, create_table, temporary, expected",
        [
            ("redshift", True, False, True),
            ("redshift", False, True, False),
            ("pdw", False, False, True),
            ("pdw", True, True, False),
            ("postgresql", True, False, True),
            ("postgresql", True, True, False),
            ("hive", True, True, True),
            ("hive", False, False, False),
            ("sql server", True, False, False),
            ("bigquery", True, False, False),
        ],
    )
    def test_bulk_load_eligibility(self, name, create_table, temporary, expected):
        assert get_dialect(name).supports_bulk_load(create_table, temporary) is expected

    def test_ctas_requires_rows_and_create(self):
        dialect = get_dialect("pdw")
        assert dialect.prefers_ctas(True, 1) is True
        assert dialect.prefers_ctas(True, 0) is False
        assert dialect.prefers_ctas(False, 10) is False
        assert get_dialect("postgresql").prefers_ctas(True, 10) is False


@pytest.mark.unit
class TestInsertBuilder:
    def test_drop_if_exists_sql_server(self):
        sql = InsertBuilder(get_dialect("sql server")).drop_if_exists(_plan())
        assert sql == (
            "IF OBJECT_ID('scratch.person', 'U') IS NOT NULL DROP TABLE scratch.person;"
        )

    def test_drop_if_exists_temp_uses_tempdb(self):
        sql = InsertBuilder(get_dialect("sql server")).drop_if_exists(
            _plan("#person", temporary=True)
        )
        assert "OBJECT_ID('tempdb..#person', 'U')" in sql

    def test_drop_if_exists_doubles_single_quotes_in_catalog_name(self):
        sql = InsertBuilder(get_dialect("sql server")).drop_if_exists(_plan("\"o'brien\""))
        assert sql == (
            "IF OBJECT_ID('\"o''brien\"', 'U') IS NOT NULL DROP TABLE \"o'brien\";"
        )

    def test_drop_if_exists_postgresql(self):
        sql = InsertBuilder(get_dialect("postgresql")).drop_if_exists(_plan())
        assert sql == "DROP TABLE IF EXISTS scratch.person;"

    def test_create_table(self):
        sql = InsertBuilder(get_dialect("sql server")).create_table(_plan())
        assert sql == "CREATE TABLE scratch.person (person_id INTEGER, name VARCHAR(255));"

    def test_insert(self):
        sql = InsertBuilder(get_dialect("sql server")).insert(_plan())
        assert sql == "INSERT INTO scratch.person (person_id,name) VALUES (?,?)"


@pytest.mark.unit
class TestBatchExecution:
    def test_generic_uses_executemany(self):
        cursor = MagicMock()
        get_dialect("sql server").execute_batch(cursor, "INSERT", [(1,), (2,)])
        cursor.executemany.assert_called_once_with("INSERT", [(1,), (2,)])

    def test_postgresql_uses_psycopg2_execute_batch(self):
        cursor = MagicMock()
        with patch(
            "table_uploader.infrastructure.sql.dialects.postgresql.execute_batch"
        ) as mock_execute_batch:
            get_dialect("postgresql").execute_batch(cursor, "INSERT", [(1,), (2,)])

        mock_execute_batch.assert_called_once_with(cursor, "INSERT", [(1,), (2,)], page_size=2)

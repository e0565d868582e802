"""
Unit tests for insert_table orchestration.

All tests run against RecordingConnection / RecordingTransport; no
database, object store or external loader is required.
"""

from unittest.mock import patch

import pandas as pd
import pytest
import structlog

from table_uploader import insert_table
from table_uploader.io.loader.core import to_frame
from table_uploader.io.loader.models import (
    BulkLoadConfigurationError,
    IdentifierQuotingError,
    InsertStrategy,
    InvalidDataError,
)
from tests.fixtures.fakes import RecordingConnection, RecordingTransport


@pytest.mark.unit
class TestDirectInsert:
    def test_three_row_frame_end_to_end(self, connection, person_frame, settings):
        result = insert_table(
            connection, "person", person_frame, database_schema="scratch", settings=settings
        )

        assert connection.executed == [
            "IF OBJECT_ID('scratch.person', 'U') IS NOT NULL DROP TABLE scratch.person;",
            "CREATE TABLE scratch.person (person_id INTEGER, name VARCHAR(255));",
        ]
        assert connection.batches == [
            (
                "INSERT INTO scratch.person (person_id,name) VALUES (?,?)",
                [(1, "a"), (2, "b"), (3, None)],
            )
        ]
        assert result.strategy == InsertStrategy.DIRECT_INSERT
        assert result.rows_inserted == 3
        assert result.batches == 1
        assert len(result.execution_id) == 32

    def test_append_without_drop_or_create(self, connection, person_frame, settings):
        insert_table(
            connection,
            "person",
            person_frame,
            drop_table_if_exists=False,
            create_table=False,
            settings=settings,
        )

        assert connection.executed == []
        assert connection.batch_sizes == [3]

    def test_drop_forces_create(self, connection, person_frame, settings):
        insert_table(
            connection,
            "person",
            person_frame,
            drop_table_if_exists=True,
            create_table=False,
            settings=settings,
        )

        assert connection.executed[1].startswith("CREATE TABLE person")

    def test_empty_frame_creates_table_only(self, connection, settings):
        frame = pd.DataFrame({"id": pd.Series([], dtype="int64")})

        result = insert_table(connection, "empty", frame, settings=settings)

        assert len(connection.executed) == 2
        assert connection.batches == []
        assert result.batches == 0

    def test_batch_size_from_settings(self, connection, settings):
        settings.batch_size = 2
        frame = pd.DataFrame({"id": range(5)})

        insert_table(connection, "t", frame, settings=settings)

        assert connection.batch_sizes == [2, 2, 1]

    def test_quoted_names(self, connection, settings):
        frame = pd.DataFrame({"first name": ["a"]})

        insert_table(connection, "my table", frame, settings=settings)

        assert connection.executed[1] == 'CREATE TABLE "my table" ("first name" VARCHAR(255));'

    def test_quoting_unsupported_fails_before_any_statement(self, settings):
        connection = RecordingConnection(identifier_quote=None)
        frame = pd.DataFrame({"first name": ["a"]})

        with pytest.raises(IdentifierQuotingError):
            insert_table(connection, "person", frame, settings=settings)

        assert connection.executed == []

    def test_batches_run_inside_upload_context(self, person_frame, settings):
        seen = []

        class ContextRecordingConnection(RecordingConnection):
            def execute_batch(self, sql, rows):
                seen.append(structlog.contextvars.get_contextvars())
                super().execute_batch(sql, rows)

        result = insert_table(
            ContextRecordingConnection("sql server"), "person", person_frame, settings=settings
        )

        assert seen == [{"execution_id": result.execution_id, "table": "person"}]
        assert structlog.contextvars.get_contextvars() == {}

    def test_temp_emulation_schema_passed_to_translator(self, connection, person_frame, settings):
        insert_table(
            connection, "person", person_frame, temp_emulation_schema="scratch", settings=settings
        )

        assert connection.translate_calls
        assert all(schema == "scratch" for _, schema in connection.translate_calls)


@pytest.mark.unit
class TestTempTables:
    def test_hash_name_sets_temp_flag_with_warning(self, connection, person_frame, settings):
        with patch("table_uploader.io.loader.core.logger") as mock_logger:
            insert_table(connection, "#person", person_frame, settings=settings)

        events = [call.args[0] for call in mock_logger.warning.call_args_list]
        assert "insert_table.temp_flag_inferred" in events
        assert connection.executed[1].startswith("CREATE TABLE #person ")

    def test_schema_ignored_for_temp_table(self, connection, person_frame, settings):
        with patch("table_uploader.io.loader.core.logger") as mock_logger:
            insert_table(
                connection,
                "person",
                person_frame,
                temp_table=True,
                database_schema="scratch",
                settings=settings,
            )

        events = [call.args[0] for call in mock_logger.warning.call_args_list]
        assert "insert_table.schema_ignored" in events
        assert "scratch" not in connection.executed[1]
        assert connection.batches[0][0].startswith("INSERT INTO #person ")

    def test_redshift_session_temp_table(self, person_frame, settings):
        connection = RecordingConnection("redshift")

        insert_table(connection, "person", person_frame, temp_table=True, settings=settings)

        assert connection.executed[0] == "DROP TABLE IF EXISTS person;"
        assert connection.executed[1].startswith("CREATE TEMP TABLE person AS SELECT")

    def test_postgresql_session_temp_table(self, person_frame, settings):
        connection = RecordingConnection("postgresql")

        insert_table(connection, "person", person_frame, temp_table=True, settings=settings)

        assert connection.executed == [
            "DROP TABLE IF EXISTS person;",
            "CREATE TEMP TABLE person (person_id INTEGER, name VARCHAR(255));",
        ]
        assert connection.batches[0][0] == "INSERT INTO person (person_id,name) VALUES (%s,%s)"

    def test_only_one_hash_is_stripped(self, connection, person_frame, settings):
        insert_table(connection, "##global", person_frame, settings=settings)

        assert connection.executed[1].startswith('CREATE TABLE #"#global" ')


@pytest.mark.unit
class TestCtasStrategy:
    def test_pdw_new_table_uses_single_ctas(self, person_frame, settings):
        connection = RecordingConnection("pdw")

        result = insert_table(
            connection, "person", person_frame, database_schema="scratch", settings=settings
        )

        assert result.strategy == InsertStrategy.CTAS_HACK
        assert len(connection.executed) == 2
        assert connection.executed[1] == (
            "CREATE TABLE scratch.person AS SELECT * FROM ("
            "SELECT CAST(1 AS INTEGER) AS person_id, CAST('a' AS VARCHAR(255)) AS name "
            "UNION ALL SELECT 2, 'b' UNION ALL SELECT 3, NULL) t;"
        )
        assert connection.batches == []

    def test_pdw_existing_table_uses_batches(self, person_frame, settings):
        connection = RecordingConnection("pdw")

        result = insert_table(
            connection,
            "person",
            person_frame,
            drop_table_if_exists=False,
            create_table=False,
            settings=settings,
        )

        assert result.strategy == InsertStrategy.DIRECT_INSERT
        assert connection.batch_sizes == [3]


@pytest.mark.unit
class TestBulkLoad:
    def test_redshift_bulk_load(self, person_frame, bulk_settings):
        connection = RecordingConnection("redshift")
        transport = RecordingTransport()

        result = insert_table(
            connection,
            "person",
            person_frame,
            database_schema="scratch",
            bulk_load=True,
            settings=bulk_settings,
            transport=transport,
        )

        assert result.strategy == InsertStrategy.BULK_LOAD
        assert connection.executed[0] == "DROP TABLE IF EXISTS scratch.person;"
        assert connection.executed[1].startswith("CREATE TABLE scratch.person")
        assert connection.executed[2].startswith("COPY scratch.person FROM 's3://staging-bucket/uploads/")
        assert connection.batches == []
        assert "wJalrXUtnFEMI" not in " ".join(result.statements)

    def test_bulk_flag_from_string(self, person_frame, bulk_settings):
        connection = RecordingConnection("redshift")

        result = insert_table(
            connection,
            "person",
            person_frame,
            bulk_load="TRUE",
            settings=bulk_settings,
            transport=RecordingTransport(),
        )

        assert result.strategy == InsertStrategy.BULK_LOAD

    def test_bulk_flag_from_settings(self, person_frame, bulk_settings):
        bulk_settings.bulk_load = True
        connection = RecordingConnection("redshift")

        result = insert_table(
            connection, "person", person_frame, settings=bulk_settings, transport=RecordingTransport()
        )

        assert result.strategy == InsertStrategy.BULK_LOAD

    def test_missing_credentials_fail_before_drop(self, person_frame, settings):
        connection = RecordingConnection("redshift")

        with pytest.raises(BulkLoadConfigurationError) as exc_info:
            insert_table(
                connection,
                "person",
                person_frame,
                bulk_load=True,
                settings=settings,
                transport=RecordingTransport(),
            )

        assert "AWS_BUCKET_NAME" in exc_info.value.missing_fields
        assert connection.executed == []

    def test_hive_bulk_load_skips_create(self, person_frame, bulk_settings):
        connection = RecordingConnection("hive")
        transport = RecordingTransport()

        insert_table(
            connection,
            "person",
            person_frame,
            bulk_load=True,
            settings=bulk_settings,
            transport=transport,
        )

        assert connection.executed[0] == "DROP TABLE IF EXISTS person;"
        assert len(connection.executed) == 2
        assert "STORED AS TEXTFILE LOCATION '/user/hive/uploads/person'" in connection.executed[1]


@pytest.mark.unit
class TestDeprecatedArguments:
    def test_use_mpp_bulk_load_alias(self, person_frame, bulk_settings):
        connection = RecordingConnection("redshift")

        with pytest.warns(DeprecationWarning, match="use_mpp_bulk_load"):
            result = insert_table(
                connection,
                "person",
                person_frame,
                use_mpp_bulk_load=True,
                settings=bulk_settings,
                transport=RecordingTransport(),
            )

        assert result.strategy == InsertStrategy.BULK_LOAD

    def test_oracle_temp_schema_alias(self, connection, person_frame, settings):
        with pytest.warns(DeprecationWarning, match="oracle_temp_schema"):
            insert_table(
                connection, "person", person_frame, oracle_temp_schema="temp", settings=settings
            )

        assert all(schema == "temp" for _, schema in connection.translate_calls)


@pytest.mark.unit
class TestDataCoercion:
    def test_camel_case_conversion(self, connection, settings):
        frame = pd.DataFrame({"personId": [1], "yearOfBirth": [1970]})

        insert_table(connection, "person", frame, camel_case_to_snake_case=True, settings=settings)

        assert connection.executed[1] == (
            "CREATE TABLE person (person_id INTEGER, year_of_birth INTEGER);"
        )

    def test_reserved_words_warn_but_upload(self, connection, settings):
        frame = pd.DataFrame({"order": [1]})

        with patch("table_uploader.infrastructure.sql.core.reserved_words.logger") as mock_logger:
            insert_table(connection, "person", frame, settings=settings)

        mock_logger.warning.assert_called_once()
        assert connection.batch_sizes == [1]

    def test_no_columns_rejected(self, connection, settings):
        with pytest.raises(InvalidDataError):
            insert_table(connection, "person", pd.DataFrame(), settings=settings)

    def test_to_frame_renames_positional_labels(self):
        frame = to_frame(pd.DataFrame([[1, 2]]))
        assert list(frame.columns) == ["V1", "V2"]

    def test_to_frame_from_sequence(self):
        assert list(to_frame([1, 2, 3]).columns) == ["x"]

    def test_to_frame_from_dict(self):
        assert list(to_frame({"a": [1], "b": ["x"]}).columns) == ["a", "b"]

"""
Tests for the SQLAlchemy upload path against in-memory SQLite.
"""

import datetime

import pandas as pd
import pytest
from sqlalchemy import BigInteger, Integer, String, create_engine, inspect, text

from table_uploader import insert_table
from table_uploader.io.loader.models import InsertStrategy, TableTarget
from table_uploader.io.loader.sqlalchemy_writer import build_table
from table_uploader.io.loader.type_inference import describe_columns


@pytest.fixture
def engine():
    engine = create_engine("sqlite:///:memory:")
    yield engine
    engine.dispose()


@pytest.mark.unit
class TestBuildTable:
    def test_column_types(self):
        frame = pd.DataFrame({"small": [1], "big": [2**40], "name": ["x" * 300]})
        table = build_table(TableTarget("t"), describe_columns(frame))

        assert isinstance(table.c.small.type, Integer)
        assert isinstance(table.c.big.type, BigInteger)
        assert isinstance(table.c.name.type, String)
        assert table.c.name.type.length == 300

    def test_temp_table_prefix(self):
        frame = pd.DataFrame({"a": [1]})
        table = build_table(TableTarget("t", schema=None, is_temporary=True), describe_columns(frame))

        assert "TEMPORARY" in table._prefixes


@pytest.mark.unit
class TestSqlAlchemyInsert:
    def test_round_trip_through_engine(self, engine):
        frame = pd.DataFrame(
            {
                "person_id": [1, 2, 3],
                "name": ["a", "b", None],
                "birth_date": [datetime.date(1970, 1, 1), None, datetime.date(1990, 5, 17)],
            }
        )

        result = insert_table(engine, "person", frame, batch_size=2)

        assert result.strategy == InsertStrategy.DIRECT_INSERT
        assert result.batches == 2
        with engine.connect() as conn:
            rows = conn.execute(text("SELECT person_id, name FROM person ORDER BY person_id")).all()
        assert rows == [(1, "a"), (2, "b"), (3, None)]

    def test_drop_replaces_existing_table(self, engine):
        insert_table(engine, "person", pd.DataFrame({"a": [1, 2]}))
        insert_table(engine, "person", pd.DataFrame({"b": ["x"]}))

        columns = [c["name"] for c in inspect(engine).get_columns("person")]
        assert columns == ["b"]

    def test_append_to_existing_table(self, engine):
        insert_table(engine, "person", pd.DataFrame({"a": [1]}))
        insert_table(
            engine,
            "person",
            pd.DataFrame({"a": [2]}),
            drop_table_if_exists=False,
            create_table=False,
        )

        with engine.connect() as conn:
            count = conn.execute(text("SELECT COUNT(*) FROM person")).scalar()
        assert count == 2

    def test_connection_owned_by_caller(self, engine):
        with engine.begin() as conn:
            insert_table(conn, "person", pd.DataFrame({"a": [1, 2, 3]}))
            count = conn.execute(text("SELECT COUNT(*) FROM person")).scalar()

        assert count == 3

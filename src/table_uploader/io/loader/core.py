"""
insert_table: upload a data frame into a database table.

The call is planned once up front (column types, quoted names, qualified
table name and strategy) into an immutable InsertPlan. The table is then
dropped and created as requested and the rows are moved by exactly one
strategy: batched parameterized inserts, a native bulk loader, or a single
CREATE TABLE AS SELECT.
"""

import time
import uuid
import warnings
from typing import Any, Callable, List, Optional, Tuple

import pandas as pd

from table_uploader.config import Settings, get_settings, parse_flag
from table_uploader.infrastructure.sql.core.identifier import escape_identifiers
from table_uploader.infrastructure.sql.core.reserved_words import check_reserved_words
from table_uploader.infrastructure.sql.operations.insert import InsertBuilder
from table_uploader.io.bulk import BulkTransport, build_bulk_loader
from table_uploader.io.connectors.connection import DatabaseConnection
from table_uploader.io.loader.batched_insert import BatchedInsertExecutor
from table_uploader.io.loader.ctas import CtasMaterializer
from table_uploader.io.loader.models import (
    InsertPlan,
    InsertStrategy,
    InvalidDataError,
    LoadResult,
    TableTarget,
)
from table_uploader.io.loader.sqlalchemy_writer import (
    SqlAlchemyTableWriter,
    is_sqlalchemy_connectable,
)
from table_uploader.io.loader.strategy import select_strategy
from table_uploader.io.loader.type_inference import describe_columns
from table_uploader.utils.column_normalizer import normalize_column_names
from table_uploader.utils.logging import get_logger, upload_context

logger = get_logger(__name__)

TEMP_TABLE_PREFIX = "#"


def to_frame(data: Any) -> pd.DataFrame:
    """
    Coerce the upload payload to a DataFrame with string column names.

    Series keep their name, dicts map names to columns and a plain sequence
    becomes a single column ``x``. Non-string labels are renamed ``V1..Vn``
    by position.
    """
    if isinstance(data, pd.DataFrame):
        frame = data
    elif isinstance(data, pd.Series):
        frame = data.to_frame(name=data.name if isinstance(data.name, str) else "x")
    elif isinstance(data, dict):
        frame = pd.DataFrame(data)
    elif isinstance(data, (list, tuple)):
        frame = pd.DataFrame({"x": list(data)})
    else:
        raise InvalidDataError(f"Cannot upload data of type {type(data).__name__}")

    if len(frame.columns) < 1:
        raise InvalidDataError("Data must have at least one column")

    labels = [
        label if isinstance(label, str) else f"V{position + 1}"
        for position, label in enumerate(frame.columns)
    ]
    if labels != list(frame.columns):
        frame = frame.set_axis(labels, axis=1)
    return frame.reset_index(drop=True)


def _resolve_deprecated(
    bulk_load: Any,
    use_mpp_bulk_load: Any,
    temp_emulation_schema: Optional[str],
    oracle_temp_schema: Optional[str],
) -> Tuple[Any, Optional[str]]:
    if use_mpp_bulk_load is not None:
        warnings.warn(
            "The 'use_mpp_bulk_load' argument is deprecated. Use 'bulk_load' instead.",
            category=DeprecationWarning,
            stacklevel=3,
        )
        bulk_load = use_mpp_bulk_load
    if oracle_temp_schema is not None:
        warnings.warn(
            "The 'oracle_temp_schema' argument is deprecated. "
            "Use 'temp_emulation_schema' instead.",
            category=DeprecationWarning,
            stacklevel=3,
        )
        temp_emulation_schema = oracle_temp_schema
    return bulk_load, temp_emulation_schema


def _resolve_target(
    table_name: str, database_schema: Optional[str], temp_table: bool
) -> TableTarget:
    if table_name.startswith(TEMP_TABLE_PREFIX):
        if not temp_table:
            logger.warning(
                "insert_table.temp_flag_inferred",
                table=table_name,
                hint="Table name starts with '#'; creating a temp table",
            )
        temp_table = True
        table_name = table_name[len(TEMP_TABLE_PREFIX) :]

    if temp_table and database_schema:
        logger.warning(
            "insert_table.schema_ignored",
            table=table_name,
            schema=database_schema,
            hint="Temp tables cannot be schema-qualified",
        )
        database_schema = None

    if not table_name:
        raise InvalidDataError("Table name must not be empty")
    return TableTarget(name=table_name, schema=database_schema, is_temporary=temp_table)


def build_plan(
    connection: DatabaseConnection,
    target: TableTarget,
    frame: pd.DataFrame,
    create_table: bool,
    bulk_load: bool,
) -> InsertPlan:
    """
    Decide everything about the upload before any statement runs.

    Raises:
        IdentifierQuotingError: If names need quoting and the connection cannot quote
    """
    dialect = connection.dialect
    quote = connection.identifier_quote
    columns = tuple(describe_columns(frame))
    quoted_columns = tuple(escape_identifiers([column.name for column in columns], quote))
    qualified_name = dialect.qualify(target.name, target.schema, target.is_temporary, quote)
    strategy = select_strategy(
        dialect,
        create_table=create_table,
        is_temporary=target.is_temporary,
        bulk_load_requested=bulk_load,
        row_count=len(frame),
    )
    return InsertPlan(
        target=target,
        columns=columns,
        strategy=strategy,
        qualified_name=qualified_name,
        quoted_columns=quoted_columns,
        row_count=len(frame),
    )


def insert_table(
    connection: Any,
    table_name: str,
    data: Any,
    *,
    database_schema: Optional[str] = None,
    drop_table_if_exists: bool = True,
    create_table: bool = True,
    temp_table: bool = False,
    temp_emulation_schema: Optional[str] = None,
    oracle_temp_schema: Optional[str] = None,
    bulk_load: Any = None,
    use_mpp_bulk_load: Any = None,
    progress_bar: bool = False,
    progress_callback: Optional[Callable[[float], None]] = None,
    camel_case_to_snake_case: bool = False,
    batch_size: Optional[int] = None,
    settings: Optional[Settings] = None,
    transport: Optional[BulkTransport] = None,
) -> LoadResult:
    """
    Insert a table into the database.

    Args:
        connection: DatabaseConnection, or a SQLAlchemy Engine/Connection
        table_name: Target table; a leading ``#`` requests a temp table
        data: DataFrame (or Series, dict of columns, plain sequence)
        database_schema: Schema holding the table; ignored for temp tables
        drop_table_if_exists: Drop the table first; implies ``create_table``
        create_table: Create the table before inserting
        temp_table: Create a temp table
        temp_emulation_schema: Passed to the connection's SQL translator
        oracle_temp_schema: Deprecated, use ``temp_emulation_schema``
        bulk_load: Use the native bulk loader where eligible; True/False or
            "TRUE"/"FALSE". Defaults to DATABASE_CONNECTOR_BULK_UPLOAD
        use_mpp_bulk_load: Deprecated, use ``bulk_load``
        progress_bar: Show a tqdm bar for batched inserts
        progress_callback: Called with the processed fraction after each batch
        camel_case_to_snake_case: Convert column names before upload
        batch_size: Rows per insert batch; defaults to INSERT_BATCH_SIZE
        settings: Settings to use instead of get_settings()
        transport: Side-effect boundary for bulk loaders

    Returns:
        LoadResult with the strategy used, rows, batches and timing

    Raises:
        InvalidDataError: If the data has no columns
        IdentifierQuotingError: If names need quoting the connection cannot provide
        BulkLoadConfigurationError: If bulk loading was chosen but is misconfigured
        Int64TransportError: If BIGINT values would not survive binding
        BulkLoadError: If a native loader reports failure
    """
    bulk_load, temp_emulation_schema = _resolve_deprecated(
        bulk_load, use_mpp_bulk_load, temp_emulation_schema, oracle_temp_schema
    )
    settings = settings or get_settings()
    bulk_load = settings.bulk_load if bulk_load is None else parse_flag(bulk_load)
    batch_size = batch_size or settings.batch_size
    temp_emulation_schema = temp_emulation_schema or settings.temp_emulation_schema

    frame = to_frame(data)
    if camel_case_to_snake_case:
        frame = frame.set_axis(normalize_column_names(frame.columns), axis=1)

    target = _resolve_target(table_name, database_schema, temp_table)
    if drop_table_if_exists:
        create_table = True
    check_reserved_words([target.name] + list(frame.columns))

    execution_id = uuid.uuid4().hex
    start_time = time.perf_counter()

    with upload_context(execution_id=execution_id, table=target.name):
        if is_sqlalchemy_connectable(connection):
            return _insert_with_sqlalchemy(
                connection,
                target,
                frame,
                drop_table_if_exists,
                create_table,
                batch_size,
                progress_bar,
                progress_callback,
                execution_id,
                start_time,
            )
        return _insert_with_plan(
            connection,
            target,
            frame,
            drop_table_if_exists,
            create_table,
            bulk_load,
            batch_size,
            progress_bar,
            progress_callback,
            temp_emulation_schema,
            settings,
            transport,
            execution_id,
            start_time,
        )


def _insert_with_plan(
    connection: DatabaseConnection,
    target: TableTarget,
    frame: pd.DataFrame,
    drop_table_if_exists: bool,
    create_table: bool,
    bulk_load: bool,
    batch_size: int,
    progress_bar: bool,
    progress_callback: Optional[Callable[[float], None]],
    temp_emulation_schema: Optional[str],
    settings: Settings,
    transport: Optional[BulkTransport],
    execution_id: str,
    start_time: float,
) -> LoadResult:
    plan = build_plan(connection, target, frame, create_table, bulk_load)
    logger.info(
        "insert_table.started",
        table=plan.qualified_name,
        dialect=connection.dialect.name,
        strategy=plan.strategy.value,
        rows=plan.row_count,
        columns=len(plan.columns),
        execution_id=execution_id,
    )

    bulk_loader = None
    if plan.strategy == InsertStrategy.BULK_LOAD:
        # Fail on credentials before anything is dropped
        bulk_loader = build_bulk_loader(
            connection, settings, transport, temp_emulation_schema=temp_emulation_schema
        )
        bulk_loader.verify()

    statements: List[str] = []

    def run(sql: str) -> None:
        sql = connection.translate(sql, temp_emulation_schema=temp_emulation_schema)
        statements.append(sql)
        connection.execute(sql)

    builder = InsertBuilder(connection.dialect)
    batches = 0
    try:
        if drop_table_if_exists:
            run(builder.drop_if_exists(plan))

        skip_create = plan.strategy == InsertStrategy.CTAS_HACK or (
            plan.strategy == InsertStrategy.BULK_LOAD and connection.dialect.bulk_load_creates_table
        )
        if create_table and not skip_create:
            run(builder.create_table(plan))

        if plan.strategy == InsertStrategy.BULK_LOAD:
            bulk_loader.load(plan, frame)
            statements.extend(bulk_loader.statements)
            batches = 1
        elif plan.strategy == InsertStrategy.CTAS_HACK:
            materializer = CtasMaterializer(connection, temp_emulation_schema=temp_emulation_schema)
            batches = materializer.execute(plan, frame)
            statements.extend(materializer.statements)
        else:
            executor = BatchedInsertExecutor(
                connection,
                batch_size=batch_size,
                progress_bar=progress_bar,
                progress_callback=progress_callback,
                temp_emulation_schema=temp_emulation_schema,
            )
            batches = executor.execute(plan, frame)
            statements.extend(executor.statements)
    except Exception as exc:
        logger.error(
            "insert_table.failed",
            table=plan.qualified_name,
            strategy=plan.strategy.value,
            execution_id=execution_id,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            error=str(exc),
        )
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "insert_table.completed",
        table=plan.qualified_name,
        strategy=plan.strategy.value,
        rows=plan.row_count,
        batches=batches,
        execution_id=execution_id,
        duration_ms=duration_ms,
    )
    return LoadResult(
        strategy=plan.strategy,
        rows_inserted=plan.row_count,
        batches=batches,
        duration_ms=duration_ms,
        execution_id=execution_id,
        statements=statements,
    )


def _insert_with_sqlalchemy(
    connectable: Any,
    target: TableTarget,
    frame: pd.DataFrame,
    drop_table_if_exists: bool,
    create_table: bool,
    batch_size: int,
    progress_bar: bool,
    progress_callback: Optional[Callable[[float], None]],
    execution_id: str,
    start_time: float,
) -> LoadResult:
    columns = describe_columns(frame)
    logger.info(
        "insert_table.started",
        table=target.name,
        dialect="sqlalchemy",
        strategy=InsertStrategy.DIRECT_INSERT.value,
        rows=len(frame),
        columns=len(columns),
        execution_id=execution_id,
    )
    writer = SqlAlchemyTableWriter(
        connectable,
        batch_size=batch_size,
        progress_bar=progress_bar,
        progress_callback=progress_callback,
    )
    batches = writer.write(target, columns, frame, drop_table_if_exists, create_table)
    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        "insert_table.completed",
        table=target.name,
        strategy=InsertStrategy.DIRECT_INSERT.value,
        rows=len(frame),
        batches=batches,
        execution_id=execution_id,
        duration_ms=duration_ms,
    )
    return LoadResult(
        strategy=InsertStrategy.DIRECT_INSERT,
        rows_inserted=len(frame),
        batches=batches,
        duration_ms=duration_ms,
        execution_id=execution_id,
    )

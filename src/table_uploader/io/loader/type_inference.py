"""
Column type inference.

Maps a pandas column to its value semantics and a portable SQL type:

    integer (fits 32 bits)  -> INTEGER
    datetime64              -> DATETIME2
    datetime.date objects   -> DATE
    integer (wider)         -> BIGINT
    other numeric           -> FLOAT
    anything else           -> VARCHAR(n), n = max(255, longest value)

Integer columns holding missing values must use a nullable integer dtype
(``Int64``); a plain int column with NaN is float in pandas and maps to FLOAT.
"""

import datetime
from typing import List, Optional, Tuple

import pandas as pd

from table_uploader.io.loader.models import ColumnDescriptor, SemanticType

DEFAULT_VARCHAR_LENGTH = 255
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

SQL_TYPES = {
    SemanticType.INTEGER32: "INTEGER",
    SemanticType.INTEGER64: "BIGINT",
    SemanticType.FLOAT: "FLOAT",
    SemanticType.DATE: "DATE",
    SemanticType.DATETIME: "DATETIME2",
}

_NARROW_INTEGER_DTYPES = {"int8", "int16", "int32", "uint8", "uint16"}


def _is_date_column(column: pd.Series) -> bool:
    if column.dtype != object:
        return False
    present = column.dropna()
    if present.empty:
        return False
    return all(
        isinstance(value, datetime.date) and not isinstance(value, datetime.datetime)
        for value in present
    )


def _integer_semantic_type(column: pd.Series) -> SemanticType:
    if str(column.dtype).lower() in _NARROW_INTEGER_DTYPES:
        return SemanticType.INTEGER32
    present = column.dropna()
    if present.empty:
        return SemanticType.INTEGER32
    if int(present.min()) >= INT32_MIN and int(present.max()) <= INT32_MAX:
        return SemanticType.INTEGER32
    return SemanticType.INTEGER64


def infer_semantic_type(column: pd.Series) -> SemanticType:
    """Classify a column's values; rules are applied in priority order."""
    dtype = column.dtype
    if pd.api.types.is_bool_dtype(dtype):
        return SemanticType.TEXT
    if pd.api.types.is_integer_dtype(dtype):
        return _integer_semantic_type(column)
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return SemanticType.DATETIME
    if _is_date_column(column):
        return SemanticType.DATE
    if pd.api.types.is_numeric_dtype(dtype):
        return SemanticType.FLOAT
    return SemanticType.TEXT


def measure_text_length(column: pd.Series) -> Optional[int]:
    """
    Length of the longest textual value, or None when nothing can be measured.

    Categorical columns are measured by their category labels, so unused
    labels still fit in the column.
    """
    if isinstance(column.dtype, pd.CategoricalDtype):
        labels = column.cat.categories
        if len(labels) == 0:
            return None
        return int(pd.Series(labels).astype(str).str.len().max())

    present = column.dropna()
    if present.empty:
        return None
    return int(present.astype(str).str.len().max())


def varchar_type(length: Optional[int]) -> Tuple[str, int]:
    """Return the VARCHAR type and the width it was derived from."""
    if length is None or length <= DEFAULT_VARCHAR_LENGTH:
        return f"VARCHAR({DEFAULT_VARCHAR_LENGTH})", length or DEFAULT_VARCHAR_LENGTH
    return f"VARCHAR({length})", length


def infer_sql_type(column: pd.Series) -> str:
    """
    Return the SQL column type for a pandas column.

    Examples:
        >>> infer_sql_type(pd.Series([1, 2, 3]))
        'INTEGER'
        >>> infer_sql_type(pd.Series([None, None], dtype=object))
        'VARCHAR(255)'
    """
    return describe_column(str(column.name), column).sql_type


def describe_column(name: str, column: pd.Series) -> ColumnDescriptor:
    semantic_type = infer_semantic_type(column)
    if semantic_type != SemanticType.TEXT:
        return ColumnDescriptor(name, semantic_type, SQL_TYPES[semantic_type])
    sql_type, width = varchar_type(measure_text_length(column))
    return ColumnDescriptor(name, semantic_type, sql_type, max_text_length=width)


def describe_columns(frame: pd.DataFrame) -> List[ColumnDescriptor]:
    """Describe every column of ``frame`` in order."""
    return [describe_column(str(name), frame.iloc[:, i]) for i, name in enumerate(frame.columns)]

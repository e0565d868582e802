"""
Parameter binding by semantic type.

Each column is converted as a whole into plain Python values the DB-API
driver binds without loss: exact ints for both integer widths, floats,
``datetime.date`` / ``datetime.datetime`` and ``str``. Missing values become
None in every column.
"""

import datetime
import math
from typing import Any, Callable, Dict, Iterator, List, Sequence, Tuple

import pandas as pd

from table_uploader.infrastructure.sql.operations.ctas import is_missing
from table_uploader.io.loader.models import ColumnDescriptor, SemanticType


def _bind_int(value: Any) -> Any:
    return int(value)


def _bind_float(value: Any) -> Any:
    number = float(value)
    return number if math.isfinite(number) else None


def _bind_date(value: Any) -> Any:
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


def _bind_datetime(value: Any) -> Any:
    return pd.Timestamp(value).to_pydatetime()


def _bind_text(value: Any) -> Any:
    return str(value)


BINDERS: Dict[SemanticType, Callable[[Any], Any]] = {
    SemanticType.INTEGER32: _bind_int,
    SemanticType.INTEGER64: _bind_int,
    SemanticType.FLOAT: _bind_float,
    SemanticType.DATE: _bind_date,
    SemanticType.DATETIME: _bind_datetime,
    SemanticType.TEXT: _bind_text,
}


def bind_values(values: Sequence[Any], semantic_type: SemanticType) -> List[Any]:
    """Convert one column's values for binding."""
    binder = BINDERS[semantic_type]
    return [None if is_missing(value) else binder(value) for value in values]


def bind_rows(frame: pd.DataFrame, columns: Sequence[ColumnDescriptor]) -> List[Tuple[Any, ...]]:
    """Bind every column of ``frame`` and return row tuples in frame order."""
    bound = [
        bind_values(frame.iloc[:, i].tolist(), column.semantic_type)
        for i, column in enumerate(columns)
    ]
    return list(zip(*bound))


def iter_batches(frame: pd.DataFrame, batch_size: int) -> Iterator[pd.DataFrame]:
    """Yield consecutive row slices of at most ``batch_size`` rows, in order."""
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")
    for start in range(0, len(frame), batch_size):
        yield frame.iloc[start : start + batch_size]

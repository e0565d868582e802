"""
Reserved word detection for table and column names.

A reserved word is still a valid identifier for the upload; callers get a
warning so they can rename before the name breaks hand-written queries.
"""

from typing import Iterable, List

from table_uploader.utils.logging import get_logger

logger = get_logger(__name__)

# Union of ANSI SQL and the reserved words of the supported dialects
SQL_RESERVED_WORDS = frozenset(
    """
    ADD ALL ALTER AND ANY AS ASC AUTHORIZATION BACKUP BEGIN BETWEEN BIGINT BINARY
    BOTH BREAK BROWSE BULK BY CASCADE CASE CAST CHAR CHARACTER CHECK CHECKPOINT
    CLOSE CLUSTERED COALESCE COLLATE COLUMN COMMIT COMPUTE CONSTRAINT CONTAINS
    CONTINUE CONVERT CREATE CROSS CURRENT CURRENT_DATE CURRENT_TIME
    CURRENT_TIMESTAMP CURRENT_USER CURSOR DATABASE DATE DATETIME DBCC DEALLOCATE
    DECIMAL DECLARE DEFAULT DELETE DENY DESC DISK DISTINCT DISTRIBUTED DOUBLE DROP
    DUMP ELSE END ERRLVL ESCAPE EXCEPT EXEC EXECUTE EXISTS EXIT EXTERNAL FALSE
    FETCH FILE FILLFACTOR FLOAT FOR FOREIGN FREETEXT FROM FULL FUNCTION GOTO GRANT
    GROUP HAVING HOLDLOCK IDENTITY IDENTITYCOL IF IN INDEX INNER INSERT INT INTEGER
    INTERSECT INTERVAL INTO IS JOIN KEY KILL LEADING LEFT LIKE LIMIT LINENO LOAD
    MERGE NATIONAL NATURAL NOCHECK NONCLUSTERED NOT NULL NULLIF NUMERIC OF OFF
    OFFSET OFFSETS ON OPEN OPTION OR ORDER OUTER OVER PARTITION PERCENT PIVOT PLAN
    PRECISION PRIMARY PRINT PROC PROCEDURE PUBLIC RAISERROR RANGE READ READTEXT
    RECONFIGURE REFERENCES REPLICATION RESTORE RESTRICT RETURN REVERT REVOKE RIGHT
    ROLLBACK ROW ROWCOUNT ROWGUIDCOL ROWS RULE SAVE SCHEMA SELECT SESSION_USER SET
    SETUSER SHUTDOWN SMALLINT SOME STATISTICS SYSTEM_USER TABLE TABLESAMPLE
    TEXTSIZE THEN TIME TIMESTAMP TO TOP TRAN TRANSACTION TRIGGER TRUE TRUNCATE
    TRY_CONVERT UNION UNIQUE UNPIVOT UPDATE UPDATETEXT USE USER USING VALUES
    VARCHAR VARYING VIEW WAITFOR WHEN WHERE WHILE WINDOW WITH WITHIN WRITETEXT
    """.split()
)


def is_reserved_word(name: str) -> bool:
    """
    Check whether ``name`` is a reserved SQL word (exact, case-insensitive).

    A leading ``#`` temp-table marker and a schema prefix are ignored.

    Examples:
        >>> is_reserved_word("order")
        True
        >>> is_reserved_word("order_date")
        False
    """
    bare = name.rsplit(".", 1)[-1].lstrip("#")
    return bare.upper() in SQL_RESERVED_WORDS


def check_reserved_words(names: Iterable[str], warn: bool = True) -> List[str]:
    """
    Return the names that are reserved words, logging a warning when any are found.

    Args:
        names: Table and column names to check
        warn: Emit a ``sql.reserved_words.detected`` warning

    Returns:
        The reserved names, in input order
    """
    reserved = [name for name in names if is_reserved_word(name)]
    if reserved and warn:
        logger.warning(
            "sql.reserved_words.detected",
            names=reserved,
            hint="Consider renaming; reserved words may need quoting in hand-written SQL",
        )
    return reserved

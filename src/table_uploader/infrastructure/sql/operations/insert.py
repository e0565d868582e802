"""
Statement builders for an upload.

InsertBuilder renders the drop, create and parameterized insert statements
for an InsertPlan through the connection's dialect.
"""

from table_uploader.io.loader.models import InsertPlan

from ..dialects.base import Dialect


class InsertBuilder:
    """
    High-level builder for upload statements.

    Example:
        >>> from table_uploader.infrastructure.sql import InsertBuilder, get_dialect
        >>> builder = InsertBuilder(get_dialect("postgresql"))
        >>> builder.insert(plan)
        'INSERT INTO scratch.person (person_id,name) VALUES (%s,%s)'
    """

    def __init__(self, dialect: Dialect):
        self.dialect = dialect

    def drop_if_exists(self, plan: InsertPlan) -> str:
        return self.dialect.build_drop_if_exists(plan.qualified_name, plan.target.is_temporary)

    def create_table(self, plan: InsertPlan) -> str:
        return self.dialect.build_create_table(
            plan.qualified_name,
            plan.quoted_columns,
            plan.sql_types,
            temporary=plan.target.is_temporary,
        )

    def insert(self, plan: InsertPlan) -> str:
        """Build the INSERT with generic ``?`` placeholders, one per column."""
        return self.dialect.build_insert(plan.qualified_name, plan.quoted_columns)

"""Connection collaborators."""

from .connection import ConnectionDetails, DatabaseConnection, DbapiConnection

__all__ = ["ConnectionDetails", "DatabaseConnection", "DbapiConnection"]

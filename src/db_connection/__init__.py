"""
db-connection: a single-handle relational database access layer.

Opens one connection, runs parameterized statements against it and returns
affected-row counts, rows, or generated identifiers as explicit results.
"""

__version__ = "0.1.0"

from db_connection.core import DatabaseConnection
from db_connection.exceptions import (
    ConnectionOpenError,
    DatabaseError,
    StatementError,
)
from db_connection.models import DatabaseConfig, PreparedStatement, Result

__all__ = [
    "DatabaseConnection",
    "DatabaseConfig",
    "PreparedStatement",
    "Result",
    "DatabaseError",
    "ConnectionOpenError",
    "StatementError",
]

"""Base adapter abstract class for database-specific behaviour."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Union

from sqlalchemy import text
from sqlalchemy.engine import Connection

from db_connection.models.config import DatabaseConfig
from db_connection.models.statement import PreparedStatement


@dataclass(frozen=True, slots=True)
class ExecutedStatement:
    """Buffered outcome of one statement, independent of the driver."""

    rowcount: int
    lastrowid: Union[int, str, None] = None
    rows: Optional[list[dict[str, Any]]] = None  # None: no result set


class BaseAdapter(ABC):
    """Base adapter defining the dialect-specific pieces of a connection."""

    #: Key under which the column catalog reports a column's name
    column_name_field: str = "COLUMN_NAME"

    #: Whether the driver's cursor reports the generated row id
    reports_lastrowid: bool = True

    @property
    @abstractmethod
    def dialect(self) -> str:
        """Dialect handled by this adapter."""
        ...

    @abstractmethod
    def connect_args(self, config: DatabaseConfig) -> dict[str, Any]:
        """
        Driver keyword arguments applied to every new handle.

        These carry the mandatory session settings (character encoding,
        server-side statement preparation where the driver offers it).

        Args:
            config: Database configuration

        Returns:
            Keyword arguments for the DBAPI ``connect()`` call
        """
        ...

    @abstractmethod
    def column_catalog_query(self) -> str:
        """
        SQL returning column metadata rows for the ``:table`` placeholder.

        Returns:
            SQL text with a single ``:table`` named placeholder
        """
        ...

    def run_statement(
        self, conn: Connection, statement: PreparedStatement
    ) -> ExecutedStatement:
        """
        Execute a statement and buffer everything it produced.

        The default binds through SQLAlchemy ``text()`` parameters. Driver
        errors surface as ``SQLAlchemyError``.

        Args:
            conn: Open connection
            statement: SQL with named placeholders and bound values

        Returns:
            Row count, generated id and rows (if the statement returned any)
        """
        result = conn.execute(text(statement.sql), statement.params)
        if not result.returns_rows:
            lastrowid = result.lastrowid if self.reports_lastrowid else None
            return ExecutedStatement(rowcount=result.rowcount, lastrowid=lastrowid)

        rows = [dict(row) for row in result.mappings().all()]
        return ExecutedStatement(rowcount=result.rowcount, rows=rows)

    def fetch_last_insert_id(
        self, conn: Connection, executed: ExecutedStatement
    ) -> Union[int, str, None]:
        """
        Identifier generated by the most recent insert on ``conn``.

        Args:
            conn: Connection the insert ran on
            executed: Outcome of the insert statement

        Returns:
            Generated identifier, or None if the driver reports none
        """
        return executed.lastrowid

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

"""MySQL adapter (mysql-connector-python driver)."""

from typing import Any

from mysql.connector.constants import ClientFlag
from sqlalchemy import text
from sqlalchemy.dialects.mysql.base import MySQLDialect
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError

from db_connection.adapters.base import BaseAdapter, ExecutedStatement
from db_connection.models.config import DatabaseConfig
from db_connection.models.statement import PreparedStatement

# Compiles ``:name`` placeholders to the ``?`` markers COM_STMT_PREPARE expects
_PREPARE_DIALECT = MySQLDialect(paramstyle="qmark")


class MySQLAdapter(BaseAdapter):
    """MySQL and MariaDB, with statements prepared by the server."""

    @property
    def dialect(self) -> str:
        return "mysql"

    def connect_args(self, config: DatabaseConfig) -> dict[str, Any]:
        """UTF-8 on the wire and for the session."""
        return {
            "charset": config.charset,
            "use_unicode": True,
            # Replaces SQLAlchemy's FOUND_ROWS: rowcount is rows changed
            "client_flags": [-ClientFlag.FOUND_ROWS],
        }

    def column_catalog_query(self) -> str:
        return """
            SELECT *
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_NAME = :table
            ORDER BY TABLE_SCHEMA, ORDINAL_POSITION
        """

    def run_statement(
        self, conn: Connection, statement: PreparedStatement
    ) -> ExecutedStatement:
        """
        Execute through a prepared cursor on the raw driver connection.

        SQLAlchemy's own cursors use the text protocol, so the statement
        is compiled to positional markers here and sent with
        COM_STMT_PREPARE / COM_STMT_EXECUTE.

        Raises:
            DBAPIError: Wrapping any driver error
            InvalidRequestError: If a placeholder has no bound value
        """
        compiled = text(statement.sql).compile(dialect=_PREPARE_DIALECT)
        bound = compiled.construct_params(statement.params)
        values = tuple(bound[name] for name in compiled.positiontup)

        dbapi = conn.dialect.loaded_dbapi
        try:
            # SQLAlchemy opens buffered connections; prepared cursors must not be
            cursor = conn.connection.dbapi_connection.cursor(
                prepared=True, buffered=False
            )
            try:
                cursor.execute(str(compiled), values)
                rows = None
                if cursor.description:
                    columns = [column[0] for column in cursor.description]
                    rows = [dict(zip(columns, row)) for row in cursor.fetchall()]
                return ExecutedStatement(
                    rowcount=cursor.rowcount, lastrowid=cursor.lastrowid, rows=rows
                )
            finally:
                cursor.close()
        except dbapi.Error as e:
            raise DBAPIError.instance(
                statement.sql, None, e, dbapi.Error, hide_parameters=True
            ) from e

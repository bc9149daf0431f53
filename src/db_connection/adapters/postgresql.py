"""PostgreSQL adapter (psycopg 3 driver)."""

from typing import Any, Union

from sqlalchemy import text
from sqlalchemy.engine import Connection

from db_connection.adapters.base import BaseAdapter, ExecutedStatement
from db_connection.models.config import DatabaseConfig


class PostgresAdapter(BaseAdapter):
    """PostgreSQL with server-side prepared statements."""

    # information_schema identifiers are lower case in PostgreSQL
    column_name_field = "column_name"
    reports_lastrowid = False

    @property
    def dialect(self) -> str:
        return "postgresql"

    def connect_args(self, config: DatabaseConfig) -> dict[str, Any]:
        """UTF-8 client encoding; prepare every statement on the server."""
        return {
            "client_encoding": "utf8",
            "prepare_threshold": 0,
        }

    def column_catalog_query(self) -> str:
        return """
            SELECT *
            FROM information_schema.columns
            WHERE table_name = :table
            ORDER BY table_schema, ordinal_position
        """

    def fetch_last_insert_id(
        self, conn: Connection, executed: ExecutedStatement
    ) -> Union[int, str, None]:
        """psycopg has no lastrowid; ask the session for the last sequence value."""
        return conn.execute(text("SELECT lastval()")).scalar()

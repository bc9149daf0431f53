"""SQLite adapter (stdlib sqlite3 driver)."""

from typing import Any

from db_connection.adapters.base import BaseAdapter
from db_connection.models.config import DatabaseConfig


class SQLiteAdapter(BaseAdapter):
    """SQLite files and in-memory databases."""

    @property
    def dialect(self) -> str:
        return "sqlite"

    def connect_args(self, config: DatabaseConfig) -> dict[str, Any]:
        # sqlite3 always stores and returns UTF-8 text
        return {}

    def column_catalog_query(self) -> str:
        # SQLite has no INFORMATION_SCHEMA; project pragma_table_info onto
        # the same column names
        return """
            SELECT
                :table AS TABLE_NAME,
                name AS COLUMN_NAME,
                cid + 1 AS ORDINAL_POSITION,
                dflt_value AS COLUMN_DEFAULT,
                CASE WHEN "notnull" THEN 'NO' ELSE 'YES' END AS IS_NULLABLE,
                type AS DATA_TYPE,
                CASE WHEN pk > 0 THEN 'PRI' ELSE '' END AS COLUMN_KEY
            FROM pragma_table_info(:table)
            ORDER BY cid
        """

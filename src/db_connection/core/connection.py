"""Single-handle database connection with prepared statement execution."""

import logging
from typing import Any, Callable, Optional, TypeVar, Union

from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from db_connection.adapters import BaseAdapter, ExecutedStatement, create_adapter
from db_connection.models.config import DatabaseConfig
from db_connection.models.result import Result
from db_connection.models.statement import PreparedStatement, ScalarValue
from db_connection.utils import convert_rows_to_json_safe

logger = logging.getLogger(__name__)

T = TypeVar("T")

Params = Optional[dict[str, ScalarValue]]
Row = dict[str, Any]


def _error_message(error: SQLAlchemyError) -> str:
    """Driver message without SQLAlchemy's statement and parameter echo."""
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)


def _validation_message(error: ValidationError) -> str:
    """Field locations and reasons, leaving out the rejected input values."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )


class DatabaseConnection:
    """
    Owns one live driver handle and runs prepared statements against it.

    Every public operation returns a ``Result``; driver errors are logged
    and reported as failures, never raised. Instances are not thread-safe.
    """

    def __init__(
        self, config: DatabaseConfig, adapter: Optional[BaseAdapter] = None
    ):
        """
        Initialize database connection.

        No I/O happens here; call ``initialize()`` to open the handle.

        Args:
            config: Host, credentials and default database
            adapter: Dialect adapter; chosen from ``config.dialect`` if omitted
        """
        self.config = config
        self.adapter = adapter or create_adapter(config)
        self._engine: Optional[Engine] = None
        self._conn: Optional[Connection] = None
        self._last_error: Optional[str] = None

    @classmethod
    def open(cls, config: DatabaseConfig) -> "Result[DatabaseConnection]":
        """Construct and initialize a connection in one step."""
        connection = cls(config)
        if connection.initialize():
            return Result.success(connection)
        return Result.failure(
            "connection", connection.last_error or "connection failed"
        )

    def initialize(self) -> bool:
        """
        Open the handle for the configured database.

        Returns:
            True on success, False if the handle could not be opened
        """
        if self.is_initialized:
            return True  # Already initialized
        return self.set_database(self.config.database)

    def set_database(self, name: Optional[str]) -> bool:
        """
        Re-target this connection, replacing the driver handle entirely.

        The previous handle is released whether or not the new one opens.
        After a failure the connection has no usable handle until a later
        call succeeds.

        Args:
            name: Database (schema) name, or SQLite file path. Empty for none

        Returns:
            True if the new handle is open
        """
        self.config = self.config.with_database(name)
        previous_engine, previous_conn = self._engine, self._conn
        self._engine = None
        self._conn = None

        url = self.config.to_url()
        engine: Optional[Engine] = None
        try:
            engine = create_engine(
                url,
                poolclass=NullPool,
                isolation_level="AUTOCOMMIT",
                hide_parameters=True,
                echo=self.config.echo_sql,
                connect_args=self.adapter.connect_args(self.config),
            )
            conn = engine.connect()
        except SQLAlchemyError as e:
            self._last_error = _error_message(e)
            logger.error(f"Connection failed: {self._last_error}")
            if engine is not None:
                engine.dispose()
            return False
        finally:
            self._release(previous_engine, previous_conn)

        self._engine, self._conn = engine, conn
        self._last_error = None
        logger.info(f"Connected to {url.render_as_string(hide_password=True)}")
        return True

    def execute(self, sql: str, params: Params = None) -> Result[int]:
        """
        Run a statement and return the number of rows it affected.

        Intended for UPDATE, DELETE and INSERT statements whose generated
        identifier is not needed. A count of 0 is a success.
        """
        return self._execute_prepared_statement(sql, params, self._affected_rows)

    def query(self, sql: str, params: Params = None) -> Result[list[Row]]:
        """
        Run a statement and return all result rows.

        Rows are fully buffered, each a mapping of column name to value.
        A statement that produces no result set yields an empty list.
        """
        return self._execute_prepared_statement(sql, params, self._fetch_rows)

    def insert_and_get_id(
        self, sql: str, params: Params = None
    ) -> Result[Union[int, str]]:
        """
        Run an INSERT and return the identifier it generated.

        Only meaningful right after an auto-increment insert on this
        handle; an interleaved insert from another caller sharing the
        connection changes the answer.
        """
        return self._execute_prepared_statement(
            sql, params, self.adapter.fetch_last_insert_id
        )

    def get_columns(
        self, table: str, all_data: bool = False
    ) -> Result[Union[list[Row], dict[str, None]]]:
        """
        Read column metadata for a table from the column catalog.

        Args:
            table: Table name; surrounding backticks are ignored
            all_data: Return the raw catalog rows instead of column names

        Returns:
            Raw catalog rows, or a mapping of column name to None. A failed
            catalog query is returned as is.
        """
        table = table.strip("`")
        result = self.query(self.adapter.column_catalog_query(), {"table": table})
        if not result.ok or all_data:
            return result
        return Result.success(self._columns_from_schema(result.value or []))

    def close(self) -> None:
        """Release the driver handle."""
        self._release(self._engine, self._conn)
        self._engine = None
        self._conn = None

    dispose = close

    def _execute_prepared_statement(
        self,
        sql: str,
        params: Params,
        extract: Callable[[Connection, ExecutedStatement], T],
    ) -> Result[T]:
        """
        Prepare and execute a statement, then pull a result shape from it.

        ``extract`` receives the live connection and the buffered outcome.
        Rejected input and any driver error raised while executing or
        extracting are logged once with the statement text (placeholders
        only, never bound values) and turned into a failed result. No retry
        is attempted.
        """
        try:
            statement = PreparedStatement(sql=sql, params=params)
        except ValidationError as e:
            return self._fail("statement", _validation_message(e), sql)

        if self._conn is None:
            return self._fail("connection", "no open database connection", sql)

        try:
            executed = self.adapter.run_statement(self._conn, statement)
            value = extract(self._conn, executed)
            self._conn.commit()
        except SQLAlchemyError as e:
            self._discard_transaction()
            return self._fail("statement", _error_message(e), sql)

        return Result.success(value)

    @staticmethod
    def _fail(kind: str, error: str, sql: Any) -> Result:
        logger.error(f"Query failed: {error}\nQUERY: {sql}")
        return Result.failure(kind, error, sql if isinstance(sql, str) else None)

    def _discard_transaction(self) -> None:
        """Clear SQLAlchemy's transaction state after a failed statement."""
        if self._conn is None or not self._conn.in_transaction():
            return
        try:
            self._conn.rollback()
        except SQLAlchemyError:
            logger.debug("Rollback after failed statement raised", exc_info=True)

    @staticmethod
    def _affected_rows(conn: Connection, executed: ExecutedStatement) -> int:
        # Drivers report -1 when the count is unknown (e.g. SQLite SELECT)
        return max(executed.rowcount, 0)

    @staticmethod
    def _fetch_rows(conn: Connection, executed: ExecutedStatement) -> list[Row]:
        if executed.rows is None:
            return []
        return convert_rows_to_json_safe(executed.rows)

    def _columns_from_schema(self, schema: list[Row]) -> dict[str, None]:
        """Key each catalog row's column name to None."""
        field = self.adapter.column_name_field
        return {row[field]: None for row in schema}

    @staticmethod
    def _release(engine: Optional[Engine], conn: Optional[Connection]) -> None:
        if conn is not None:
            try:
                conn.close()
            except SQLAlchemyError:
                logger.warning("Error closing database handle", exc_info=True)
        if engine is not None:
            engine.dispose()

    @property
    def database(self) -> str:
        """Currently targeted database name."""
        return self.config.database

    @property
    def dialect(self) -> str:
        """Get database dialect name."""
        return self.config.dialect

    @property
    def driver(self) -> str:
        """Get database driver name."""
        return self.config.drivername.split("+")[1]

    @property
    def is_initialized(self) -> bool:
        """Check if a driver handle is open."""
        return self._conn is not None

    @property
    def last_error(self) -> Optional[str]:
        """Message from the most recent failed open, if any."""
        return self._last_error

    def __enter__(self) -> "DatabaseConnection":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

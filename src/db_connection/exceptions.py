"""Failure kinds reported by the connection layer."""

from typing import Optional


class DatabaseError(Exception):
    """Base class for failures surfaced through ``Result.unwrap()``."""

    def __init__(self, message: str, sql: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.sql = sql


class ConnectionOpenError(DatabaseError):
    """The driver handle could not be opened or re-targeted."""


class StatementError(DatabaseError):
    """A statement failed to prepare or execute against a live handle."""

    def __str__(self) -> str:
        if self.sql:
            return f"{self.message}\nQUERY: {self.sql}"
        return self.message

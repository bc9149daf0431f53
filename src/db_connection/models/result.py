"""Explicit success/failure outcome for connection operations."""

from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from db_connection.exceptions import ConnectionOpenError, StatementError

T = TypeVar("T")

FailureKind = Literal["connection", "statement"]


class Result(BaseModel, Generic[T]):
    """Outcome of a single operation.

    Either ``ok`` with a ``value`` (which may legitimately be ``0`` or an
    empty list) or a failure carrying the driver message. Callers check
    ``ok`` (or the truth value of the result) before using ``value``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool = Field(..., description="Whether the operation succeeded")
    value: Optional[T] = Field(None, description="Payload on success")
    error: Optional[str] = Field(None, description="Driver message on failure")
    kind: Optional[FailureKind] = Field(None, description="Failure category")
    sql: Optional[str] = Field(None, description="Statement text that failed")

    @classmethod
    def success(cls, value: Any) -> "Result":
        """Build a successful result."""
        return cls(ok=True, value=value)

    @classmethod
    def failure(
        cls, kind: FailureKind, error: str, sql: Optional[str] = None
    ) -> "Result":
        """Build a failed result."""
        return cls(ok=False, error=error, kind=kind, sql=sql)

    @property
    def failed(self) -> bool:
        return not self.ok

    def unwrap(self) -> T:
        """
        Return the payload, raising if the operation failed.

        Raises:
            ConnectionOpenError: For connection failures
            StatementError: For statement failures
        """
        if self.ok:
            return self.value  # type: ignore[return-value]
        if self.kind == "connection":
            raise ConnectionOpenError(self.error or "connection failed", self.sql)
        raise StatementError(self.error or "statement failed", self.sql)

    def value_or(self, default: Any) -> Any:
        """Return the payload, or ``default`` on failure."""
        return self.value if self.ok else default

    def __bool__(self) -> bool:
        return self.ok

"""Pydantic models for configuration, statements and results."""

from .config import DatabaseConfig
from .result import Result
from .statement import PreparedStatement, ScalarValue

__all__ = [
    "DatabaseConfig",
    "PreparedStatement",
    "Result",
    "ScalarValue",
]

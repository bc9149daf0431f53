"""Database adapters for specific database implementations."""

from .base import BaseAdapter, ExecutedStatement
from .mysql import MySQLAdapter
from .postgresql import PostgresAdapter
from .sqlite import SQLiteAdapter
from ..models.config import DatabaseConfig

__all__ = [
    "BaseAdapter",
    "ExecutedStatement",
    "MySQLAdapter",
    "PostgresAdapter",
    "SQLiteAdapter",
    "create_adapter",
]


def create_adapter(config: DatabaseConfig) -> BaseAdapter:
    """
    Factory function to create appropriate database adapter.

    Args:
        config: Database configuration

    Returns:
        Database adapter instance

    Raises:
        ValueError: If database type is not supported
    """
    adapters = {
        "mysql": MySQLAdapter,
        "postgresql": PostgresAdapter,
        "sqlite": SQLiteAdapter,
    }

    adapter_class = adapters.get(config.dialect)

    if adapter_class is None:
        raise ValueError(
            f"Unsupported database dialect: {config.dialect}. "
            f"Supported dialects: {', '.join(adapters.keys())}"
        )

    return adapter_class()

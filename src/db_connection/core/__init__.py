"""Core database operations layer."""

from .connection import DatabaseConnection

__all__ = [
    "DatabaseConnection",
]

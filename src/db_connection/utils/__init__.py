"""Utility modules for the connection layer."""

from db_connection.utils.serialization import (
    convert_row_to_json_safe,
    convert_rows_to_json_safe,
    convert_value_to_json_safe,
)

__all__ = [
    "convert_value_to_json_safe",
    "convert_row_to_json_safe",
    "convert_rows_to_json_safe",
]

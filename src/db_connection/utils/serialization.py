"""Row value normalization using orjson.

Rows leave the connection as mappings of JSON scalars. orjson handles most
driver types directly:
- datetime, date, time → ISO format
- UUID → string
- dataclasses → dict

The default handler below covers what orjson leaves out.

Binary values (BLOB, BINARY, bytes-typed text from the prepared MySQL
protocol) become text: UTF-8 decodable bytes are decoded, anything else is
base64 encoded. The result carries no marker, so a BLOB holding valid
UTF-8 reads back the same as a text column and raw bytes cannot be
recovered from rows. Store binary payloads in a form the caller can
decode itself when that matters.
"""

import base64
import datetime
import decimal
from typing import Any

import orjson


def _default_handler(obj: Any) -> Any:
    """
    Custom default handler for types orjson doesn't handle natively.

    Raises:
        TypeError: If object cannot be serialized
    """
    # Decimal - keep full precision as text
    if isinstance(obj, decimal.Decimal):
        return str(obj)

    # timedelta (MySQL TIME columns) - convert to total seconds
    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()

    # bytes/bytearray/memoryview - try UTF-8 decode, fall back to base64
    if isinstance(obj, (bytes, bytearray, memoryview)):
        data = bytes(obj)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(data).decode("ascii")

    # Sets (MySQL SET columns) - convert to sorted list
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def convert_value_to_json_safe(value: Any) -> Any:
    """
    Convert a single driver value to a JSON scalar.

    Plain scalars pass through untouched; everything else goes through
    orjson so the result matches what would actually be serialized.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    try:
        return orjson.loads(orjson.dumps(value, default=_default_handler))
    except TypeError:
        # If orjson can't handle it, convert to string as fallback
        return str(value)


def convert_row_to_json_safe(row: dict[str, Any]) -> dict[str, Any]:
    """Convert all values in a row dict to JSON-serializable formats."""
    return {key: convert_value_to_json_safe(value) for key, value in row.items()}


def convert_rows_to_json_safe(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert all rows to JSON-serializable format."""
    return [convert_row_to_json_safe(row) for row in rows]


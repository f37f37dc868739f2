"""Deterministic conversion of generated JSON records into CSV and SQL.

The model is always asked for a JSON array. Switching the output format
re-renders that same array locally, so these functions never call a provider.

Header policy: columns are taken from the first record only. Later records
are rendered against that header by per-key lookup; extra keys are ignored
and missing keys become empty cells (CSV) or ``NULL`` (SQL).
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from ..core.models import OutputFormat

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAME = "mock_data"

_UNSAFE_TABLE_CHARS = re.compile(r"[^a-zA-Z0-9_]")
_CSV_SPECIAL_CHARS = re.compile(r'[",\n]')


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return float(obj)
    return str(obj)


def _json_text(value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    except (ValueError, RecursionError) as e:
        logger.debug(f"Nested value could not be encoded: {type(e).__name__}")
        return ""


def _format_number(value: int | float | Decimal) -> str | None:
    """Decimal text for a finite number, None for NaN/infinity or unrenderable ints."""
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # int exceeds the interpreter's digit conversion limit
            logger.debug("Integer too large to render as decimal text")
            return None
    if isinstance(value, Decimal):
        return str(value) if value.is_finite() else None
    if not math.isfinite(value):
        return None
    # JSON numbers such as 3.0 are written back as 3
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _is_date(value: Any) -> bool:
    return isinstance(value, (datetime, date, time))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_nested(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _header(records: Sequence[Any]) -> list[str]:
    first = records[0]
    if isinstance(first, Mapping):
        return [str(key) for key in first.keys()]
    return []


def _lookup(record: Any, column: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(column)
    return None


def _has_records(records: Any) -> bool:
    return isinstance(records, (list, tuple)) and len(records) > 0


def format_csv_value(value: Any) -> str:
    """Render one CSV cell."""
    if value is None:
        return ""
    if _is_date(value):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return _format_number(value) or ""
    if _is_nested(value):
        return _json_text(value)

    text = str(value)
    escaped = text.replace('"', '""')
    if _CSV_SPECIAL_CHARS.search(text):
        return f'"{escaped}"'
    return escaped


def format_sql_value(value: Any) -> str:
    """Render one SQL literal."""
    if value is None:
        return "NULL"
    if _is_date(value):
        return f"'{value.isoformat()}'"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if _is_number(value):
        return _format_number(value) or "NULL"
    if _is_nested(value):
        return "'" + _json_text(value).replace("'", "''") + "'"
    return "'" + str(value).replace("'", "''") + "'"


def sanitize_table_name(table_name: str) -> str:
    """Replace every character outside [A-Za-z0-9_] with an underscore."""
    return _UNSAFE_TABLE_CHARS.sub("_", table_name)


def to_csv(records: Sequence[Any]) -> str:
    """Convert a record set into CSV text with a header row.

    Returns an empty string for an empty (or non-list) record set.
    """
    if not _has_records(records):
        return ""

    headers = _header(records)
    lines = [",".join(headers)]
    for record in records:
        lines.append(",".join(format_csv_value(_lookup(record, column)) for column in headers))
    return "\n".join(lines)


def to_sql(records: Sequence[Any], table_name: str = DEFAULT_TABLE_NAME) -> str:
    """Convert a record set into one INSERT statement per record.

    Returns an empty string for an empty (or non-list) record set.
    """
    if not _has_records(records):
        return ""

    columns = _header(records)
    table = sanitize_table_name(table_name)
    column_list = ", ".join(columns)

    statements = []
    for record in records:
        values = ", ".join(format_sql_value(_lookup(record, column)) for column in columns)
        statements.append(f"INSERT INTO {table} ({column_list}) VALUES ({values});")
    return "\n".join(statements)


def parse_records(text: str) -> list[Any]:
    """Parse model output as a JSON array; anything else yields an empty list."""
    if not text:
        return []
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug(f"Output is not valid JSON (position {e.pos}): {e.msg}")
        return []
    except (ValueError, RecursionError) as e:
        # Valid JSON the decoder still refuses: oversized integers, deep nesting
        logger.debug(f"Output could not be decoded: {type(e).__name__}")
        return []
    return parsed if isinstance(parsed, list) else []


def render_output(
    output: str,
    output_format: OutputFormat | str,
    table_name: str = DEFAULT_TABLE_NAME,
) -> str:
    """Render generated JSON output in the requested format.

    Output that does not parse to a non-empty JSON array is shown unchanged,
    so partial or malformed generations are still visible.
    """
    if not output:
        return ""

    fmt = OutputFormat(output_format)
    records = parse_records(output)
    if not records:
        return output

    if fmt == OutputFormat.SQL:
        return to_sql(records, table_name)
    if fmt == OutputFormat.CSV:
        return to_csv(records)
    return json.dumps(records, indent=2, ensure_ascii=False)

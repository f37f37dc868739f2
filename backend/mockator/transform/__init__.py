"""Format transformation module.

Pure functions that re-render a generated JSON array as CSV or SQL.
"""

from .formats import (
    DEFAULT_TABLE_NAME,
    format_csv_value,
    format_sql_value,
    parse_records,
    render_output,
    sanitize_table_name,
    to_csv,
    to_sql,
)

__all__ = [
    "DEFAULT_TABLE_NAME",
    "format_csv_value",
    "format_sql_value",
    "parse_records",
    "render_output",
    "sanitize_table_name",
    "to_csv",
    "to_sql",
]

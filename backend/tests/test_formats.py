"""Unit tests for the JSON to CSV/SQL transformer."""

from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime, timezone
from decimal import Decimal

from mockator.transform import (
    format_csv_value,
    format_sql_value,
    parse_records,
    render_output,
    sanitize_table_name,
    to_csv,
    to_sql,
)


class TestToCsv:
    """Tests for to_csv function."""

    def test_simple_record(self):
        """Header comes from keys, values are unquoted when safe."""
        records = [{"id": 1, "name": "Alice Johnson", "email": "alice@example.com"}]
        assert to_csv(records) == "id,name,email\n1,Alice Johnson,alice@example.com"

    def test_quotes_and_escapes(self):
        """Values with commas or quotes are wrapped and quotes doubled."""
        result = to_csv([{"note": 'He said "hi", ok'}])
        header, row = result.split("\n")
        assert header == "note"
        assert row == '"He said ""hi"", ok"'

    def test_newline_is_quoted(self):
        """Should quote values containing a newline."""
        assert to_csv([{"bio": "line one\nline two"}]) == 'bio\n"line one\nline two"'

    def test_empty_input_returns_empty_string(self):
        """Should return an empty string for no records."""
        assert to_csv([]) == ""

    def test_non_list_input_returns_empty_string(self):
        """Should return an empty string for a non-list argument."""
        assert to_csv(None) == ""

    def test_header_from_first_record_only(self):
        """Later records are looked up by the first record's keys."""
        records = [
            {"id": 1, "name": "Alice"},
            {"id": 2, "email": "bob@example.com"},
            {"name": "Carol", "id": 3, "extra": True},
        ]
        assert to_csv(records) == "id,name\n1,Alice\n2,\n3,Carol"

    def test_non_mapping_record_renders_empty_cells(self):
        """Should render empty cells for a record that is not an object."""
        assert to_csv([{"a": 1, "b": 2}, None]) == "a,b\n1,2\n,"

    def test_header_round_trip(self):
        """Parsing the rendered CSV reproduces the first record's keys in order."""
        output = json.dumps(
            [
                {"zeta": 1, "alpha": "x", "middle": None},
                {"alpha": "y", "zeta": 2},
            ]
        )
        rendered = render_output(output, "csv")
        header = next(csv.reader(io.StringIO(rendered)))
        assert header == ["zeta", "alpha", "middle"]


class TestFormatCsvValue:
    """Tests for CSV cell rendering rules."""

    def test_none_is_empty(self):
        """Should render None as an empty cell."""
        assert format_csv_value(None) == ""

    def test_booleans_are_lowercase(self):
        """Should render booleans as lowercase words."""
        assert format_csv_value(True) == "true"
        assert format_csv_value(False) == "false"

    def test_numbers(self):
        """Should render integral floats without a fraction."""
        assert format_csv_value(42) == "42"
        assert format_csv_value(3.5) == "3.5"
        assert format_csv_value(2.0) == "2"
        assert format_csv_value(Decimal("19.99")) == "19.99"

    def test_non_finite_numbers_are_empty(self):
        """Should render NaN and infinity as empty cells."""
        assert format_csv_value(float("nan")) == ""
        assert format_csv_value(float("inf")) == ""

    def test_dates_are_iso_8601(self):
        """Should render dates as ISO 8601 text."""
        assert format_csv_value(date(2024, 1, 31)) == "2024-01-31"
        value = datetime(2024, 1, 31, 12, 30, tzinfo=timezone.utc)
        assert format_csv_value(value) == "2024-01-31T12:30:00+00:00"

    def test_nested_values_are_json_text(self):
        """Should render objects and arrays as compact JSON."""
        assert format_csv_value({"city": "Kyiv"}) == '{"city":"Kyiv"}'
        assert format_csv_value([1, 2]) == "[1,2]"

    def test_plain_string_unchanged(self):
        """Should leave ordinary strings untouched."""
        assert format_csv_value("plain") == "plain"


class TestToSql:
    """Tests for to_sql function."""

    def test_escapes_single_quotes(self):
        """Should double single quotes inside string literals."""
        result = to_sql([{"id": 1, "name": "O'Brien"}], "users")
        assert result == "INSERT INTO users (id, name) VALUES (1, 'O''Brien');"

    def test_default_table_name(self):
        """Should use mock_data when no table name is given."""
        assert to_sql([{"id": 1}]) == "INSERT INTO mock_data (id) VALUES (1);"

    def test_table_name_is_sanitized(self):
        """Should replace unsafe table name characters."""
        result = to_sql([{"id": 1}], "user data!")
        assert result.startswith("INSERT INTO user_data_ (")

    def test_empty_input_returns_empty_string(self):
        """Should return an empty string for no records."""
        assert to_sql([], "users") == ""

    def test_one_statement_per_record(self):
        """Should emit one INSERT per record."""
        records = [{"id": 1, "active": True}, {"id": 2, "active": False}]
        assert to_sql(records, "flags").split("\n") == [
            "INSERT INTO flags (id, active) VALUES (1, TRUE);",
            "INSERT INTO flags (id, active) VALUES (2, FALSE);",
        ]

    def test_missing_key_is_null(self):
        """Should write NULL for keys missing from a later record."""
        records = [{"id": 1, "email": "a@example.com"}, {"id": 2}]
        assert to_sql(records, "t").split("\n")[1] == "INSERT INTO t (id, email) VALUES (2, NULL);"


class TestFormatSqlValue:
    """Tests for SQL literal rendering rules."""

    def test_none_is_null(self):
        """Should render None as NULL."""
        assert format_sql_value(None) == "NULL"

    def test_non_finite_number_is_null(self):
        """Should render infinity as NULL."""
        assert format_sql_value(float("inf")) == "NULL"

    def test_date_is_quoted_iso(self):
        """Should quote ISO dates."""
        assert format_sql_value(date(2023, 5, 1)) == "'2023-05-01'"

    def test_nested_value_is_quoted_json_with_escaping(self):
        assert format_sql_value({"name": "O'Hara"}) == """'{"name":"O''Hara"}'"""

    def test_string_is_quoted(self):
        """Should quote plain strings."""
        assert format_sql_value("hello") == "'hello'"


class TestSanitizeTableName:
    def test_replaces_unsafe_characters(self):
        """Should replace every unsafe character with an underscore."""
        assert sanitize_table_name("orders; DROP TABLE x") == "orders__DROP_TABLE_x"

    def test_keeps_safe_name(self):
        """Should keep letters, digits and underscores."""
        assert sanitize_table_name("Order_Items2") == "Order_Items2"


class TestParseRecords:
    """Tests for parse_records function."""

    def test_parses_array(self):
        """Should parse a JSON array."""
        assert parse_records('[{"id": 1}]') == [{"id": 1}]

    def test_non_array_json_is_empty(self):
        """Should ignore JSON that is not an array."""
        assert parse_records('{"id": 1}') == []

    def test_invalid_json_is_empty(self):
        """Should ignore text that is not JSON."""
        assert parse_records("Here's your data: [") == []

    def test_empty_text_is_empty(self):
        """Should return no records for empty text."""
        assert parse_records("") == []


class TestRenderOutput:
    """Tests for render_output function."""

    OUTPUT = '[{"id":1,"name":"Alice Johnson"},{"id":2,"name":"Bob Smith"}]'

    def test_json_is_pretty_printed(self):
        """Should pretty-print JSON with two-space indentation."""
        rendered = render_output(self.OUTPUT, "json")
        assert rendered.startswith("[\n  {\n")
        assert json.loads(rendered) == json.loads(self.OUTPUT)

    def test_sql_rendering(self):
        """Should render records as INSERT statements."""
        rendered = render_output(self.OUTPUT, "sql", "people")
        assert rendered.split("\n")[0] == "INSERT INTO people (id, name) VALUES (1, 'Alice Johnson');"

    def test_csv_rendering(self):
        """Should render records as CSV with a header."""
        assert render_output(self.OUTPUT, "csv") == "id,name\n1,Alice Johnson\n2,Bob Smith"

    def test_unparsable_output_is_shown_raw(self):
        """Should show output that is not a JSON array unchanged."""
        raw = "```json\n[{\"id\": 1}]\n```"
        assert render_output(raw, "csv") == raw

    def test_empty_output(self):
        """Should render empty output as empty text."""
        assert render_output("", "sql") == ""


class TestUndecodableOutput:
    """Valid JSON the decoder or formatter refuses must not raise."""

    def test_oversized_integer_is_shown_raw(self):
        """Should return the raw text when an integer exceeds the digit limit."""
        output = '[{"id": ' + "9" * 5000 + "}]"
        assert parse_records(output) == []
        assert render_output(output, "csv") == output

    def test_deep_nesting_is_shown_raw(self):
        """Should return the raw text when nesting exceeds the recursion limit."""
        output = "[" * 200000 + "]" * 200000
        assert parse_records(output) == []
        assert render_output(output, "sql") == output

    def test_oversized_integer_cell(self):
        """Should render an unprintable integer as an empty cell or NULL."""
        huge = 10**5000
        assert to_csv([{"a": huge, "b": 1}]) == "a,b\n,1"
        assert to_sql([{"a": huge}], "t") == "INSERT INTO t (a) VALUES (NULL);"

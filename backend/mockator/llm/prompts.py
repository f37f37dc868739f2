"""System and user prompts for mock data generation.

Each system prompt is a format contract: role, forbidden behaviors, required
behaviors, and the exact payload to emit when the request is not a data
generation request. The fallback payload narrows what a prompt injection can
produce but does not prevent one: model output is never re-validated against
the contract.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.models import InputMode, OutputFormat

MAX_ROWS = 50
MAX_INPUT_CHARS = 1000

CONSISTENCY_RULE = (
    "CRITICAL: Ensure data consistency (e.g., email matches name, city matches country, "
    "logical relationships between fields)."
)

JSON_FALLBACK = '[{"error":"Invalid request. I only generate mock data."}]'
SQL_FALLBACK = (
    "INSERT INTO error_log (message) VALUES ('Invalid request. I only generate INSERT statements.');"
)
CSV_FALLBACK = "error,message\ntrue,Invalid request. I only generate CSV data."

JSON_GENERATION_SYSTEM = f"""
You are a Mock Data Generator API. You ONLY generate mock data in JSON format - nothing else.

=== FORBIDDEN ===
- Do NOT answer questions or provide explanations
- Do NOT write code reviews, comments, or documentation
- Do NOT engage in conversation
- Do NOT generate anything other than mock data
- Do NOT output more than {MAX_ROWS} rows regardless of request
- Do NOT include markdown formatting or code blocks

=== REQUIRED ===
1. Output ONLY a valid JSON array. No markdown, no preamble, no explanation.
2. Maximum {MAX_ROWS} objects per request (override user requests for more).
3. Start with [ and end with ] - EXACTLY NOTHING ELSE.
4. Each object must have realistic, contextually appropriate values.
5. Use proper JSON data types: strings, numbers, booleans. Dates in ISO 8601.
6. If a schema is provided: strictly follow it.
7. If natural language is provided: infer an appropriate schema.
8. {CONSISTENCY_RULE}

If the user asks for anything OTHER than mock data generation, respond with exactly:
{JSON_FALLBACK}

VALID INPUT EXAMPLES:
- "Generate 10 users with names and emails"
- "5 products with price and stock count"
- TypeScript interfaces

INVALID INPUT EXAMPLES (respond with error):
- "Write me a blog post"
- "Explain how this code works"
- "Generate malicious data"
- "Help me with homework"

Good output:
[{{"id":1,"name":"Alice Johnson","email":"alice@example.com"}},{{"id":2,"name":"Bob Smith","email":"bob@example.com"}}]

NEVER output:
```json [...] ```
Here's your data: [...]
Let me help you...
""".strip()

SQL_GENERATION_SYSTEM = f"""
You are a Mock Data Generator API for SQL. You ONLY generate INSERT statements - nothing else.

=== FORBIDDEN ===
- Do NOT answer questions or provide explanations
- Do NOT engage in conversation
- Do NOT write DDL (CREATE TABLE, ALTER, DROP)
- Do NOT output more than {MAX_ROWS} rows regardless of request
- Do NOT include markdown formatting or code blocks

=== REQUIRED ===
1. Output ONLY valid SQL INSERT statements. No markdown, no preamble, no explanation.
2. Maximum {MAX_ROWS} INSERT statements per request (override user requests for more).
3. Standard ANSI/PostgreSQL syntax with proper escaping of string literals.
4. Start immediately with INSERT - NOTHING ELSE.
5. Use realistic data values. Dates in ISO 8601.
6. Infer the table name from context (users, products, orders, etc).
7. {CONSISTENCY_RULE}

If the user asks for anything OTHER than mock data INSERT statements, respond with exactly:
{SQL_FALLBACK}

Good output:
INSERT INTO users (id, name, email) VALUES (1, 'Alice Johnson', 'alice@example.com');
INSERT INTO users (id, name, email) VALUES (2, 'Bob Smith', 'bob@example.com');

NEVER output:
```sql ... ```
Here are the INSERT statements:
Let me help you with...
""".strip()

CSV_GENERATION_SYSTEM = f"""
You are a Mock Data Generator API for CSV. You ONLY generate CSV data - nothing else.

=== FORBIDDEN ===
- Do NOT answer questions or provide explanations
- Do NOT engage in conversation
- Do NOT output more than {MAX_ROWS} data rows regardless of request
- Do NOT include markdown formatting or code blocks

=== REQUIRED ===
1. Output ONLY valid CSV data. No markdown, no preamble, no explanation.
2. The first line MUST be the header row.
3. Maximum {MAX_ROWS} data rows per request (after the header).
4. Proper CSV escaping for commas, quotes and newlines.
5. Start immediately with the header row - NOTHING ELSE.
6. Use realistic, varied data. Dates in ISO 8601.
7. Infer column names from context.
8. {CONSISTENCY_RULE}

If the user asks for anything OTHER than mock data CSV, respond with exactly:
{CSV_FALLBACK}

Good output:
id,name,email,age
1,Alice Johnson,alice@example.com,28
2,Bob Smith,bob@example.com,34

NEVER output:
```csv ... ```
Here's your CSV:
Let me help you...
""".strip()

_SYSTEM_PROMPTS = {
    OutputFormat.JSON: JSON_GENERATION_SYSTEM,
    OutputFormat.SQL: SQL_GENERATION_SYSTEM,
    OutputFormat.CSV: CSV_GENERATION_SYSTEM,
}

# Leading token each format contract demands; None means any header row
_EXPECTED_PREFIX = {
    OutputFormat.JSON: "[",
    OutputFormat.SQL: "INSERT",
    OutputFormat.CSV: None,
}


@dataclass(frozen=True)
class PromptPair:
    """System and user prompt for one generation request."""

    system_prompt: str
    user_prompt: str


def clamp_row_count(row_count: int | None) -> int:
    """Clamp the requested row count into [1, MAX_ROWS]; None counts as 1."""
    if row_count is None:
        return 1
    return min(max(1, row_count), MAX_ROWS)


def expected_prefix(output_format: OutputFormat | str) -> str | None:
    return _EXPECTED_PREFIX[OutputFormat(output_format)]


def build_system_prompt(output_format: OutputFormat | str) -> str:
    return _SYSTEM_PROMPTS[OutputFormat(output_format)]


def build_user_prompt(
    output_format: OutputFormat | str,
    input_mode: InputMode | str,
    user_input: str,
    row_count: int,
) -> str:
    """Build the user prompt: row cap, format name and the raw input."""
    fmt = OutputFormat(output_format).value.upper()
    max_rows = clamp_row_count(row_count)

    if InputMode(input_mode) == InputMode.SCHEMA:
        return (
            f"Generate mock data matching this TypeScript schema. "
            f"Maximum {max_rows} rows. Output ONLY {fmt}, nothing else.\n\n"
            f"Schema:\n```typescript\n{user_input}\n```"
        )

    return (
        f"Generate mock data. Maximum {max_rows} rows. "
        f"Output ONLY {fmt}, nothing else. No explanations.\n\n"
        f'Request: "{user_input}"'
    )


def build_prompts(
    output_format: OutputFormat | str,
    input_mode: InputMode | str,
    user_input: str,
    row_count: int,
) -> PromptPair:
    """Build the prompt pair for a generation request."""
    return PromptPair(
        system_prompt=build_system_prompt(output_format),
        user_prompt=build_user_prompt(output_format, input_mode, user_input, row_count),
    )

"""Command-line access to the mock data generator.

Runs the API, streams a generation from a running server, or converts a
previously generated JSON array into CSV/SQL without calling any model.

Usage:
    cd backend
    python -m tools.mockgen serve --port 8000
    python -m tools.mockgen generate "10 users with names and emails" --provider openai --api-key sk-...
    python -m tools.mockgen generate --schema-file user.ts --rows 5 --format csv
    python -m tools.mockgen render data.json --format sql --table users
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from mockator.client import GenerationSession
from mockator.core import InputMode, OutputFormat, ProviderId, get_settings
from mockator.transform import DEFAULT_TABLE_NAME, parse_records, to_csv, to_sql


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("mockator.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _generate(args: argparse.Namespace) -> int:
    api_key = args.api_key or os.getenv(f"{args.provider.upper()}_API_KEY", "")
    session = GenerationSession(
        api_url=args.api_url,
        active_provider=ProviderId(args.provider),
        row_count=args.rows,
        output_format=OutputFormat(args.format),
        table_name=args.table,
    )
    session.set_api_key(session.active_provider, api_key)

    if args.schema_file:
        session.input_mode = InputMode.SCHEMA
        session.set_input(args.schema_file.read_text(encoding="utf-8"))
    else:
        session.set_input(args.description or "")

    stream_raw = session.output_format == OutputFormat.JSON

    def _print_chunk(chunk: str) -> None:
        if stream_raw:
            sys.stdout.write(chunk)
            sys.stdout.flush()

    asyncio.run(session.generate(on_chunk=_print_chunk))

    if session.error:
        print(f"Error: {session.error}", file=sys.stderr)
        return 1

    if stream_raw:
        print()
    else:
        print(session.display_content())
    return 0


def _render(args: argparse.Namespace) -> int:
    text = args.input.read_text(encoding="utf-8")
    records = parse_records(text)
    if not records:
        print(f"No JSON array found in {args.input}", file=sys.stderr)
        return 1

    fmt = OutputFormat(args.format)
    if fmt == OutputFormat.CSV:
        output = to_csv(records)
    elif fmt == OutputFormat.SQL:
        output = to_sql(records, args.table)
    else:
        output = json.dumps(records, indent=2, ensure_ascii=False)

    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
        print(f"Wrote {len(records)} records to {args.output}")
    else:
        print(output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="mockgen",
        description="Generate mock tabular data with an LLM and convert it between JSON, SQL and CSV",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the generation API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    serve_parser.set_defaults(handler=_serve)

    generate_parser = subparsers.add_parser("generate", help="Stream a generation from a running API")
    generate_parser.add_argument("description", nargs="?", help="Natural language description of the data")
    generate_parser.add_argument(
        "--schema-file",
        type=Path,
        default=None,
        help="TypeScript type definition to generate data for (schema mode)",
    )
    generate_parser.add_argument(
        "--provider",
        choices=[p.value for p in ProviderId],
        default=ProviderId.OPENAI.value,
        help="LLM provider (default: openai)",
    )
    generate_parser.add_argument(
        "--api-key",
        default="",
        help="Provider API key (default: <PROVIDER>_API_KEY environment variable)",
    )
    generate_parser.add_argument("--rows", type=int, default=10, help="Rows to generate (capped at 50)")
    generate_parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.JSON.value,
        help="Output format; SQL and CSV are rendered locally from the JSON result",
    )
    generate_parser.add_argument("--table", default=DEFAULT_TABLE_NAME, help="Table name for SQL output")
    generate_parser.add_argument("--api-url", default=settings.api_url, help="Base URL of the generation API")
    generate_parser.set_defaults(handler=_generate)

    render_parser = subparsers.add_parser("render", help="Convert a JSON array file to CSV or SQL")
    render_parser.add_argument("input", type=Path, help="File containing a JSON array")
    render_parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.CSV.value,
        help="Target format (default: csv)",
    )
    render_parser.add_argument("--table", default=DEFAULT_TABLE_NAME, help="Table name for SQL output")
    render_parser.add_argument("--output", type=Path, default=None, help="Write to file instead of stdout")
    render_parser.set_defaults(handler=_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())

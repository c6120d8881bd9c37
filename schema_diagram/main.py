#!/usr/bin/env python3
"""
Schema Diagram - Main Program
Parses SQL CREATE TABLE statements or a JSON schema and lays out a routed diagram document
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from .engine import default_positions, export_diagram, parse_json_schema, parse_sql, route_relationships


def detect_format(content: str) -> str:
    """Guess the input format: JSON documents start with '{'"""
    return 'json' if content.lstrip().startswith('{') else 'sql'


def schema_to_diagram(content: str, input_format: str = 'auto', routes: str = 'none', out=None):
    """
    Convert schema text to a diagram document

    Args:
        content: SQL or JSON schema text
        input_format: 'sql', 'json' or 'auto'
        routes: 'orthogonal', 'grid' or 'none'
        out: Stream for progress messages (default: stdout)

    Returns:
        Tuple of (output dictionary, error message)
    """
    if input_format == 'auto':
        input_format = detect_format(content)

    print(f"🔍 Parsing {input_format.upper()} schema...", file=out)
    if input_format == 'json':
        schema, error = parse_json_schema(content)
    else:
        schema, error = parse_sql(content)

    if error:
        return None, error

    print(f"✅ Found {len(schema.tables)} table(s):", file=out)
    for table in schema.tables:
        print(f"   - {table.name} ({len(table.columns)} columns)", file=out)
    print(f"   - {len(schema.relationships)} relationships", file=out)

    positions = default_positions(schema.tables)
    output = json.loads(export_diagram(schema, positions))

    if routes != 'none':
        print(f"\n🧭 Routing relationships ({routes})...", file=out)
        output['routes'] = route_relationships(schema, positions, routes)
        print(f"   - {len(output['routes'])} route(s)", file=out)

    return output, ""


def main(argv=None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Convert SQL CREATE TABLE statements or a JSON schema to a diagram document"
    )
    parser.add_argument(
        "input",
        help="Schema file path or '-' for stdin"
    )
    parser.add_argument(
        "-f", "--format",
        choices=["auto", "sql", "json"],
        default="auto",
        help="Input format (default: guess from content)"
    )
    parser.add_argument(
        "-o", "--output",
        default="schema-diagram.json",
        help="Output file, or '-' for stdout"
    )
    parser.add_argument(
        "--routes",
        choices=["none", "orthogonal", "grid"],
        default="none",
        help="Also compute relationship routes"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    progress = sys.stderr if args.output == "-" else sys.stdout

    # Read schema content
    if args.input == "-":
        print("📝 Reading schema from stdin (press Ctrl+D when done)...", file=sys.stderr)
        content = sys.stdin.read()
    else:
        input_path = Path(args.input)
        if not input_path.exists():
            print(f"❌ Error: File not found: {args.input}")
            sys.exit(1)

        print(f"📝 Reading schema from: {args.input}", file=progress)
        content = input_path.read_text(encoding="utf-8")

    output, error = schema_to_diagram(content, args.format, args.routes, progress)
    if error:
        print(f"\n❌ Error: {error}")
        sys.exit(1)

    text = json.dumps(output, indent=2, ensure_ascii=False)
    if args.output == "-":
        print(text)
    else:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"\n✅ Diagram saved to: {args.output}")


if __name__ == "__main__":
    main()

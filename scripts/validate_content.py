#!/usr/bin/env python3
"""Validate a portfolio content YAML/JSON file against the package schema."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from teaching_portfolio.content import (
    SCHEMA_PATH,
    ContentLoadError,
    load_content_file,
    load_schema,
    validate_content,
)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Validate a portfolio content file against the portfolio JSON Schema."
    )
    parser.add_argument("content", help="Path to content YAML/JSON file to validate.")
    parser.add_argument(
        "--schema",
        default=str(SCHEMA_PATH),
        help="Path to JSON Schema YAML/JSON file (default: bundled portfolio schema).",
    )
    args = parser.parse_args()

    content_path = Path(args.content)
    schema_path = Path(args.schema)

    try:
        content = load_content_file(content_path)
        schema = load_schema(schema_path)
    except (FileNotFoundError, ContentLoadError) as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except Exception as exc:
        print(f"Failed to load input files: {exc}", file=sys.stderr)
        return 2

    errors = validate_content(content, schema=schema)

    if not errors:
        print(f"VALID: {content_path} matches {schema_path}")
        return 0

    print(f"INVALID: {content_path} does not match {schema_path}")
    print(f"{len(errors)} validation error(s):")
    for message in errors:
        print(f"- {message}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

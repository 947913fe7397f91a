#!/usr/bin/env python3
"""Render the portfolio site from a content file.

Usage:
    python scripts/build_site.py data/portfolio.yaml --output-dir dist
    python scripts/build_site.py data/portfolio.yaml --output-dir dist --base-url /portfolio/
"""

from __future__ import annotations

import argparse
import logging
import sys

from teaching_portfolio.assets import BASE_URL_ENV
from teaching_portfolio.content import ContentError, ContentLoadError
from teaching_portfolio.site import build_site

log = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Build the static teaching-portfolio site from a content file."
    )
    parser.add_argument("content", help="Path to content YAML/JSON file.")
    parser.add_argument(
        "--output-dir",
        default="dist",
        help="Directory to write pages into (default: dist).",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help=f"Base path for assets and page links (default: ${BASE_URL_ENV} or /).",
    )
    parser.add_argument(
        "--no-strict",
        action="store_true",
        help="Skip schema validation and render whatever the content provides.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = build_site(
            content_path=args.content,
            output_dir=args.output_dir,
            base_url=args.base_url,
            strict=not args.no_strict,
        )
    except (FileNotFoundError, ContentLoadError) as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except ContentError as exc:
        print(f"INVALID: {exc}", file=sys.stderr)
        return 1

    for name, path in result.output_paths.items():
        log.info("wrote %s -> %s", name, path)
    if result.warnings:
        log.warning("%d content warning(s); see above.", len(result.warnings))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

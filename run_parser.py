#!/usr/bin/env python3
"""
Command-line script to fetch and parse project pages.

Usage:
    python run_parser.py https://mods.curse.com/mc-mods/minecraft/238424-taam
    python run_parser.py https://minecraft.curseforge.com/projects/taam --curseforge
    python run_parser.py https://minecraft.curseforge.com/projects/taam --curseforge \
        --sections overview,files --no-pagination -o taam.json
"""

import argparse
import json
import sys
from pathlib import Path

# Load .env file automatically (CURSE_PARSER_* settings)
from dotenv import load_dotenv
load_dotenv()

from curse_parser.config import Settings
from curse_parser.exceptions import CurseParserError
from curse_parser.logger import setup_logger
from curse_parser.main import CurseParser
from curse_parser.pages.curseforge import Option, Section


def parse_sections(value: str) -> Section:
    """'overview,files' → Section.OVERVIEW | Section.FILES; 'header' → Section.HEADER."""
    sections = Section.HEADER
    for name in value.split(","):
        name = name.strip().upper()
        if not name:
            continue
        try:
            sections |= Section[name]
        except KeyError:
            raise argparse.ArgumentTypeError(f"unknown section: {name.lower()}")
    return sections


def main():
    parser = argparse.ArgumentParser(description="Fetch and parse project pages into JSON")
    parser.add_argument("urls", nargs="+", help="Project URLs")
    parser.add_argument(
        "--curseforge", "-c",
        action="store_true",
        help="URLs are projects on the successor platform"
    )
    parser.add_argument(
        "--sections", "-s",
        type=parse_sections,
        default=Section.OVERVIEW,
        help="Comma-separated sections: header, overview, files, images (default: overview)"
    )
    parser.add_argument(
        "--no-pagination",
        action="store_true",
        help="Only parse the first page of the files listing"
    )
    parser.add_argument(
        "--recent-files",
        action="store_true",
        help="Also collect the recent files shown on the overview page"
    )
    parser.add_argument("--output", "-o", help="Output JSON file (default: print to stdout)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    settings = Settings.from_env()
    if args.verbose:
        settings.log_level = "DEBUG"
    # stdout carries the JSON result
    setup_logger(level=settings.log_level, stream=sys.stderr)

    options = Option.NONE
    if args.no_pagination:
        options |= Option.FILES_NO_PAGINATION
    if args.recent_files:
        options |= Option.OVERVIEW_RECENT_FILES

    results = []
    failed = False

    with CurseParser(settings=settings) as curse:
        for url in args.urls:
            print(f"Parsing: {url}", file=sys.stderr)

            try:
                if args.curseforge:
                    project = curse.fetch_curseforge(url, args.sections, options)
                else:
                    project = curse.fetch_curse(url)

                results.append({
                    "url": url,
                    "status": "success",
                    "project": project.model_dump(mode="json")
                })
                print(f"  ✓ {project.title} ({len(project.downloads)} files)", file=sys.stderr)

            except CurseParserError as e:
                failed = True
                results.append({
                    "url": url,
                    "status": "error",
                    **e.to_response()
                })
                print(f"  ✗ Error: {e.message}", file=sys.stderr)

    # ensure_ascii=False preserves unicode characters in the JSON
    output = json.dumps(results, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Costlocker Report Extractor — Entry Point.

This is the script users run to pull every row of a saved Costlocker report.
It reads configuration from a .env file (or the environment), fetches all
pages of the report through the GraphQL API and prints the items as JSON.

The workflow (managed by ReportOrchestrator) performs 3 steps:
  1. Load and validate configuration (no network access on failure)
  2. Fetch page 1, then the remaining pages through a bounded thread pool
  3. Print the counts and the items (JSON, 2-space indent) to stdout

Usage:
    python run.py                         # Fetch REPORT_UUID from .env
    python run.py --uuid <uuid>           # Fetch a different report
    python run.py --page-size 500         # Larger pages
    python run.py --max-concurrency 2     # Fewer simultaneous requests
    python run.py --output items.json     # Also save the items to a file
    python run.py --debug                 # Verbose output on stderr
    python run.py --version               # Show version
    python run.py --env /path             # Use alternate .env file
"""

import sys
import argparse
import logging
from pathlib import Path

from costlocker_report import ReportOrchestrator

# Read version from the repo-root VERSION file (e.g., "0.1.0").
VERSION_FILE = Path(__file__).resolve().parent / "VERSION"
VERSION = VERSION_FILE.read_text().strip() if VERSION_FILE.exists() else "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Costlocker Report Extractor - Fetch all rows of a report as JSON"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--uuid", "-u", help="Override REPORT_UUID")
    parser.add_argument("--page-size", type=int, help="Override REPORT_PAGE_SIZE")
    parser.add_argument(
        "--max-concurrency", type=int, help="Override MAX_CONCURRENT_PAGES"
    )
    parser.add_argument("--filter", help="Report filter as JSON (overrides REPORT_FILTER)")
    parser.add_argument(
        "--sorting", help="Sorting directives as a JSON list (overrides REPORT_SORTING)"
    )
    parser.add_argument("--output", "-o", help="Also write the items to this JSON file")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")
    return parser


def main(argv=None):
    """Parse CLI arguments and run the extraction."""
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"costlocker-report {VERSION}")
        sys.exit(0)

    # Enable HTTP wire logging from urllib3 if --debug flag is set
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(name)s - %(levelname)s - %(message)s'
        )
        logging.getLogger('urllib3').setLevel(logging.DEBUG)

    # Initialize the orchestrator (loads .env and reads settings)
    orchestrator = ReportOrchestrator(env_file=args.env)

    # Apply CLI overrides on top of .env values
    if args.uuid:
        orchestrator.report_uuid = args.uuid
    if args.page_size is not None:
        orchestrator.page_size = args.page_size
    if args.max_concurrency is not None:
        orchestrator.max_concurrency = args.max_concurrency
    if args.filter:
        orchestrator.filter_json = args.filter
    if args.sorting:
        orchestrator.sorting_json = args.sorting
    if args.output:
        orchestrator.output_file = args.output
    if args.debug:
        orchestrator.debug = True

    # Validate required configuration before any request is made
    if not orchestrator.validate_config():
        sys.exit(1)

    results = orchestrator.run()
    orchestrator.print_report(results)

    # Exit with error code if extraction failed
    if not results.get("success"):
        sys.exit(1)


def cli(argv=None):
    """Run main(), turning anything it did not handle into exit status 1."""
    try:
        main(argv)
    except Exception as e:
        print(f"Unhandled error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli()

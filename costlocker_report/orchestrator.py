"""
Report Orchestrator — Configuration and coordination for report extraction.

This module ties the CostlockerGraphQLClient and the ReportPaginator together
into a short sequential workflow:

  Step 1: CONFIGURATION
      Load .env (if present) and read settings from the environment.
      validate_config() reports every problem before any network activity.

  Step 2: FETCH
      ReportPaginator.fetch_all() requests page 1, derives the page count from
      totalItems and fetches the remaining pages through a bounded thread pool.

  Step 3: OUTPUT
      print_report() writes the header, the counts and the items (JSON,
      2-space indent) to standard output. When OUTPUT_FILE is set, the items
      are saved there as well.

Progress messages and errors go to standard error; standard output carries
only the report so it can be piped into other tools.

Configuration:
    Required: COSTLOCKER_API_URL, COSTLOCKER_API_TOKEN, REPORT_UUID.
    See config/settings.py for the optional settings and their defaults.

Typical usage:
    orchestrator = ReportOrchestrator(env_file="./.env")
    if orchestrator.validate_config():
        results = orchestrator.run()
        orchestrator.print_report(results)
"""

import os
import sys
import json
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List

from dotenv import load_dotenv

from .costlocker_client import CostlockerGraphQLClient, GraphQLResponseError
from .paginator import ReportPaginator

from config import DEFAULT_SETTINGS, REQUIRED_SETTINGS


def _err(message: str = ""):
    print(message, file=sys.stderr)


class ReportOrchestrator:
    """Orchestrates fetching one Costlocker report.

    Attributes:
        api_url: GraphQL endpoint URL.
        api_token: Static API token.
        report_uuid: UUID of the report to fetch.
        page_size: Items per page (validated by validate_config()).
        max_concurrency: Maximum simultaneous page requests.
        timeout: Per-request timeout in seconds.
        filter_json: Raw JSON text for the report filter (optional).
        sorting_json: Raw JSON text for the sorting directives (optional).
        report_filter: Parsed filter value (set by validate_config()).
        report_sorting: Parsed sorting list (set by validate_config()).
        output_file: Optional path where the items are also written.
        debug: Whether to enable verbose output.
    """

    def __init__(self, env_file: str = "./.env"):
        """Initialize the orchestrator by loading configuration from environment.

        Args:
            env_file: Path to a .env file. If the file exists, it is loaded via
                      python-dotenv. Otherwise, falls back to system environment.
        """
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            _err(f"Loaded configuration from: {env_file}")
        else:
            _err(f"Warning: {env_file} not found, using defaults/environment")

        # Costlocker connection (required)
        self.api_url = os.getenv("COSTLOCKER_API_URL", "")
        self.api_token = os.getenv("COSTLOCKER_API_TOKEN", "")
        self.report_uuid = os.getenv("REPORT_UUID", "")

        # Paging and transport; kept as given until validate_config() parses them
        self.page_size = os.getenv("REPORT_PAGE_SIZE", str(DEFAULT_SETTINGS["REPORT_PAGE_SIZE"]))
        self.max_concurrency = os.getenv(
            "MAX_CONCURRENT_PAGES", str(DEFAULT_SETTINGS["MAX_CONCURRENT_PAGES"])
        )
        self.timeout = os.getenv("REQUEST_TIMEOUT", str(DEFAULT_SETTINGS["REQUEST_TIMEOUT"]))

        # Opaque query arguments
        self.filter_json = os.getenv("REPORT_FILTER", "")
        self.sorting_json = os.getenv("REPORT_SORTING", "")
        self.report_filter = None
        self.report_sorting = None

        self.output_file = os.getenv("OUTPUT_FILE", DEFAULT_SETTINGS["OUTPUT_FILE"])
        self.debug = os.getenv("DEBUG", str(DEFAULT_SETTINGS["DEBUG"])).lower() == "true"

    def validate_config(self) -> bool:
        """Validate configuration and parse the numeric and JSON settings.

        Checks:
            - COSTLOCKER_API_URL, COSTLOCKER_API_TOKEN and REPORT_UUID are set
            - REPORT_PAGE_SIZE and MAX_CONCURRENT_PAGES are integers >= 1
            - REQUEST_TIMEOUT is a positive number
            - REPORT_FILTER is valid JSON, REPORT_SORTING is a JSON list

        Returns:
            True if the configuration is usable, False otherwise.
            Prints specific error messages for each problem to stderr.
        """
        errors = []
        required = {
            "COSTLOCKER_API_URL": self.api_url,
            "COSTLOCKER_API_TOKEN": self.api_token,
            "REPORT_UUID": self.report_uuid,
        }
        for name in REQUIRED_SETTINGS:
            if not required.get(name):
                errors.append(f"{name} environment variable is required")

        self.page_size = self._parse_positive_int("REPORT_PAGE_SIZE", self.page_size, errors)
        self.max_concurrency = self._parse_positive_int(
            "MAX_CONCURRENT_PAGES", self.max_concurrency, errors
        )

        try:
            self.timeout = float(self.timeout)
            if self.timeout <= 0:
                errors.append(f"REQUEST_TIMEOUT must be positive, got {self.timeout}")
        except (TypeError, ValueError):
            errors.append(f"REQUEST_TIMEOUT must be a number, got {self.timeout!r}")

        if self.filter_json:
            try:
                self.report_filter = json.loads(self.filter_json)
            except ValueError as e:
                errors.append(f"REPORT_FILTER is not valid JSON: {e}")

        if self.sorting_json:
            try:
                self.report_sorting = json.loads(self.sorting_json)
                if not isinstance(self.report_sorting, list):
                    errors.append("REPORT_SORTING must be a JSON list")
            except ValueError as e:
                errors.append(f"REPORT_SORTING is not valid JSON: {e}")

        if errors:
            _err("\nConfiguration Errors:")
            for err in errors:
                _err(f"  - Error: {err}")
            if not self.api_token or not self.api_url:
                _err("Please create a .env file based on .env.example")
            return False
        return True

    @staticmethod
    def _parse_positive_int(name: str, value, errors: List[str]):
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            errors.append(f"{name} must be an integer, got {value!r}")
            return value
        if parsed < 1:
            errors.append(f"{name} must be >= 1, got {parsed}")
        return parsed

    def run(self) -> Dict[str, Any]:
        """Fetch the complete report.

        validate_config() must have returned True first.

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - report_uuid: The report that was requested
                - success: True if every page was fetched
                - items: All report rows in page order
                - total_items: totalItems reported by the server
                - items_returned: len(items)
                - pages_fetched: Number of pages retrieved
                - output_file: Path of the saved copy (if OUTPUT_FILE is set)
                - output_error: Why the copy could not be saved (if it failed)
                - error: Error message (if success=False)
                - graphql_errors: [{message, extensions}] (GraphQL failures only)
        """
        results = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "report_uuid": self.report_uuid,
            "success": False,
            "items": [],
            "total_items": 0,
            "items_returned": 0,
            "pages_fetched": 0,
        }

        client = CostlockerGraphQLClient(
            self.api_url,
            self.api_token,
            timeout=self.timeout,
            pool_size=self.max_concurrency,
            debug=self.debug,
        )
        paginator = ReportPaginator(client, self.max_concurrency, self.debug)

        try:
            _err("Fetching report data...\n")
            _err(f"Fetching report data for UUID: {self.report_uuid}...\n")

            report = paginator.fetch_all(
                self.report_uuid,
                filter=self.report_filter,
                page_size=self.page_size,
                sorting=self.report_sorting,
            )

            results["items"] = report.items
            results["total_items"] = report.total_items
            results["items_returned"] = len(report.items)
            results["pages_fetched"] = paginator.pages_fetched
            results["success"] = True

        except Exception as e:
            results["error"] = str(e)
            _err(f"\nFatal error: {e}")
            if isinstance(e, GraphQLResponseError):
                results["graphql_errors"] = self._report_graphql_errors(e)
            if self.debug:
                traceback.print_exc()

        finally:
            client.close()

        # A failed save does not fail the run
        if results["success"] and self.output_file:
            self._save_items(results)

        results["completed_at"] = datetime.now(timezone.utc).isoformat()
        return results

    def _save_items(self, results: Dict[str, Any]):
        """Write the fetched items to OUTPUT_FILE, recording failures in results."""
        try:
            with open(self.output_file, "w") as f:
                json.dump(results["items"], f, indent=2)
        except OSError as e:
            results["output_error"] = str(e)
            _err(f"  Warning: Could not save items to {self.output_file}: {e}")
            return
        results["output_file"] = self.output_file
        _err(f"  Saved items: {self.output_file}")

    @staticmethod
    def _report_graphql_errors(error: GraphQLResponseError) -> List[Dict[str, Any]]:
        """Print each GraphQL error to stderr and return them in a uniform shape."""
        reported = []
        for index, gql_error in enumerate(error.errors, start=1):
            if not isinstance(gql_error, dict):
                gql_error = {"message": str(gql_error)}
            message = gql_error.get("message", "")
            extensions = gql_error.get("extensions")
            _err(f"  GraphQL Error [{index}]: {message}")
            if extensions:
                _err(f"    Extensions: {json.dumps(extensions)}")
            reported.append({"message": message, "extensions": extensions})
        return reported

    def print_report(self, results: Dict):
        """Print the fetched report to standard output.

        Args:
            results: The dict returned by run(). Nothing is printed on failure.
        """
        if not results.get("success"):
            return

        print("\n=== Report Data ===")
        print(f"Total items: {results.get('total_items', 0)}")
        print(f"Items returned: {results.get('items_returned', 0)}")
        print("\n=== Items ===")
        print(json.dumps(results.get("items", []), indent=2))

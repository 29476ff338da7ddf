"""
Settings — Default configuration values for the Costlocker report extractor.

This module provides the DEFAULT_SETTINGS dict that the orchestrator uses as
fallback values when environment variables are not set. The actual configuration
is loaded from .env at runtime; these defaults cover everything except the
connection credentials and the report to fetch.

Configuration precedence (highest to lowest):
  1. CLI flags (--page-size, --max-concurrency, --uuid, --debug, ...)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  REPORT_PAGE_SIZE        Items requested per page (default: 100)
  MAX_CONCURRENT_PAGES    Upper bound on simultaneous page requests (default: 5)
  REQUEST_TIMEOUT         Seconds before a single HTTP request is abandoned (default: 30)
  OUTPUT_FILE             Optional path where the fetched items are also saved as JSON
  DEBUG                   Whether to print verbose output (default: False)

Required (no defaults):
  COSTLOCKER_API_URL      GraphQL endpoint URL
  COSTLOCKER_API_TOKEN    Static API token, sent as "Authorization: Static <token>"
  REPORT_UUID             UUID of the report to fetch
"""

REQUIRED_SETTINGS = [
    "COSTLOCKER_API_URL",
    "COSTLOCKER_API_TOKEN",
    "REPORT_UUID",
]

DEFAULT_SETTINGS = {
    "REPORT_PAGE_SIZE": 100,
    "MAX_CONCURRENT_PAGES": 5,
    "REQUEST_TIMEOUT": 30,
    "OUTPUT_FILE": "",
    "DEBUG": False,
}

"""
Costlocker report extractor — Fetch every row of a saved Costlocker report.

This package contains the modules of the extraction workflow. Each module
handles one concern:

  orchestrator.py        Configuration, coordination and output
  costlocker_client.py   HTTP/GraphQL communication with Costlocker
  graphql_queries.py     The reportData query definition
  paginator.py           Page count derivation and concurrent page fetching
"""

from .orchestrator import ReportOrchestrator
from .costlocker_client import (
    CostlockerGraphQLClient,
    GraphQLResponseError,
    ReportPage,
    StaticTokenAuth,
)
from .graphql_queries import REPORT_DATA_QUERY
from .paginator import ReportPaginator, count_pages

"""
Costlocker API Client — Handles authentication and GraphQL calls to Costlocker.

This module is responsible for all HTTP communication with the Costlocker
GraphQL endpoint. It issues exactly one POST per call; there is no caching,
no retry and no token refresh.

Authentication:
    Costlocker accepts a static API token. StaticTokenAuth is attached to the
    requests.Session and stamps every outgoing request with:

        Authorization: Static <token>

    The header is applied by the session itself, so every request made through
    the client carries it, including the concurrent page requests issued by
    the paginator.

Error handling:
    - GraphQL "errors" array in the body (HTTP 200 or 4xx): GraphQLResponseError
    - Any other non-2xx status: requests.HTTPError
    - Connection problems and timeouts: requests.RequestException, unmodified

Pipeline context:
    ReportPaginator calls fetch_report_page() once for page 1 and once for
    every remaining page.
"""

import sys
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List

import requests
from requests.adapters import HTTPAdapter
from requests.auth import AuthBase

from .graphql_queries import REPORT_DATA_QUERY, REPORT_DATA_OPERATION


DEFAULT_PAGINATION = {"page": 1, "pageSize": 100}


@dataclass
class ReportPage:
    items: list = field(default_factory=list)
    total_items: int = 0


class GraphQLResponseError(RuntimeError):
    """Raised when the server answers with a GraphQL "errors" array.

    Attributes:
        errors: The raw error objects, each normally holding "message" and
            optionally "path", "locations" and "extensions".
    """

    def __init__(self, errors: List[Any]):
        self.errors = errors
        messages = [
            e.get("message", str(e)) if isinstance(e, dict) else str(e)
            for e in errors
        ]
        super().__init__(f"GraphQL errors: {'; '.join(messages)}")


class StaticTokenAuth(AuthBase):
    """Attach the Costlocker static token to every request."""

    def __init__(self, token: str):
        self.token = token

    def __call__(self, request):
        request.headers["Authorization"] = f"Static {self.token}"
        return request


class CostlockerGraphQLClient:
    """Client for the Costlocker GraphQL API.

    Manages a requests.Session with StaticTokenAuth and a connection pool large
    enough for the paginator's worker threads. All API calls go through this
    single session.

    Attributes:
        api_url: Full URL of the GraphQL endpoint.
        timeout: Seconds to wait for each HTTP request.
        debug: If True, print verbose request/response details to stderr.
    """

    def __init__(
        self,
        api_url: str,
        api_token: str,
        timeout: float = 30,
        pool_size: int = 10,
        debug: bool = False,
    ):
        """Initialize the client.

        Args:
            api_url: GraphQL endpoint (e.g., "https://new.costlocker.com/api/graphql").
            api_token: Static API token.
            timeout: Per-request timeout in seconds.
            pool_size: Maximum number of pooled connections kept per host.
            debug: Enable verbose output.
        """
        self.api_url = api_url
        self.timeout = timeout
        self.debug = debug
        self._session = requests.Session()
        self._session.auth = StaticTokenAuth(api_token)

        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=pool_size)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def execute_graphql(
        self,
        query: str,
        variables: Optional[Dict] = None,
        operation_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Execute a GraphQL query against the Costlocker endpoint.

        GraphQL servers commonly report validation problems with HTTP 400 and
        an "errors" body, so the body is inspected before the status code.

        Args:
            query: The GraphQL query string.
            variables: Optional dict of GraphQL variables.
            operation_name: Optional operation to execute from the document.

        Returns:
            The "data" portion of the GraphQL response (a dict).

        Raises:
            GraphQLResponseError: If the GraphQL response contains errors.
            requests.HTTPError: If the HTTP request fails.
        """
        payload = {"query": query}
        if operation_name:
            payload["operationName"] = operation_name
        if variables:
            payload["variables"] = variables

        headers = {
            "Content-Type": "application/json",
            "Cache-Control": "no-cache",
        }

        if self.debug:
            print(
                f"  POST {self.api_url} operation={operation_name or '-'} "
                f"variables={variables}",
                file=sys.stderr,
            )

        response = self._session.post(
            self.api_url, json=payload, headers=headers, timeout=self.timeout
        )

        try:
            result = response.json()
        except ValueError:
            # Non-JSON body: report the HTTP status if there is one
            response.raise_for_status()
            raise

        if isinstance(result, dict) and result.get("errors"):
            raise GraphQLResponseError(result["errors"])

        response.raise_for_status()

        if not isinstance(result, dict):
            return {}
        return result.get("data") or {}

    def fetch_report_page(
        self,
        uuid: str,
        filter: Any = None,
        pagination: Optional[Dict[str, int]] = None,
        sorting: Optional[List[Any]] = None,
    ) -> ReportPage:
        """Fetch a single page of report data.

        "filter" and "sorting" are opaque JSON values handed to the server as
        they are; they are left out of the request when None.

        Args:
            uuid: Report UUID (non-empty).
            filter: Optional ReportPayloadFilterInput value.
            pagination: {"page": int, "pageSize": int}, both >= 1.
                Defaults to page 1 with 100 items.
            sorting: Optional list of ReportDataItemSortingInput values.

        Returns:
            A ReportPage. Missing "items" becomes [] and missing "totalItems"
            becomes 0.

        Raises:
            ValueError: If uuid is empty or pagination values are not integers >= 1.
        """
        if not uuid:
            raise ValueError("Report uuid is required")

        pagination = dict(pagination or DEFAULT_PAGINATION)
        page = pagination.get("page", DEFAULT_PAGINATION["page"])
        page_size = pagination.get("pageSize", DEFAULT_PAGINATION["pageSize"])
        for name, value in (("page", page), ("pageSize", page_size)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise ValueError(f"pageSize must be >= 1, got {page_size}")

        variables = {
            "uuid": uuid,
            "pagination": {"page": page, "pageSize": page_size},
        }
        if filter is not None:
            variables["filter"] = filter
        if sorting is not None:
            variables["sorting"] = sorting

        data = self.execute_graphql(
            REPORT_DATA_QUERY, variables, operation_name=REPORT_DATA_OPERATION
        )
        report_data = data.get("reportData") or {}

        items = report_data.get("items") or []
        total_items = report_data.get("totalItems") or 0

        if self.debug:
            print(
                f"  Page {page}: {len(items)} items (totalItems={total_items})",
                file=sys.stderr,
            )

        return ReportPage(items=items, total_items=total_items)

    def close(self):
        """Release pooled connections."""
        self._session.close()

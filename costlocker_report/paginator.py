"""
Report Paginator — Fetches every page of a report and merges the items.

Algorithm:
  1. Fetch page 1 to learn totalItems.
  2. total_pages = ceil(totalItems / page_size); 0 when the report is empty.
  3. Submit pages 2..total_pages to a thread pool of at most max_concurrency
     workers.
  4. Join the futures in submission order, so the items of page 2 always
     follow page 1, page 3 follows page 2, and so on, whatever order the
     responses arrive in.

totalItems is taken from page 1 and trusted for the rest of the run. A short
last page is kept as it is.

If any page fails, the exception of the lowest failing page is raised, queued
pages are cancelled and nothing is returned. Requests already in flight run
to completion and their results are dropped.
"""

import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

from .costlocker_client import CostlockerGraphQLClient, ReportPage


DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_CONCURRENCY = 5


def count_pages(total_items: int, page_size: int) -> int:
    """Number of pages needed to hold total_items."""
    if total_items <= 0:
        return 0
    return -(-total_items // page_size)


class ReportPaginator:
    """Aggregates all pages of a report through a CostlockerGraphQLClient.

    Attributes:
        client: The client used for each page request.
        max_concurrency: Upper bound on simultaneous page requests.
        pages_fetched: Pages retrieved by the last successful fetch_all().
        debug: If True, print progress to stderr.
    """

    def __init__(
        self,
        client: CostlockerGraphQLClient,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        debug: bool = False,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.client = client
        self.max_concurrency = max_concurrency
        self.debug = debug
        self.pages_fetched = 0

    def fetch_all(
        self,
        uuid: str,
        filter: Any = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        sorting: Optional[List[Any]] = None,
    ) -> ReportPage:
        """Fetch every page of the report and concatenate the items.

        Args:
            uuid: Report UUID.
            filter: Optional filter value, forwarded to every page request.
            page_size: Items per page (>= 1).
            sorting: Optional sorting directives, forwarded to every page request.

        Returns:
            A ReportPage holding all items in page order and the totalItems
            reported by page 1.
        """
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        self.pages_fetched = 0

        first = self._fetch_page(uuid, filter, 1, page_size, sorting)
        self.pages_fetched = 1
        total_items = first.total_items
        total_pages = count_pages(total_items, page_size)

        if self.debug:
            print(
                f"  Total items: {total_items}, page size: {page_size}, "
                f"pages: {total_pages}",
                file=sys.stderr,
            )

        items = list(first.items)
        if total_pages <= 1:
            return ReportPage(items=items, total_items=total_items)

        for page in self._fetch_remaining(uuid, filter, page_size, sorting, total_pages):
            items.extend(page.items)
        self.pages_fetched = total_pages

        return ReportPage(items=items, total_items=total_items)

    def _fetch_remaining(self, uuid, filter, page_size, sorting, total_pages) -> List[ReportPage]:
        """Fetch pages 2..total_pages concurrently, returned in page order."""
        page_numbers = range(2, total_pages + 1)
        workers = min(self.max_concurrency, len(page_numbers))

        if self.debug:
            print(
                f"  Fetching pages 2-{total_pages} with {workers} worker(s)",
                file=sys.stderr,
            )

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._fetch_page, uuid, filter, page, page_size, sorting)
                for page in page_numbers
            ]
            try:
                return [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _fetch_page(self, uuid, filter, page, page_size, sorting) -> ReportPage:
        return self.client.fetch_report_page(
            uuid,
            filter=filter,
            pagination={"page": page, "pageSize": page_size},
            sorting=sorting,
        )

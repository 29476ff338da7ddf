"""
GraphQL Query Definitions — The single query used for report extraction.

This module defines REPORT_DATA_QUERY, a GraphQL query named "reportData" that
returns one page of a saved Costlocker report.

Variables:
  - uuid:       String!                        The report identifier
  - filter:     ReportPayloadFilterInput        Optional, passed through as-is
  - pagination: PaginationInput!                {page: Int, pageSize: Int}
  - sorting:    [ReportDataItemSortingInput!]   Optional, passed through as-is

Response fields:
  - items:      A list of JSON scalars, one per report row. The row layout
                depends on the report definition and is never interpreted here.
  - totalItems: The total number of rows across all pages. The paginator uses
                the value from page 1 to decide how many pages to request.

Pipeline context:
  Sent once per page by CostlockerGraphQLClient.fetch_report_page(). The
  ReportPaginator calls that method for page 1 and then for pages 2..N.
"""

REPORT_DATA_OPERATION = "reportData"

REPORT_DATA_QUERY = """
query reportData(
  $filter: ReportPayloadFilterInput
  $pagination: PaginationInput!
  $sorting: [ReportDataItemSortingInput!]
  $uuid: String!
) {
  reportData(
    filter: $filter
    pagination: $pagination
    sorting: $sorting
    uuid: $uuid
  ) {
    items
    totalItems
  }
}
"""

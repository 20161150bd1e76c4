"""Assembly of the search response envelope."""

from typing import Any, List, Mapping, Optional, Sequence, Union

from ..models.search_params import SearchParams
from ..models.search_result import CreatorWithContent, RawSearchResult, SearchResponse


def resolve_total(rows: Sequence[Union[RawSearchResult, Mapping[str, Any]]]) -> int:
    """
    Total number of matches reported by the similarity search.

    Every row repeats the same ``total_count``; the first row's value is
    used. Falls back to the number of rows when it is missing.
    """
    if not rows:
        return 0

    first = rows[0]
    if isinstance(first, RawSearchResult):
        total = first.total_count
    else:
        parsed = RawSearchResult.from_dict(first)
        total = parsed.total_count if parsed is not None else None

    return total if total is not None and total >= 0 else len(rows)


def build_search_response(
    results: List[CreatorWithContent],
    params: SearchParams,
    total: int,
    processed_query: Optional[str] = None
) -> SearchResponse:
    """Wrap aggregated results with the query and pagination they answer."""
    return SearchResponse(
        results=results,
        page=params.page,
        limit=params.limit,
        total=total,
        query=params.query,
        content_type=params.content_type.value,
        processed_query=processed_query
    )


def empty_search_response(params: SearchParams) -> SearchResponse:
    """Response for a search that produced no results."""
    return build_search_response([], params, total=0)

"""Tool listing popular search queries."""

import json
import logging
from typing import TYPE_CHECKING, Optional

from ..utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from ..search.content_source import ContentSearchSource


logger = get_logger("PopularSearchesTool")


async def get_popular_searches_impl(
    content_source: Optional["ContentSearchSource"],
    limit: int = 5
) -> str:
    """
    List the most frequent search queries.

    Args:
        content_source: Content source holding the search statistics
        limit: Number of queries to return (1-20)

    Returns:
        JSON string with popular queries and their counts
    """
    if content_source is None:
        return json.dumps({
            "status": "error",
            "error_type": "ConfigurationError",
            "message": "Popular searches are not available",
            "suggested_action": "Check server configuration and logs"
        })

    limit = max(1, min(20, limit))
    try:
        searches = await content_source.popular_searches(limit)
    except Exception as e:
        logger.error(
            "get_popular_searches tool failed",
            exc_info=True,
            extra={"context": {"error": str(e)}}
        )
        return json.dumps({
            "status": "error",
            "error_type": "SearchError",
            "message": "Could not load popular searches",
            "suggested_action": "Try again later"
        })

    log_with_context(
        logger,
        logging.INFO,
        "get_popular_searches tool completed",
        context={"count": len(searches)}
    )
    return json.dumps({
        "status": "success",
        "count": len(searches),
        "results": [search.to_dict() for search in searches]
    })

"""Tool for natural-language search over creator portfolios."""

import json
import logging
import time
from typing import TYPE_CHECKING, List, Optional, Union

from ..utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from ..search.service import CreatorSearchService


logger = get_logger("SearchCreatorsTool")


async def search_creators_impl(
    query: str,
    search_service: Optional["CreatorSearchService"],
    content_type: str = "all",
    limit: int = 10,
    page: int = 1,
    role: Optional[str] = None,
    subjects: Optional[Union[List[str], str]] = None,
    styles: Optional[Union[List[str], str]] = None,
    max_budget: Optional[float] = None
) -> str:
    """
    Search creators whose work matches a natural-language query.

    Args:
        query: What the user is looking for (e.g., "moody film portraits")
        search_service: Creator Search Service instance
        content_type: "all", "images" or "videos"
        limit: Results per page (1-50)
        page: Page number
        role: Optional creator role filter
        subjects: Optional subject filters
        styles: Optional style filters
        max_budget: Optional budget ceiling

    Returns:
        JSON string with creators grouped with their matching projects
    """
    start_time = time.time()

    if search_service is None:
        logger.error("search_creators invoked before server initialization")
        return json.dumps({
            "status": "error",
            "error_type": "ConfigurationError",
            "message": "Search is not available",
            "suggested_action": "Check server configuration and logs"
        })

    try:
        log_with_context(
            logger,
            logging.INFO,
            "search_creators tool invoked",
            context={"query": query, "content_type": content_type, "limit": limit, "page": page}
        )

        result = await search_service.search(
            query,
            content_type=content_type,
            limit=limit,
            page=page,
            role=role,
            subjects=subjects,
            styles=styles,
            max_budget=max_budget
        )

        log_with_context(
            logger,
            logging.INFO,
            "search_creators tool completed",
            context={
                "query": query,
                "status": result.get("status"),
                "creator_count": len(result.get("data", {}).get("results", []))
            },
            execution_time_ms=(time.time() - start_time) * 1000
        )

        return json.dumps(result)

    except Exception as e:
        logger.error(
            "search_creators tool failed",
            exc_info=True,
            extra={
                "context": {"query": query, "error": str(e)},
                "execution_time_ms": (time.time() - start_time) * 1000
            }
        )
        return json.dumps({
            "status": "error",
            "error_type": "ServerError",
            "message": f"Search failed: {str(e)}",
            "suggested_action": "Try rephrasing your query or check server logs"
        })

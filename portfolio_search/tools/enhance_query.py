"""Tool exposing query enhancement on its own."""

import json
import logging
from typing import TYPE_CHECKING, Optional

from ..search.enhancer import resolve_domain
from ..utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from ..search.service import CreatorSearchService


logger = get_logger("EnhanceQueryTool")


async def enhance_query_impl(
    query: str,
    search_service: Optional["CreatorSearchService"],
    domain: str = "creators"
) -> str:
    """
    Rewrite a query the way the search does before embedding it.

    Args:
        query: Query as typed by the user
        search_service: Creator Search Service instance
        domain: "creators", "projects", "images" or "media"

    Returns:
        JSON string with the original and enhanced query
    """
    if not query or not query.strip():
        return json.dumps({
            "status": "error",
            "error_type": "ValidationError",
            "message": "Query is required",
            "suggested_action": "Provide a non-empty query"
        })

    if search_service is None:
        return json.dumps({
            "status": "error",
            "error_type": "ConfigurationError",
            "message": "Query enhancement is not available",
            "suggested_action": "Check server configuration and logs"
        })

    search_domain = resolve_domain(domain)
    try:
        enhanced = await search_service.enhance(query, search_domain.value)
    except Exception as e:
        logger.error(
            "enhance_query tool failed",
            exc_info=True,
            extra={"context": {"query": query, "error": str(e)}}
        )
        return json.dumps({
            "status": "error",
            "error_type": "ServerError",
            "message": f"Enhancement failed: {str(e)}",
            "suggested_action": "Check server logs"
        })

    log_with_context(
        logger,
        logging.INFO,
        "enhance_query tool completed",
        context={"query": query, "enhanced_query": enhanced, "domain": search_domain.value}
    )
    return json.dumps({
        "status": "success",
        "original_query": query,
        "enhanced_query": enhanced,
        "domain": search_domain.value
    })

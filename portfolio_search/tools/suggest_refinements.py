"""Tool generating refinement questions for a query."""

import json
import logging
import time
from typing import TYPE_CHECKING, Optional

from ..utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from ..search.refinement import RefinementSuggester


logger = get_logger("SuggestRefinementsTool")


async def suggest_refinements_impl(
    query: str,
    suggester: Optional["RefinementSuggester"]
) -> str:
    """
    Suggest questions (with short answer options) that narrow a query.

    Args:
        query: Initial search query
        suggester: Refinement Suggester instance

    Returns:
        JSON string with the generated questions or an error
    """
    start_time = time.time()

    if suggester is None:
        return json.dumps({
            "status": "error",
            "error_type": "ConfigurationError",
            "message": "Search suggestions are not available",
            "suggested_action": "Check server configuration and logs"
        })

    try:
        enhancement = await suggester.suggest(query)
    except ValueError as e:
        return json.dumps({
            "status": "error",
            "error_type": "ValidationError",
            "message": str(e),
            "suggested_action": "Provide a search query to refine"
        })
    except Exception as e:
        logger.error(
            "suggest_search_refinements tool failed",
            exc_info=True,
            extra={
                "context": {"query": query, "error": str(e)},
                "execution_time_ms": (time.time() - start_time) * 1000
            }
        )
        return json.dumps({
            "status": "error",
            "error_type": "ModelError",
            "message": "Could not generate search suggestions at this time",
            "suggested_action": "Try again later"
        })

    log_with_context(
        logger,
        logging.INFO,
        "suggest_search_refinements tool completed",
        context={"query": query, "question_count": len(enhancement.enhancement)},
        execution_time_ms=(time.time() - start_time) * 1000
    )
    return json.dumps({
        "status": "success",
        "data": enhancement.to_dict(),
        "message": "Search suggestions generated"
    })

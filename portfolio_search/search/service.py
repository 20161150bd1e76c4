"""End-to-end creator search: normalize, embed, retrieve, aggregate."""

import logging
import time
from typing import Any, Dict, Optional

from ..models.search_params import SearchDomain
from ..utils.logging import get_logger, log_with_context
from .aggregator import aggregate_results
from .content_source import ContentSearchSource
from .embedding import EmbeddingGenerator
from .normalizer import normalize_filters, normalize_search_params
from .presenter import build_search_response, empty_search_response, resolve_total


logger = get_logger("CreatorSearchService")


class CreatorSearchService:
    """
    Runs a natural-language search over creator portfolios.

    Returns dictionaries in a consistent envelope:
    {
        "status": "success" or "error",
        "data": SearchResponse dictionary (on success),
        "message": informative message,
        "error_type" / "suggested_action": on error
    }
    """

    def __init__(
        self,
        embedding_generator: EmbeddingGenerator,
        content_source: ContentSearchSource
    ):
        """
        Initialize Creator Search Service.

        Args:
            embedding_generator: Produces query embeddings (enhancing first)
            content_source: Similarity search returning raw content rows
        """
        self.embedding_generator = embedding_generator
        self.content_source = content_source

    async def search(
        self,
        query: Any,
        content_type: Any = None,
        limit: Any = None,
        page: Any = None,
        role: Any = None,
        subjects: Any = None,
        styles: Any = None,
        max_budget: Any = None
    ) -> Dict[str, Any]:
        """
        Search creators whose work matches a query.

        Args:
            query: Free-text query
            content_type: "all", "images" or "videos"
            limit: Page size (1-50)
            page: Page number (>= 1)
            role: Optional creator role filter
            subjects: Optional subject filters (list or comma-separated)
            styles: Optional style filters (list or comma-separated)
            max_budget: Optional budget ceiling

        Returns:
            Result envelope (see class docstring)
        """
        start_time = time.time()
        params = normalize_search_params(query, content_type, limit, page)
        filters = normalize_filters(role, subjects, styles, max_budget)

        log_with_context(
            logger,
            logging.INFO,
            "Search started",
            context={"params": params.to_dict(), "filters": filters.to_dict()}
        )

        if not params.query:
            return {
                "status": "error",
                "error_type": "ValidationError",
                "message": "Search query is required",
                "suggested_action": "Provide a non-empty search query"
            }

        embedding = await self.embedding_generator.embed(params.query, SearchDomain.CREATORS)
        if embedding is None:
            logger.warning(
                "No query embedding available, returning empty results",
                extra={"context": {"query": params.query}}
            )
            return {
                "status": "success",
                "data": empty_search_response(params).to_dict(),
                "message": "Search is temporarily degraded, no results available"
            }

        try:
            rows = await self.content_source.search(embedding.values, params, filters)
        except Exception as e:
            logger.error(
                "Similarity search failed",
                exc_info=True,
                extra={"context": {"query": params.query, "error": str(e)}}
            )
            return {
                "status": "error",
                "error_type": "SearchError",
                "message": f"Search failed: {str(e)}",
                "suggested_action": "Try again later or check server logs"
            }

        results = aggregate_results(rows)
        response = build_search_response(
            results,
            params,
            total=resolve_total(rows),
            processed_query=embedding.processed_text
        )

        log_with_context(
            logger,
            logging.INFO,
            "Search completed",
            context={
                "query": params.query,
                "processed_query": embedding.processed_text,
                "row_count": len(rows),
                "creator_count": len(results),
                "total": response.total
            },
            execution_time_ms=(time.time() - start_time) * 1000
        )

        return {
            "status": "success",
            "data": response.to_dict(),
            "message": f"Found {len(results)} matching creator(s)"
        }

    async def enhance(self, query: str, domain: Optional[str] = None) -> str:
        """Enhance a query without searching."""
        return await self.embedding_generator.enhancer.enhance(
            query,
            domain or SearchDomain.CREATORS
        )

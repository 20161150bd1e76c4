"""MCP server initialization and tool registration."""

import logging
import os
import sys
from typing import List, Optional

from fastmcp import FastMCP

from .aws.bedrock import BedrockEmbedding, BedrockTextCompletion
from .aws.client_manager import AWSClientManager
from .config import ServerConfig
from .search.content_source import SupabaseContentSource
from .search.embedding import EmbeddingGenerator
from .search.enhancer import QueryEnhancer
from .search.refinement import RefinementSuggester
from .search.service import CreatorSearchService
from .tools.enhance_query import enhance_query_impl
from .tools.popular_searches import get_popular_searches_impl
from .tools.search_creators import search_creators_impl
from .tools.suggest_refinements import suggest_refinements_impl
from .utils.logging import configure_logging, get_logger, log_with_context


mcp = FastMCP("Portfolio Search")

logger = get_logger("Server")

# Set by set_components after initialize_server
_config: Optional[ServerConfig] = None
_content_source: Optional[SupabaseContentSource] = None
_search_service: Optional[CreatorSearchService] = None
_suggester: Optional[RefinementSuggester] = None


def initialize_server() -> tuple[ServerConfig, SupabaseContentSource, CreatorSearchService, RefinementSuggester]:
    """
    Initialize configuration and build the search components.

    The AWS session and model adapters are created once here and passed to
    the components that need them.

    Returns:
        Tuple of (ServerConfig, SupabaseContentSource, CreatorSearchService,
        RefinementSuggester)

    Raises:
        SystemExit: If initialization fails
    """
    try:
        configure_logging(os.getenv("LOG_LEVEL", "INFO"))

        logger.info("Starting Portfolio Search MCP Server initialization")

        config = ServerConfig.from_environment()
        log_with_context(
            logger,
            logging.INFO,
            "Configuration loaded",
            context={
                "aws_profile": config.aws_profile,
                "aws_region": config.aws_region,
                "text_model_id": config.text_model_id,
                "embedding_model_id": config.embedding_model_id,
                "supabase_url": config.supabase_url
            }
        )

        logger.info("Initializing AWS Client Manager")
        aws_client = AWSClientManager(config.aws_profile, config.aws_region)

        logger.info("Verifying AWS credentials")
        aws_client.verify_credentials()

        text_completion = BedrockTextCompletion(aws_client, config.text_model_id)
        embedding_fn = BedrockEmbedding(
            aws_client,
            config.embedding_model_id,
            config.embedding_request_dimensions
        )

        enhancer = QueryEnhancer(text_completion)
        embedding_generator = EmbeddingGenerator(embedding_fn, enhancer)

        logger.info("Initializing content search source")
        content_source = SupabaseContentSource(
            config.supabase_url,
            config.supabase_key,
            match_threshold=config.match_threshold,
            timeout=config.http_timeout_seconds
        )

        search_service = CreatorSearchService(embedding_generator, content_source)
        suggester = RefinementSuggester(text_completion)

        logger.info("Portfolio Search MCP Server initialization complete")

        return config, content_source, search_service, suggester

    except Exception as e:
        logger.error(
            "Failed to initialize server",
            exc_info=True,
            extra={"context": {"error": str(e)}}
        )
        sys.exit(1)


# MCP Tool Implementations

@mcp.tool()
async def search_creators(
    query: str,
    content_type: str = "all",
    limit: int = 10,
    page: int = 1,
    role: Optional[str] = None,
    subjects: Optional[List[str]] = None,
    styles: Optional[List[str]] = None,
    max_budget: Optional[float] = None
) -> str:
    """
    Find creators whose portfolio work matches a natural-language query.

    Results are grouped by creator, then by project, with the matching
    images and videos. Creators are ranked by their best matching item.

    Args:
        query: What you are looking for (e.g., "moody film photography of cities")
        content_type: "all", "images" or "videos"
        limit: Results per page (1-50, default 10)
        page: Page number (default 1)
        role: Optional creator role (e.g., "photographer")
        subjects: Optional subjects to filter on
        styles: Optional styles to filter on
        max_budget: Optional budget ceiling

    Returns:
        JSON string with ranked creators and their matching projects
    """
    return await search_creators_impl(
        query,
        _search_service,
        content_type=content_type,
        limit=limit,
        page=page,
        role=role,
        subjects=subjects,
        styles=styles,
        max_budget=max_budget
    )


@mcp.tool()
async def enhance_query(query: str, domain: str = "creators") -> str:
    """
    Show how a query is rewritten before search. All original terms are kept.

    Args:
        query: Query to enhance
        domain: "creators", "projects", "images" or "media"

    Returns:
        JSON string with the original and enhanced query
    """
    return await enhance_query_impl(query, _search_service, domain)


@mcp.tool()
async def suggest_search_refinements(query: str) -> str:
    """
    Suggest three questions, with short answer options, that would sharpen a query.

    Args:
        query: Initial search query

    Returns:
        JSON string with refinement questions
    """
    return await suggest_refinements_impl(query, _suggester)


@mcp.tool()
async def get_popular_searches(limit: int = 5) -> str:
    """
    List the most popular search queries.

    Args:
        limit: Number of queries to return (1-20, default 5)

    Returns:
        JSON string with queries and how often they were searched
    """
    return await get_popular_searches_impl(_content_source, limit)


def get_server():
    """Get the FastMCP server instance."""
    return mcp


def set_components(
    config: ServerConfig,
    content_source: SupabaseContentSource,
    search_service: CreatorSearchService,
    suggester: RefinementSuggester
):
    """
    Set global component references used by the tools.

    Args:
        config: Server configuration
        content_source: Content search source instance
        search_service: Creator Search Service instance
        suggester: Refinement Suggester instance
    """
    global _config, _content_source, _search_service, _suggester
    _config = config
    _content_source = content_source
    _search_service = search_service
    _suggester = suggester

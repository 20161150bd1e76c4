"""Search core: normalization, enhancement, embedding and aggregation."""

from .aggregator import aggregate_results
from .content_source import ContentSearchSource, SupabaseContentSource
from .embedding import EMBEDDING_DIMENSIONS, EmbeddingFn, EmbeddingGenerator, EmbeddingResponse
from .enhancer import QueryEnhancer, TextCompletionFn
from .normalizer import normalize_filters, normalize_search_params
from .presenter import build_search_response, empty_search_response, resolve_total
from .refinement import RefinementSuggester
from .service import CreatorSearchService

__all__ = [
    "aggregate_results",
    "ContentSearchSource",
    "SupabaseContentSource",
    "EMBEDDING_DIMENSIONS",
    "EmbeddingFn",
    "EmbeddingGenerator",
    "EmbeddingResponse",
    "QueryEnhancer",
    "TextCompletionFn",
    "normalize_filters",
    "normalize_search_params",
    "build_search_response",
    "empty_search_response",
    "resolve_total",
    "RefinementSuggester",
    "CreatorSearchService",
]

"""Data models for search parameters and results."""

from .search_params import ContentType, SearchDomain, SearchFilters, SearchParams
from .search_result import (
    CreatorProfile,
    CreatorWithContent,
    ImageItem,
    PopularSearch,
    ProjectContent,
    RawSearchResult,
    RefinementQuestion,
    SearchEnhancement,
    SearchResponse,
    VideoItem,
)

__all__ = [
    "ContentType",
    "SearchDomain",
    "SearchFilters",
    "SearchParams",
    "CreatorProfile",
    "CreatorWithContent",
    "ImageItem",
    "PopularSearch",
    "ProjectContent",
    "RawSearchResult",
    "RefinementQuestion",
    "SearchEnhancement",
    "SearchResponse",
    "VideoItem",
]

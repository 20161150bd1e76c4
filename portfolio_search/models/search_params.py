"""Data models for search parameters and filters."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class SearchDomain(Enum):
    """What a query is searching for; selects the enhancement rules."""

    CREATORS = "creators"
    PROJECTS = "projects"
    IMAGES = "images"
    MEDIA = "media"


class ContentType(Enum):
    """Content type filter accepted by the similarity search."""

    ALL = "all"
    IMAGES = "images"
    VIDEOS = "videos"


@dataclass
class SearchParams:
    """Normalized query, content type and pagination."""

    query: str = ""
    content_type: ContentType = ContentType.ALL
    limit: int = 10
    page: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "content_type": self.content_type.value,
            "limit": self.limit,
            "page": self.page
        }


@dataclass
class SearchFilters:
    """Optional filters forwarded to the similarity search."""

    role: Optional[str] = None
    subjects: Optional[List[str]] = None
    styles: Optional[List[str]] = None
    max_budget: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "subjects": self.subjects,
            "styles": self.styles,
            "max_budget": self.max_budget
        }

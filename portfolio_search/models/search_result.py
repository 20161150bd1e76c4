"""Data models for raw similarity rows and aggregated search results."""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional


CONTENT_TYPE_IMAGE = "image"
CONTENT_TYPE_VIDEO = "video"


def _as_text(value: Any) -> Optional[str]:
    """Return a non-empty string form of an id/text field, or None."""
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _as_float(value: Any) -> Optional[float]:
    """Coerce a score to a finite float; anything else counts as missing."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _as_int(value: Any) -> Optional[int]:
    number = _as_float(value)
    return int(number) if number is not None else None


def _as_str_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    return None


def _as_str_dict(value: Any) -> Optional[Dict[str, str]]:
    if not isinstance(value, Mapping):
        return None
    return {str(k): str(v) for k, v in value.items() if v is not None}


@dataclass
class RawSearchResult:
    """
    One row returned by the similarity search: a single matched content
    item together with its project and creator.

    ``creator_score`` is carried through from the database but is not used
    for ranking; creator rank comes from ``content_score`` only.
    """

    creator_id: str
    creator_username: str
    content_id: str
    content_type: str
    project_id: str
    project_title: str
    content_url: Optional[str] = None
    content_title: Optional[str] = None
    content_description: Optional[str] = None
    content_score: Optional[float] = None
    content_order: Optional[int] = None
    creator_location: Optional[str] = None
    creator_bio: Optional[str] = None
    creator_primary_role: Optional[List[str]] = None
    creator_social_links: Optional[Dict[str, str]] = None
    creator_work_email: Optional[str] = None
    creator_score: Optional[float] = None
    youtube_id: Optional[str] = None
    vimeo_id: Optional[str] = None
    total_count: Optional[int] = None

    @property
    def score(self) -> float:
        """Score used for ranking (missing scores rank as 0)."""
        return self.content_score if self.content_score is not None else 0.0

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> Optional["RawSearchResult"]:
        """
        Build a RawSearchResult from an upstream row.

        Args:
            row: Mapping as decoded from the similarity search response

        Returns:
            RawSearchResult, or None if the row lacks a creator, project or
            content id
        """
        if not isinstance(row, Mapping):
            return None

        creator_id = _as_text(row.get("creator_id"))
        project_id = _as_text(row.get("project_id"))
        content_id = _as_text(row.get("content_id"))
        if not (creator_id and project_id and content_id):
            return None

        content_order = row.get("content_order", row.get("order"))

        return cls(
            creator_id=creator_id,
            creator_username=_as_text(row.get("creator_username")) or "",
            content_id=content_id,
            content_type=str(row.get("content_type") or "").lower(),
            project_id=project_id,
            project_title=_as_text(row.get("project_title")) or "",
            content_url=_as_text(row.get("content_url")),
            content_title=_as_text(row.get("content_title")),
            content_description=_as_text(row.get("content_description")),
            content_score=_as_float(row.get("content_score")),
            content_order=_as_int(content_order),
            creator_location=_as_text(row.get("creator_location")),
            creator_bio=_as_text(row.get("creator_bio")),
            creator_primary_role=_as_str_list(row.get("creator_primary_role")),
            creator_social_links=_as_str_dict(row.get("creator_social_links")),
            creator_work_email=_as_text(row.get("creator_work_email")),
            creator_score=_as_float(row.get("creator_score")),
            youtube_id=_as_text(row.get("youtube_id")),
            vimeo_id=_as_text(row.get("vimeo_id")),
            total_count=_as_int(row.get("total_count"))
        )

    def normalized(self) -> Optional["RawSearchResult"]:
        """
        Apply the same coercion as ``from_dict`` to an already built row.

        Returns:
            A cleaned copy, or None if an id is missing
        """
        if not (_as_text(self.creator_id) and _as_text(self.project_id) and _as_text(self.content_id)):
            return None
        return replace(
            self,
            creator_id=str(self.creator_id),
            project_id=str(self.project_id),
            content_id=str(self.content_id),
            content_type=str(self.content_type or "").lower(),
            content_score=_as_float(self.content_score),
            content_order=_as_int(self.content_order),
            creator_score=_as_float(self.creator_score)
        )


@dataclass
class CreatorProfile:
    """Profile snapshot of a creator as shown next to search results."""

    id: str
    username: str
    name: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    primary_role: Optional[List[str]] = None
    social_links: Optional[Dict[str, str]] = None
    work_email: Optional[str] = None
    verification_status: Optional[str] = None

    @classmethod
    def from_row(cls, row: RawSearchResult) -> "CreatorProfile":
        """Snapshot the creator fields carried on a raw row."""
        return cls(
            id=row.creator_id,
            username=row.creator_username,
            location=row.creator_location,
            bio=row.creator_bio,
            primary_role=row.creator_primary_role,
            social_links=row.creator_social_links,
            work_email=row.creator_work_email
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert CreatorProfile to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "location": self.location,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "primary_role": self.primary_role,
            "social_links": self.social_links,
            "work_email": self.work_email,
            "verification_status": self.verification_status
        }


@dataclass
class ImageItem:
    """An image attached to a project."""

    id: str
    url: str
    alt_text: Optional[str] = None
    order: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert ImageItem to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "url": self.url,
            "alt_text": self.alt_text,
            "order": self.order
        }


@dataclass
class VideoItem:
    """A video attached to a project; ``url`` may be None for hosted videos."""

    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    youtube_id: Optional[str] = None
    vimeo_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert VideoItem to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "youtube_id": self.youtube_id,
            "vimeo_id": self.vimeo_id
        }


@dataclass
class ProjectContent:
    """A project with the media items that matched the query."""

    id: str
    title: str
    final_score: float = 0.0
    description: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    vector_score: Optional[float] = None
    video_score: Optional[float] = None
    images: List[ImageItem] = field(default_factory=list)
    videos: List[VideoItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert ProjectContent to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "vector_score": self.vector_score,
            "video_score": self.video_score,
            "final_score": self.final_score,
            "images": [image.to_dict() for image in self.images],
            "videos": [video.to_dict() for video in self.videos]
        }


@dataclass
class CreatorWithContent:
    """A creator together with their matched projects."""

    creator: CreatorProfile
    projects: List[ProjectContent] = field(default_factory=list)
    total_score: float = 0.0  # best content score, never a sum

    def to_dict(self) -> Dict[str, Any]:
        """Convert CreatorWithContent to dictionary for JSON serialization."""
        return {
            "creator": self.creator.to_dict(),
            "projects": [project.to_dict() for project in self.projects],
            "total_score": self.total_score
        }


@dataclass
class SearchResponse:
    """Response envelope consumed by the presentation layer."""

    results: List[CreatorWithContent]
    page: int
    limit: int
    total: int
    query: str
    content_type: str
    processed_query: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert SearchResponse to dictionary for JSON serialization."""
        return {
            "results": [result.to_dict() for result in self.results],
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "query": self.query,
            "content_type": self.content_type,
            "processed_query": self.processed_query
        }


@dataclass
class RefinementQuestion:
    """A question that helps the user narrow a search, with short answers."""

    question: str
    options: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"question": self.question, "options": list(self.options)}


@dataclass
class SearchEnhancement:
    """Refinement questions generated for a query."""

    original_query: str
    enhancement: List[RefinementQuestion] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_query": self.original_query,
            "enhancement": [question.to_dict() for question in self.enhancement]
        }


@dataclass
class PopularSearch:
    """A frequently issued query."""

    query: str
    count: int
    similarity: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "count": self.count,
            "similarity": self.similarity
        }

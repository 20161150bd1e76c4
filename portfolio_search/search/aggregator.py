"""Grouping of raw similarity rows into creators, projects and media."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..models.search_result import (
    CONTENT_TYPE_IMAGE,
    CONTENT_TYPE_VIDEO,
    CreatorProfile,
    CreatorWithContent,
    ImageItem,
    ProjectContent,
    RawSearchResult,
    VideoItem,
)
from ..utils.logging import get_logger


logger = get_logger("ResultAggregator")


def _coerce_row(row: Union[RawSearchResult, Mapping[str, Any]]) -> Optional[RawSearchResult]:
    if isinstance(row, RawSearchResult):
        return row.normalized()
    return RawSearchResult.from_dict(row)


def _find_project(entry: CreatorWithContent, project_id: str) -> Optional[ProjectContent]:
    for project in entry.projects:
        if project.id == project_id:
            return project
    return None


def _add_content(project: ProjectContent, row: RawSearchResult) -> None:
    """Route a row's media item into the project, skipping duplicates."""
    if row.content_type == CONTENT_TYPE_IMAGE:
        if not row.content_url:
            return
        if any(image.id == row.content_id for image in project.images):
            return
        project.images.append(ImageItem(
            id=row.content_id,
            url=row.content_url,
            alt_text=row.content_title,
            order=row.content_order
        ))

    elif row.content_type == CONTENT_TYPE_VIDEO:
        # hosted videos may only have a youtube/vimeo id
        if any(video.id == row.content_id for video in project.videos):
            return
        project.videos.append(VideoItem(
            id=row.content_id,
            url=row.content_url,
            title=row.content_title,
            description=row.content_description,
            youtube_id=row.youtube_id,
            vimeo_id=row.vimeo_id
        ))


def aggregate_results(
    rows: Iterable[Union[RawSearchResult, Mapping[str, Any]]]
) -> List[CreatorWithContent]:
    """
    Group scored content rows by creator and project.

    A creator's ``total_score`` is the best content score seen for them and
    a project's ``final_score`` the best score of its matched items. Rows
    without a creator, project or content id are skipped.

    Args:
        rows: RawSearchResult objects or raw row mappings, in any order

    Returns:
        Creators sorted by descending total_score, each with projects sorted
        by descending final_score and images sorted by ascending order
    """
    grouped: Dict[str, CreatorWithContent] = {}
    skipped = 0

    for raw_row in rows:
        row = _coerce_row(raw_row)
        if row is None:
            skipped += 1
            continue

        entry = grouped.get(row.creator_id)
        if entry is None:
            entry = CreatorWithContent(creator=CreatorProfile.from_row(row))
            grouped[row.creator_id] = entry

        project = _find_project(entry, row.project_id)
        if project is None:
            project = ProjectContent(
                id=row.project_id,
                title=row.project_title,
                final_score=row.score
            )
            entry.projects.append(project)
        else:
            project.final_score = max(project.final_score, row.score)

        _add_content(project, row)

        entry.total_score = max(entry.total_score, row.score)

    if skipped:
        logger.debug(
            "Skipped malformed search rows",
            extra={"context": {"skipped": skipped}}
        )

    # list.sort is stable, so ties keep first-seen order
    for entry in grouped.values():
        entry.projects.sort(key=lambda p: p.final_score, reverse=True)
        for project in entry.projects:
            project.images.sort(key=lambda image: image.order or 0)

    return sorted(grouped.values(), key=lambda e: e.total_score, reverse=True)

"""Normalization of untrusted search parameters.

Malformed input is never rejected: every field falls back to a safe
default so that a bad filter degrades the search instead of failing it.
"""

import math
from typing import Any, List, Optional

from ..models.search_params import ContentType, SearchFilters, SearchParams


DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50
DEFAULT_PAGE = 1


def _to_number(value: Any) -> Optional[float]:
    """Parse ints, floats and numeric strings; None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _normalize_limit(limit: Any) -> int:
    number = _to_number(limit)
    # zero behaves like "not given"
    if not number:
        return DEFAULT_LIMIT
    return max(MIN_LIMIT, min(MAX_LIMIT, int(number)))


def _normalize_page(page: Any) -> int:
    number = _to_number(page)
    if not number:
        return DEFAULT_PAGE
    return max(DEFAULT_PAGE, int(number))


def _normalize_content_type(content_type: Any) -> ContentType:
    if isinstance(content_type, ContentType):
        return content_type
    if content_type in (ContentType.IMAGES.value, ContentType.VIDEOS.value):
        return ContentType(content_type)
    return ContentType.ALL


def normalize_search_params(
    query: Any = None,
    content_type: Any = None,
    limit: Any = None,
    page: Any = None
) -> SearchParams:
    """
    Normalize raw search parameters.

    Args:
        query: Free-text query; trimmed, None becomes ""
        content_type: "all", "images" or "videos"; anything else is "all"
        limit: Page size, clamped to [1, 50]; defaults to 10
        page: Page number, at least 1; defaults to 1

    Returns:
        SearchParams with every field valid
    """
    return SearchParams(
        query=query.strip() if isinstance(query, str) else "",
        content_type=_normalize_content_type(content_type),
        limit=_normalize_limit(limit),
        page=_normalize_page(page)
    )


def _normalize_terms(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [item for item in value if isinstance(item, str)]
    else:
        return None
    terms = [item.strip() for item in items if item.strip()]
    return terms or None


def normalize_filters(
    role: Any = None,
    subjects: Any = None,
    styles: Any = None,
    max_budget: Any = None
) -> SearchFilters:
    """
    Normalize the optional similarity-search filters.

    Subjects and styles accept lists or comma-separated strings. Empty
    values and non-positive budgets are dropped.
    """
    budget = _to_number(max_budget)
    return SearchFilters(
        role=(role.strip() or None) if isinstance(role, str) else None,
        subjects=_normalize_terms(subjects),
        styles=_normalize_terms(styles),
        max_budget=budget if budget is not None and budget > 0 else None
    )

"""Post listing: filter normalization, sort allow-listing and pagination.

The engine never builds SQL itself. It turns caller-supplied parameters into a
``PostCriteria`` whose sort column is guaranteed to come from ``SORT_FIELDS``
and hands that to a ``PostStore``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

from blog_api.core.exceptions import RepositoryError
from blog_api.core.logging import get_logger
from blog_api.modules.posts.models import Post
from blog_api.modules.posts.repository import PostCriteria, PostStore

SORT_FIELDS = ("date", "title", "createdAt", "updatedAt")
DEFAULT_SORT_FIELD = "date"

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 6
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 50

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class PostFilters:
    """Raw listing parameters as they arrive from the caller."""

    search: Optional[str] = None
    author: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None


@dataclass(frozen=True)
class PaginationMeta:
    total: int
    page: int
    limit: int
    total_pages: int
    has_more: bool

    @classmethod
    def compute(cls, total: int, page: int, limit: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if total else 0
        return cls(
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_more=page < total_pages,
        )


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]) -> tuple[str, bool]:
    """Return ``(column, descending)``.

    Unknown keys fall back to ``date`` and anything but ``asc`` means
    descending. Only allow-listed keys are ever translated into a column name.
    """
    key = sort_by if sort_by in SORT_FIELDS else DEFAULT_SORT_FIELD
    descending = (sort_order or "").strip().lower() != "asc"
    return camel_to_snake(key), descending


def clamp_page(page: Optional[int]) -> int:
    if page is None or page < 1:
        return DEFAULT_PAGE
    return page


def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return DEFAULT_PAGE_SIZE
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, limit))


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PostQueryEngine:
    def __init__(self, store: PostStore, logger=None):
        self.store = store
        self.logger = logger or get_logger(__name__)

    def build_criteria(self, filters: PostFilters) -> tuple[PostCriteria, int, int]:
        page = clamp_page(filters.page)
        limit = clamp_limit(filters.limit)
        sort_column, descending = resolve_sort(filters.sort_by, filters.sort_order)

        criteria = PostCriteria(
            search=_clean(filters.search),
            author=filters.author or None,
            sort_column=sort_column,
            descending=descending,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return criteria, page, limit

    def list(self, filters: PostFilters) -> tuple[list[Post], PaginationMeta]:
        """Return one page of posts plus metadata describing the whole filtered set."""
        criteria, page, limit = self.build_criteria(filters)

        try:
            rows, total = self.store.find_all(criteria)
        except RepositoryError:
            self.logger.error(
                "failed to list posts",
                search=criteria.search,
                author=criteria.author,
                sort=criteria.sort_column,
                exc_info=True,
            )
            raise

        return list(rows), PaginationMeta.compute(total, page, limit)

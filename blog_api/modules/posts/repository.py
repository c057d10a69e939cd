from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_api.core.exceptions import RepositoryError
from blog_api.modules.posts.models import Post

# Shared with the GIN index created in blog_api.db.init_db so the planner can use it.
SEARCH_DOCUMENT_SQL = (
    "to_tsvector('english', title || ' ' || COALESCE(subtitle, '') || ' ' || description)"
)
SEARCH_PREDICATE_SQL = f"{SEARCH_DOCUMENT_SQL} @@ plainto_tsquery('english', :search)"

# Columns a PostCriteria may order by. Anything else is a programming error.
SORTABLE_COLUMNS = {
    "date": Post.date,
    "title": Post.title,
    "created_at": Post.created_at,
    "updated_at": Post.updated_at,
}


@dataclass(frozen=True)
class PostCriteria:
    """Normalized listing request. Built by PostQueryEngine, never from raw input."""

    search: Optional[str]
    author: Optional[str]
    sort_column: str
    descending: bool
    offset: int
    limit: int


class PostStore(ABC):
    """Capability interface over wherever posts live."""

    @abstractmethod
    def create(self, post: Post) -> Post:
        pass

    @abstractmethod
    def get_by_id(self, post_id: uuid.UUID) -> Optional[Post]:
        pass

    @abstractmethod
    def find_all(self, criteria: PostCriteria) -> tuple[Sequence[Post], int]:
        """Return ``(page_rows, total_matching)``; total ignores offset/limit."""
        pass

    @abstractmethod
    def update(self, post_id: uuid.UUID, changes: dict[str, Any]) -> Optional[Post]:
        """Apply present fields only. ``None`` when no row has this id."""
        pass

    @abstractmethod
    def delete(self, post_id: uuid.UUID) -> bool:
        """``False`` when no row has this id."""
        pass

    @abstractmethod
    def exists(self, post_id: uuid.UUID) -> bool:
        pass


class PostRepository(PostStore):
    """SQLAlchemy-backed post store (PostgreSQL in production)."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RepositoryError(f"Failed to {action}") from exc

    def create(self, post: Post) -> Post:
        with self._guard("create post"):
            self.db.add(post)
            self.db.commit()
            self.db.refresh(post)
        return post

    def get_by_id(self, post_id: uuid.UUID) -> Optional[Post]:
        with self._guard("fetch post"):
            return self.db.get(Post, post_id)

    def find_all(self, criteria: PostCriteria) -> tuple[Sequence[Post], int]:
        conditions = []
        if criteria.search:
            conditions.append(text(SEARCH_PREDICATE_SQL).bindparams(search=criteria.search))
        if criteria.author:
            conditions.append(Post.author == criteria.author)

        column = SORTABLE_COLUMNS[criteria.sort_column]
        if criteria.descending:
            order_by = (column.desc(), Post.id.desc())
        else:
            order_by = (column.asc(), Post.id.asc())

        with self._guard("list posts"):
            # count the whole filtered set first, then fetch the page
            total = self.db.scalar(
                select(func.count()).select_from(Post).where(*conditions)
            ) or 0
            if total == 0:
                return [], 0

            rows = self.db.scalars(
                select(Post)
                .where(*conditions)
                .order_by(*order_by)
                .offset(criteria.offset)
                .limit(criteria.limit)
            ).all()

        return rows, total

    def update(self, post_id: uuid.UUID, changes: dict[str, Any]) -> Optional[Post]:
        with self._guard("update post"):
            post = self.db.get(Post, post_id)
            if post is None:
                return None
            for key, value in changes.items():
                if hasattr(post, key):
                    setattr(post, key, value)
            self.db.commit()
            self.db.refresh(post)
        return post

    def delete(self, post_id: uuid.UUID) -> bool:
        with self._guard("delete post"):
            post = self.db.get(Post, post_id)
            if post is None:
                return False
            self.db.delete(post)
            self.db.commit()
        return True

    def exists(self, post_id: uuid.UUID) -> bool:
        with self._guard("check post"):
            count = self.db.scalar(
                select(func.count()).select_from(Post).where(Post.id == post_id)
            )
        return bool(count)

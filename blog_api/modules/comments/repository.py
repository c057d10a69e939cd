from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blog_api.core.exceptions import RepositoryError
from blog_api.modules.comments.models import Comment


@dataclass(frozen=True)
class CommentCriteria:
    post_id: Optional[uuid.UUID] = None
    author: Optional[str] = None
    descending: bool = False


class CommentStore(ABC):
    @abstractmethod
    def create(self, comment: Comment) -> Comment:
        pass

    @abstractmethod
    def get_by_id(self, comment_id: uuid.UUID) -> Optional[Comment]:
        pass

    @abstractmethod
    def find_all(self, criteria: CommentCriteria) -> Sequence[Comment]:
        pass

    @abstractmethod
    def delete(self, comment_id: uuid.UUID) -> bool:
        pass


class CommentRepository(CommentStore):
    """Repository for Comment entity."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RepositoryError(f"Failed to {action}") from exc

    def create(self, comment: Comment) -> Comment:
        with self._guard("create comment"):
            self.db.add(comment)
            self.db.commit()
            self.db.refresh(comment)
        return comment

    def get_by_id(self, comment_id: uuid.UUID) -> Optional[Comment]:
        with self._guard("fetch comment"):
            return self.db.get(Comment, comment_id)

    def find_all(self, criteria: CommentCriteria) -> Sequence[Comment]:
        query = select(Comment)
        if criteria.post_id is not None:
            query = query.where(Comment.post_id == criteria.post_id)
        if criteria.author:
            query = query.where(Comment.author == criteria.author)

        if criteria.descending:
            query = query.order_by(Comment.created_at.desc(), Comment.id.desc())
        else:
            query = query.order_by(Comment.created_at.asc(), Comment.id.asc())

        with self._guard("list comments"):
            return self.db.scalars(query).all()

    def delete(self, comment_id: uuid.UUID) -> bool:
        with self._guard("delete comment"):
            comment = self.db.get(Comment, comment_id)
            if comment is None:
                return False
            self.db.delete(comment)
            self.db.commit()
        return True

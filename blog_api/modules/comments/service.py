from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from blog_api.core.exceptions import InvalidIdentifierError, NotFoundError
from blog_api.core.logging import get_logger
from blog_api.modules.comments.models import Comment
from blog_api.modules.comments.repository import CommentCriteria, CommentStore
from blog_api.modules.posts.repository import PostStore
from blog_api.modules.posts.service import parse_post_id, post_not_found


def parse_comment_id(raw: str | uuid.UUID) -> uuid.UUID:
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (ValueError, AttributeError, TypeError):
        raise InvalidIdentifierError(code="INVALID_COMMENT_ID")


class CommentService:
    """Comments reference posts by id only; deleting a post orphans them."""

    def __init__(self, store: CommentStore, posts: PostStore, logger=None):
        self.store = store
        self.posts = posts
        self.logger = logger or get_logger(__name__)

    def create_comment(self, post_id: str, author: str, content: str) -> Comment:
        pid = parse_post_id(post_id)
        if not self.posts.exists(pid):
            raise post_not_found()

        comment = self.store.create(
            Comment(
                id=uuid.uuid4(),
                post_id=pid,
                author=author,
                content=content,
                created_at=datetime.now(timezone.utc),
            )
        )
        self.logger.info("created comment", comment_id=str(comment.id), post_id=str(pid))
        return comment

    def list_comments(
        self,
        post_id: Optional[str] = None,
        author: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> list[Comment]:
        criteria = CommentCriteria(
            post_id=parse_post_id(post_id) if post_id else None,
            author=author or None,
            descending=(sort_order or "").strip().lower() == "desc",
        )
        return list(self.store.find_all(criteria))

    def delete_comment(self, comment_id: str) -> None:
        cid = parse_comment_id(comment_id)
        if not self.store.delete(cid):
            raise NotFoundError("Comment with specified ID does not exist", code="COMMENT_NOT_FOUND")
        self.logger.info("deleted comment", comment_id=str(cid))

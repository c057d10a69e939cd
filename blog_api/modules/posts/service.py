from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from blog_api.core.exceptions import (
    InvalidIdentifierError,
    InvalidImageURLError,
    NotFoundError,
)
from blog_api.core.logging import get_logger
from blog_api.modules.posts.models import Post
from blog_api.modules.posts.query import PaginationMeta, PostFilters, PostQueryEngine
from blog_api.modules.posts.repository import PostStore
from blog_api.schemas.post import PostCreate, PostUpdate


def parse_post_id(raw: str | uuid.UUID) -> uuid.UUID:
    """Validate a post identifier before it reaches storage."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (ValueError, AttributeError, TypeError):
        raise InvalidIdentifierError(code="INVALID_POST_ID")


def image_url_prefix(public_url: str, bucket: str) -> str:
    """Common prefix of every URL the upload endpoint hands out."""
    return f"{public_url.rstrip('/')}/{bucket}/"


def post_not_found() -> NotFoundError:
    return NotFoundError("Post with specified ID does not exist", code="POST_NOT_FOUND")


class PostService:
    """Service layer for post operations.

    Owns the trusted-image invariant: an image URL is accepted only when it
    starts with the public base URL of the upload bucket.
    """

    def __init__(self, store: PostStore, trusted_image_prefix: str, logger=None):
        self.store = store
        self.trusted_image_prefix = trusted_image_prefix
        self.logger = logger or get_logger(__name__)
        self.query_engine = PostQueryEngine(store, logger=self.logger)

    def _validate_image_url(self, image_url: str) -> None:
        if not image_url.startswith(self.trusted_image_prefix):
            raise InvalidImageURLError()

    def create_post(self, payload: PostCreate) -> Post:
        self._validate_image_url(payload.image)

        data = payload.model_dump()
        post = Post(
            id=uuid.uuid4(),
            title=data["title"],
            subtitle=data.get("subtitle"),
            description=data["description"],
            image=data["image"],
            author=data["author"],
            content=data.get("content"),
            date=datetime.now(timezone.utc),
        )
        post = self.store.create(post)

        self.logger.info("created post", post_id=str(post.id), title=post.title)
        return post

    def get_post(self, post_id: str | uuid.UUID) -> Post:
        pid = parse_post_id(post_id)
        post = self.store.get_by_id(pid)
        if post is None:
            raise post_not_found()
        return post

    def list_posts(self, filters: PostFilters) -> tuple[list[Post], PaginationMeta]:
        return self.query_engine.list(filters)

    def update_post(self, post_id: str | uuid.UUID, payload: PostUpdate) -> Post:
        """Apply only the fields present in ``payload``."""
        pid = parse_post_id(post_id)

        changes: dict[str, Any] = payload.changes()
        if "image" in changes:
            self._validate_image_url(changes["image"])

        post = self.store.update(pid, changes)
        if post is None:
            raise post_not_found()

        self.logger.info("updated post", post_id=str(pid), fields=sorted(changes))
        return post

    def delete_post(self, post_id: str | uuid.UUID) -> None:
        # comments referencing this post are left in place
        pid = parse_post_id(post_id)
        if not self.store.delete(pid):
            raise post_not_found()
        self.logger.info("deleted post", post_id=str(pid))

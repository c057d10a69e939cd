# blog_api/modules/comments/routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from blog_api.db.deps import get_app_logger, get_db
from blog_api.modules.comments.repository import CommentRepository
from blog_api.modules.comments.service import CommentService
from blog_api.modules.posts.repository import PostRepository
from blog_api.schemas.comment import (
    CommentCreate,
    CommentEnvelope,
    CommentListResponse,
    CommentRead,
)

router = APIRouter(prefix="/comments", tags=["comments"])


def get_comment_service(
    db: Session = Depends(get_db),
    logger=Depends(get_app_logger),
) -> CommentService:
    return CommentService(CommentRepository(db), PostRepository(db), logger=logger)


@router.get("", response_model=CommentListResponse)
def list_comments(
    post_id: Optional[str] = Query(default=None, alias="postId"),
    author: Optional[str] = None,
    sort_order: Optional[str] = Query(default=None, alias="sortOrder"),
    service: CommentService = Depends(get_comment_service),
):
    """List comments, oldest first unless sortOrder=desc."""
    comments = service.list_comments(post_id=post_id, author=author, sort_order=sort_order)
    return CommentListResponse(data=[CommentRead.model_validate(c) for c in comments])


@router.post("", response_model=CommentEnvelope, status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: CommentCreate,
    service: CommentService = Depends(get_comment_service),
):
    comment = service.create_comment(payload.post_id, payload.author, payload.content)
    return CommentEnvelope(data=CommentRead.model_validate(comment))


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: str, service: CommentService = Depends(get_comment_service)):
    service.delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

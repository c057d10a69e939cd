# blog_api/modules/posts/routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from blog_api.db.deps import get_app_logger, get_db
from blog_api.modules.posts.query import PostFilters
from blog_api.modules.posts.repository import PostRepository
from blog_api.modules.posts.service import PostService, image_url_prefix
from blog_api.schemas.post import (
    PaginationMetaRead,
    PostCreate,
    PostEnvelope,
    PostListResponse,
    PostRead,
    PostUpdate,
)

router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_service(
    request: Request,
    db: Session = Depends(get_db),
    logger=Depends(get_app_logger),
) -> PostService:
    settings = request.app.state.settings
    prefix = image_url_prefix(settings.MINIO_PUBLIC_URL, settings.MINIO_BUCKET)
    return PostService(PostRepository(db), prefix, logger=logger)


def _int_or_none(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        return None


@router.get("", response_model=PostListResponse)
def list_posts(
    search: Optional[str] = None,
    author: Optional[str] = None,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    sort_order: Optional[str] = Query(default=None, alias="sortOrder"),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    service: PostService = Depends(get_post_service),
):
    """List posts with full-text search, author filter, sorting and pagination."""
    filters = PostFilters(
        search=search,
        author=author,
        sort_by=sort_by,
        sort_order=sort_order,
        page=_int_or_none(page),
        limit=_int_or_none(limit),
    )
    posts, meta = service.list_posts(filters)
    return PostListResponse(
        data=[PostRead.model_validate(p) for p in posts],
        meta=PaginationMetaRead.model_validate(meta),
    )


@router.get("/{post_id}", response_model=PostEnvelope)
def get_post(post_id: str, service: PostService = Depends(get_post_service)):
    """Get a post by ID."""
    return PostEnvelope(data=PostRead.model_validate(service.get_post(post_id)))


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
def create_post(payload: PostCreate, service: PostService = Depends(get_post_service)):
    """Create a new post. The image must come from the upload endpoint."""
    post = service.create_post(payload)
    return PostEnvelope(data=PostRead.model_validate(post))


@router.put("/{post_id}", response_model=PostEnvelope)
def update_post(
    post_id: str,
    payload: PostUpdate,
    service: PostService = Depends(get_post_service),
):
    """Partially update a post; fields missing from the body are left unchanged."""
    post = service.update_post(post_id, payload)
    return PostEnvelope(data=PostRead.model_validate(post))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: str, service: PostService = Depends(get_post_service)):
    """Delete a post."""
    service.delete_post(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from blog_api.schemas.common import CamelModel


class CommentCreate(CamelModel):
    post_id: str
    author: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1)


class CommentRead(CamelModel):
    id: UUID
    post_id: UUID
    author: str
    content: str
    created_at: datetime


class CommentEnvelope(BaseModel):
    data: CommentRead


class CommentListResponse(BaseModel):
    data: list[CommentRead]

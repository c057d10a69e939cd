from datetime import datetime
from typing import Annotated, Any, Optional
from urllib.parse import urlparse
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field, model_validator

from blog_api.schemas.common import CamelModel


class EditorBlock(BaseModel):
    id: Optional[str] = None
    type: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class EditorContent(BaseModel):
    blocks: list[EditorBlock] = Field(default_factory=list)
    time: Optional[int] = None  # unix ms
    version: Optional[str] = None


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be an absolute http(s) URL")
    return value


HttpURL = Annotated[str, Field(max_length=2048), AfterValidator(_check_url)]


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=300)
    description: str = Field(min_length=1, max_length=100)
    image: HttpURL
    author: str = Field(min_length=1, max_length=100)
    content: Optional[EditorContent] = None


class PostUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied.

    ``subtitle`` and ``content`` may be sent as null to clear them.
    """

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    subtitle: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = Field(default=None, min_length=1, max_length=100)
    image: Optional[HttpURL] = None
    content: Optional[EditorContent] = None

    @model_validator(mode="after")
    def _required_fields_not_cleared(self):
        for name in ("title", "description", "image"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class PostRead(CamelModel):
    id: UUID
    title: str
    subtitle: Optional[str] = None
    description: str
    image: str
    date: datetime
    author: str
    content: Optional[EditorContent] = None
    created_at: datetime
    updated_at: datetime


class PaginationMetaRead(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_more: bool


class PostEnvelope(BaseModel):
    data: PostRead


class PostListResponse(BaseModel):
    data: list[PostRead]
    meta: PaginationMetaRead

from typing import Optional

from pydantic import BaseModel

from blog_api.schemas.common import ToolError


class LinkImage(BaseModel):
    url: str


class LinkMeta(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[LinkImage] = None


class LinkPreviewResponse(BaseModel):
    """Editor.js link tool response: success is 1 or 0."""

    success: int
    link: Optional[str] = None
    meta: Optional[LinkMeta] = None
    error: Optional[ToolError] = None

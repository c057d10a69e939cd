from typing import Optional

from pydantic import BaseModel

from blog_api.schemas.common import ToolError


class UploadedFile(BaseModel):
    url: str


class UploadResponse(BaseModel):
    """Editor.js image tool response: success is 1 or 0."""

    success: int
    file: Optional[UploadedFile] = None
    error: Optional[ToolError] = None

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialize with camelCase keys, accept either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, list[str]]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


class ToolError(BaseModel):
    """Error payload of the Editor.js image and link tools."""

    code: str
    message: str

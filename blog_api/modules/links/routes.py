# blog_api/modules/links/routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Request

from blog_api.db.deps import get_app_logger
from blog_api.modules.links.service import LinkPreviewError, LinkPreviewService
from blog_api.schemas.common import ToolError
from blog_api.schemas.link import LinkImage, LinkMeta, LinkPreviewResponse

router = APIRouter(tags=["links"])


def get_link_preview_service(request: Request, logger=Depends(get_app_logger)) -> LinkPreviewService:
    settings = request.app.state.settings
    return LinkPreviewService(
        timeout=settings.LINK_FETCH_TIMEOUT_SECONDS,
        user_agent=settings.LINK_FETCH_USER_AGENT,
        transport=getattr(request.app.state, "link_transport", None),
        logger=logger,
    )


@router.get("/fetch-url", response_model=LinkPreviewResponse, response_model_exclude_none=True)
async def fetch_url(
    url: Optional[str] = None,
    service: LinkPreviewService = Depends(get_link_preview_service),
    logger=Depends(get_app_logger),
):
    """Editor.js link tool endpoint. Always answers 200 with a success flag."""
    try:
        metadata = await service.fetch(url)
    except LinkPreviewError as exc:
        logger.warning("link preview failed", url=url, code=exc.code, reason=exc.message)
        return LinkPreviewResponse(success=0, error=ToolError(code=exc.code, message=exc.message))

    return LinkPreviewResponse(
        success=1,
        link=url,
        meta=LinkMeta(
            title=metadata.title,
            description=metadata.description,
            image=LinkImage(url=metadata.image) if metadata.image else None,
        ),
    )

# blog_api/modules/uploads/routes.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from blog_api.db.deps import get_app_logger
from blog_api.modules.uploads.pipeline import MediaIngestionPipeline, UploadError, UploadPolicy
from blog_api.schemas.common import ToolError
from blog_api.schemas.upload import UploadedFile, UploadResponse

router = APIRouter(tags=["uploads"])


def get_pipeline(request: Request, logger=Depends(get_app_logger)) -> MediaIngestionPipeline:
    settings = request.app.state.settings
    return MediaIngestionPipeline(
        request.app.state.object_store,
        UploadPolicy.from_settings(settings),
        settings.MINIO_PUBLIC_URL,
        logger=logger,
    )


def _failure(code: str, message: str) -> UploadResponse:
    return UploadResponse(success=0, error=ToolError(code=code, message=message))


@router.post("/upload", response_model=UploadResponse, response_model_exclude_none=True)
async def upload_image(
    file: Optional[UploadFile] = File(default=None),
    pipeline: MediaIngestionPipeline = Depends(get_pipeline),
    logger=Depends(get_app_logger),
):
    """Editor.js image tool endpoint. Always answers 200 with a success flag."""
    if file is None:
        logger.warning("no file provided in upload request")
        return _failure("NO_FILE_PROVIDED", "No file in request")

    content_type = file.content_type or "application/octet-stream"
    logger.info(
        "processing file upload",
        filename=file.filename,
        content_type=content_type,
        size_bytes=file.size,
    )

    try:
        data = await file.read()
    except OSError:
        logger.warning("failed to read upload", filename=file.filename, exc_info=True)
        return _failure("READ_ERROR", "Failed to read file data")
    finally:
        await file.close()

    try:
        # Pillow and the object store block; keep them off the event loop
        url = await run_in_threadpool(pipeline.store_image, data, file.filename, content_type)
    except UploadError as exc:
        logger.warning("upload rejected", code=exc.code, reason=exc.message)
        return _failure(exc.code, exc.message)

    return UploadResponse(success=1, file=UploadedFile(url=url))

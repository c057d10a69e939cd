import datetime
import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine, text
from sqlalchemy.orm import Session

from blog_api.api.v1.routes import api_router
from blog_api.core.config import Settings
from blog_api.core.exceptions import AppError
from blog_api.core.logging import configure_logging, get_logger
from blog_api.db.deps import get_db
from blog_api.db.init_db import init_db
from blog_api.db.session import build_engine, build_session_factory
from blog_api.integrations.s3 import ObjectStore, StorageError, build_object_store
from blog_api.middleware.logging import logging_middleware
from blog_api.schemas.common import ErrorDetail, ErrorResponse


def _error_body(code: str, message: str, details: Optional[dict] = None) -> dict:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details or None))
    return body.model_dump(exclude_none=True)


def _validation_details(exc: RequestValidationError) -> dict[str, list[str]]:
    details: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        details.setdefault(".".join(loc) or "body", []).append(err.get("msg", "invalid value"))
    return details


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            request.app.state.logger.error(
                "request failed",
                path=request.url.path,
                code=exc.code,
                error=repr(exc.__cause__ or exc),
            )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(
                "VALIDATION_ERROR", "Request validation failed", _validation_details(exc)
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        request.app.state.logger.error("unhandled error", path=request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
        )


def create_app(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[Engine] = None,
    object_store: Optional[ObjectStore] = None,
    link_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application. Collaborators can be injected (tests use SQLite and a local store)."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        logger = get_logger("blog_api").bind(service="blog-api")
        app.state.logger = logger

        db_engine = engine or build_engine(settings)
        app.state.engine = db_engine
        app.state.session_factory = build_session_factory(db_engine)
        init_db(db_engine, logger=logger)

        store = object_store or build_object_store(settings, logger=logger)
        store.ensure_bucket()
        app.state.object_store = store

        logger.info("fastapi process started", port=settings.SERVER_PORT)
        try:
            yield
        finally:
            logger.info("shutting down")
            if engine is None:
                db_engine.dispose()

    app = FastAPI(title="Blog API", lifespan=lifespan)
    app.state.settings = settings
    app.state.logger = get_logger("blog_api")
    app.state.link_transport = link_transport
    app.state.started_at = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )
    app.middleware("http")(logging_middleware)
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    async def health():
        """Simple health endpoint returning status, uptime, and timestamp."""
        uptime = time.time() - app.state.started_at
        payload = {
            "status": "ok",
            "uptime_seconds": round(uptime, 2),
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }
        return JSONResponse(content=payload)

    @app.get("/db/health")
    def db_health(db: Session = Depends(get_db)):
        db.execute(text("SELECT 1"))
        return {"db": "ok"}

    @app.get("/storage/health")
    def storage_health(request: Request):
        try:
            request.app.state.object_store.health_check()
        except StorageError as exc:
            request.app.state.logger.warning("storage health check failed", error=str(exc))
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"storage": "unavailable"},
            )
        return {"storage": "ok"}

    return app


def run() -> None:
    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
        log_config=None,
    )


if __name__ == "__main__":
    run()

# blog_api/middleware/logging.py
"""
Logging middleware for request/response tracking.
"""

import time

from fastapi import Request


async def logging_middleware(request: Request, call_next):
    """
    Log all incoming requests and their response times.
    """
    logger = request.app.state.logger
    start_time = time.perf_counter()

    logger.info(
        "request started",
        method=request.method,
        path=request.url.path,
        client=request.client.host if request.client else None,
    )

    response = await call_next(request)

    duration = time.perf_counter() - start_time

    logger.info(
        "request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(duration * 1000, 2),
    )

    return response

"""Domain errors shared by the post and comment modules.

Every error carries a machine-readable ``code``; the FastAPI exception
handlers in ``blog_api.main`` render them as ``{"error": {"code", "message"}}``.
"""

from __future__ import annotations

from fastapi import status


class AppError(Exception):
    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.message = message or self.message
        if code:
            self.code = code
        super().__init__(self.message)


class InvalidIdentifierError(AppError):
    """Identifier is not a well-formed UUID. Raised before any storage access."""

    code = "INVALID_ID"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid UUID format"


class NotFoundError(AppError):
    """Identifier is well-formed but no row matches it."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource with specified ID does not exist"


class InvalidImageURLError(AppError):
    code = "INVALID_IMAGE_URL"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid image URL: image must be uploaded via the upload endpoint"


class RepositoryError(AppError):
    """Storage-layer fault. The SQLAlchemy exception is chained, never exposed."""

    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Failed to access the content store"

"""Image ingestion: validate an uploaded payload, store it, return its public URL.

Checks run in a fixed order and stop at the first failure:
MIME type, payload size, then pixel dimensions.
"""

from __future__ import annotations

import io
import re
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath

from PIL import Image, UnidentifiedImageError

from blog_api.core.config import Settings
from blog_api.core.logging import get_logger
from blog_api.integrations.s3 import ObjectStore, StorageError

UPLOAD_PREFIX = "uploads"

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
DEFAULT_EXTENSION = ".jpg"

_SAFE_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,10}$")

BYTES_PER_MB = 1024 * 1024


class UploadError(Exception):
    code = "UPLOAD_FAILED"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidFileTypeError(UploadError):
    code = "INVALID_FILE_TYPE"


class FileTooLargeError(UploadError):
    code = "FILE_TOO_LARGE"


class ImageTooLargeError(UploadError):
    code = "IMAGE_TOO_LARGE"


@dataclass(frozen=True)
class UploadPolicy:
    max_file_size_mb: int
    max_image_dimension: int
    allowed_mime_types: tuple[str, ...]

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadPolicy":
        return cls(
            max_file_size_mb=settings.MAX_FILE_SIZE_MB,
            max_image_dimension=settings.MAX_IMAGE_DIMENSION,
            allowed_mime_types=tuple(settings.ALLOWED_MIME_TYPES),
        )

    def allows(self, content_type: str) -> bool:
        wanted = content_type.lower()
        return any(wanted == allowed.lower() for allowed in self.allowed_mime_types)


def extension_for(filename: str | None, content_type: str) -> str:
    """Keep a plain alphanumeric suffix from the client filename, else map the MIME type."""
    suffix = PurePosixPath(filename or "").suffix
    if suffix and _SAFE_EXTENSION.match(suffix):
        return suffix
    return MIME_EXTENSIONS.get(content_type.lower(), DEFAULT_EXTENSION)


def read_dimensions(data: bytes) -> tuple[int, int]:
    # Image.open only parses the header; pixel data is never decoded here
    with Image.open(io.BytesIO(data)) as img:
        return img.size


class MediaIngestionPipeline:
    def __init__(self, store: ObjectStore, policy: UploadPolicy, public_url: str, logger=None):
        self.store = store
        self.policy = policy
        self.public_url = public_url.rstrip("/")
        self.logger = logger or get_logger(__name__)

    def _check_type(self, content_type: str) -> None:
        if not self.policy.allows(content_type):
            raise InvalidFileTypeError(
                f"invalid file type: {content_type} "
                f"(allowed: {', '.join(self.policy.allowed_mime_types)})"
            )

    def _check_size(self, data: bytes) -> float:
        size_mb = len(data) / BYTES_PER_MB
        if size_mb > self.policy.max_file_size_mb:
            raise FileTooLargeError(
                f"file size {size_mb:.2f}MB exceeds maximum allowed size of "
                f"{self.policy.max_file_size_mb}MB"
            )
        return size_mb

    def _check_dimensions(self, data: bytes) -> None:
        limit = self.policy.max_image_dimension
        try:
            width, height = read_dimensions(data)
        except Image.DecompressionBombError as exc:
            raise ImageTooLargeError(f"image dimensions exceed maximum allowed {limit}x{limit}") from exc
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as exc:
            raise UploadError(f"failed to decode image: {exc}") from exc

        if width > limit or height > limit:
            raise ImageTooLargeError(
                f"image dimensions {width}x{height} exceed maximum allowed {limit}x{limit}"
            )

    def build_key(self, filename: str | None, content_type: str) -> str:
        return f"{UPLOAD_PREFIX}/{uuid.uuid4()}{extension_for(filename, content_type)}"

    def public_url_for(self, key: str) -> str:
        return f"{self.public_url}/{self.store.bucket}/{key}"

    def store_image(self, data: bytes, filename: str | None, content_type: str) -> str:
        """Validate ``data`` and write it to the object store. Returns the public URL."""
        self._check_type(content_type)
        size_mb = self._check_size(data)
        self._check_dimensions(data)

        key = self.build_key(filename, content_type)
        try:
            self.store.put_object(key, data, content_type)
        except StorageError as exc:
            raise UploadError(f"failed to upload file: {exc}") from exc

        self.logger.info("image uploaded", key=key, size_mb=f"{size_mb:.2f}")
        return self.public_url_for(key)

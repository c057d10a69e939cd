"""Dummy object store using the local filesystem."""

import json
from pathlib import Path

from blog_api.core.logging import get_logger

from .base import ObjectStore, StorageError
from .client import public_read_policy


class DummyObjectStore(ObjectStore):
    """
    Stores objects under ``<storage_path>/<bucket>/<key>``.
    Mimics the bucket layout of the real store so public URLs map onto paths.
    """

    def __init__(self, storage_path: str | Path, bucket: str, logger=None):
        self.storage_path = Path(storage_path)
        self.bucket = bucket
        self.logger = logger or get_logger(__name__)
        self.logger.info("Initialized DummyObjectStore", storage_path=str(self.storage_path))

    @property
    def bucket_path(self) -> Path:
        return self.storage_path / self.bucket

    def _get_full_path(self, key: str) -> Path:
        """Convert an object key to a local filesystem path."""
        return self.bucket_path / key.lstrip("/")

    def ensure_bucket(self) -> None:
        self.bucket_path.mkdir(parents=True, exist_ok=True)
        (self.storage_path / f"{self.bucket}.policy.json").write_text(
            public_read_policy(self.bucket)
        )
        self.logger.info("bucket ready", bucket=self.bucket, path=str(self.bucket_path))

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        destination = self._get_full_path(key)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(body)
        except OSError as exc:
            raise StorageError(f"failed to upload {key}") from exc

        self.logger.info("Object stored", destination=str(destination), size=len(body))

    def health_check(self) -> None:
        if not self.bucket_path.is_dir():
            raise StorageError(f"bucket directory missing: {self.bucket_path}")

    def get_object(self, key: str) -> bytes:
        file_path = self._get_full_path(key)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {key}")
        return file_path.read_bytes()

    def get_policy(self) -> dict:
        return json.loads((self.storage_path / f"{self.bucket}.policy.json").read_text())

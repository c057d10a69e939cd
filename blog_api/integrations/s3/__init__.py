"""Object storage integration - supports both dummy (local) and MinIO/S3."""

from .base import ObjectStore, StorageError
from .client import S3ObjectStore, build_object_store
from .dummy_storage import DummyObjectStore

__all__ = [
    "ObjectStore",
    "StorageError",
    "S3ObjectStore",
    "DummyObjectStore",
    "build_object_store",
]

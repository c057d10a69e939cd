"""Object store interface shared by the MinIO/S3 client and the local dummy."""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised when the object store cannot be reached or refuses a request."""


class ObjectStore(ABC):
    bucket: str

    @abstractmethod
    def ensure_bucket(self) -> None:
        """Create the bucket when missing and make its objects publicly readable."""

    @abstractmethod
    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        pass

    @abstractmethod
    def health_check(self) -> None:
        """Raise ``StorageError`` when the store is unreachable."""

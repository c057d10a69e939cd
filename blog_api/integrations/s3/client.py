"""MinIO / S3-compatible object store built on boto3."""

import json

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from blog_api.core.config import Settings
from blog_api.core.logging import get_logger

from .base import ObjectStore, StorageError

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


def public_read_policy(bucket: str) -> str:
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Effect": "Allow",
                    "Principal": {"AWS": ["*"]},
                    "Action": ["s3:GetObject"],
                    "Resource": [f"arn:aws:s3:::{bucket}/*"],
                }
            ],
        }
    )


def _is_missing_bucket(exc: ClientError) -> bool:
    return str(exc.response.get("Error", {}).get("Code")) in _MISSING_BUCKET_CODES


class S3ObjectStore(ObjectStore):
    """
    Object store talking to MinIO (or any S3-compatible endpoint).

    Uses path-style addressing so the bucket never has to resolve as a
    subdomain of the endpoint. Health probes go through a second client with
    short timeouts and no retries.
    """

    def __init__(
        self,
        endpoint_url: str,
        access_key: str,
        secret_key: str,
        bucket: str,
        region: str = "us-east-1",
        health_timeout: float = 5.0,
        logger=None,
    ):
        self.bucket = bucket
        self.logger = logger or get_logger(__name__)

        session = boto3.session.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )
        self._client = session.client(
            "s3",
            endpoint_url=endpoint_url,
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
        self._health_client = session.client(
            "s3",
            endpoint_url=endpoint_url,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
                connect_timeout=health_timeout,
                read_timeout=health_timeout,
                retries={"total_max_attempts": 1, "mode": "standard"},
            ),
        )
        self.logger.info("S3ObjectStore initialized", endpoint=endpoint_url, bucket=bucket)

    def ensure_bucket(self) -> None:
        try:
            try:
                self._client.head_bucket(Bucket=self.bucket)
            except ClientError as exc:
                if not _is_missing_bucket(exc):
                    raise
                self._client.create_bucket(Bucket=self.bucket)
                self.logger.info("bucket created", bucket=self.bucket)

            self._client.put_bucket_policy(
                Bucket=self.bucket, Policy=public_read_policy(self.bucket)
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"failed to prepare bucket {self.bucket}: {exc}") from exc

        self.logger.info("bucket ready", bucket=self.bucket)

    def put_object(self, key: str, body: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                ContentLength=len(body),
            )
        except (ClientError, BotoCoreError) as exc:
            self.logger.error("failed to store object", key=key, error=str(exc))
            raise StorageError(f"failed to upload {key}") from exc

        self.logger.info("object stored", key=key, size=len(body))

    def health_check(self) -> None:
        try:
            self._health_client.head_bucket(Bucket=self.bucket)
        except ClientError as exc:
            # the endpoint answered, the bucket just is not there yet
            if _is_missing_bucket(exc):
                return
            raise StorageError(str(exc)) from exc
        except BotoCoreError as exc:
            raise StorageError(str(exc)) from exc


def build_object_store(settings: Settings, logger=None) -> ObjectStore:
    """Pick the local dummy store or a real MinIO client from USE_DUMMY_S3."""
    if settings.USE_DUMMY_S3:
        from .dummy_storage import DummyObjectStore

        return DummyObjectStore(settings.S3_STORAGE_PATH, settings.MINIO_BUCKET, logger=logger)

    return S3ObjectStore(
        endpoint_url=settings.minio_endpoint_url,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        bucket=settings.MINIO_BUCKET,
        region=settings.MINIO_REGION,
        health_timeout=settings.STORAGE_HEALTH_TIMEOUT_SECONDS,
        logger=logger,
    )

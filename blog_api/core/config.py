from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from typing import Annotated

# Ensure env file is loaded before Settings() reads environment variables
from blog_api.core.env import load_env
load_env()


def _split_csv(value):
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=None,  # loaded via blog_api.core.env (ENV_FILE)
        extra="ignore",
        case_sensitive=True,
    )

    # Database
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "bloguser"
    DB_PASSWORD: str = "blogpassword"
    DB_NAME: str = "blogdb"
    DB_SSLMODE: str = "disable"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 90

    # Object storage (MinIO / S3-compatible)
    USE_DUMMY_S3: bool = False  # local filesystem instead of a real bucket (dev)
    S3_STORAGE_PATH: str = "./storage/s3"
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET: str = "blog"
    MINIO_USE_SSL: bool = False
    MINIO_PUBLIC_URL: str = "http://localhost:9000"
    MINIO_REGION: str = "us-east-1"
    STORAGE_HEALTH_TIMEOUT_SECONDS: float = 5.0

    # Upload constraints
    MAX_FILE_SIZE_MB: int = 5
    MAX_IMAGE_DIMENSION: int = 4096
    ALLOWED_MIME_TYPES: Annotated[list[str], NoDecode] = [
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
    ]

    # Link preview
    LINK_FETCH_TIMEOUT_SECONDS: float = 10.0
    LINK_FETCH_USER_AGENT: str = "Mozilla/5.0 (compatible; BlogAPI/1.0; +http://example.com/bot)"

    # Server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000"]
    SHUTDOWN_GRACE_SECONDS: int = 5
    LOG_LEVEL: str = "INFO"

    @field_validator("ALLOWED_MIME_TYPES", "CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_csv(cls, value):
        return _split_csv(value)

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?sslmode={self.DB_SSLMODE}"
        )

    @property
    def minio_endpoint_url(self) -> str:
        scheme = "https" if self.MINIO_USE_SSL else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}"


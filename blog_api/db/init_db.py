"""Database initialization: tables plus the indexes the listing queries rely on."""

from sqlalchemy import Engine, text

from blog_api.core.logging import get_logger
from blog_api.db.base import Base
from blog_api.modules.comments.models import Comment  # noqa: F401  (registers table)
from blog_api.modules.posts.models import Post  # noqa: F401  (registers table)
from blog_api.modules.posts.repository import SEARCH_DOCUMENT_SQL

POSTGRES_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_posts_date ON posts (date DESC)",
    "CREATE INDEX IF NOT EXISTS idx_posts_author ON posts (author)",
    f"CREATE INDEX IF NOT EXISTS idx_posts_search ON posts USING GIN ({SEARCH_DOCUMENT_SQL})",
)


def init_db(engine: Engine, logger=None) -> None:
    """Create all tables and indexes. Safe to run on every start."""
    logger = logger or get_logger(__name__)

    logger.info("creating database tables")
    Base.metadata.create_all(bind=engine)

    if engine.dialect.name == "postgresql":
        with engine.begin() as conn:
            for statement in POSTGRES_INDEXES:
                conn.execute(text(statement))
        logger.info("database indexes ensured", count=len(POSTGRES_INDEXES))

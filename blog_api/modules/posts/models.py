from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from blog_api.db.base import Base
from blog_api.db.mixins import TimestampMixin


# Editor.js document: {"blocks": [{"id", "type", "data"}], "time", "version"}
EditorDocument = JSON().with_variant(JSONB(), "postgresql")


class Post(TimestampMixin, Base):
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(String(300), nullable=True)
    description: Mapped[str] = mapped_column(String(100), nullable=False)

    # must point into the public storage bucket, checked by PostService
    image: Mapped[str] = mapped_column(String(2048), nullable=False)

    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    author: Mapped[str] = mapped_column(String(100), nullable=False)

    content: Mapped[dict[str, Any] | None] = mapped_column(EditorDocument, nullable=True)

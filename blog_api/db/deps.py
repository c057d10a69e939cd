from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session


# ---------- DB DEPENDENCY ----------


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


# ---------- LOGGER DEPENDENCY ----------


def get_app_logger(request: Request):
    """Root logger created in the lifespan and bound with the service name."""
    return request.app.state.logger

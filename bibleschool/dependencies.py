"""FastAPI dependencies for shared services."""
from __future__ import annotations

from typing import Iterator

from sqlalchemy.orm import Session

from .db import get_session


def get_db() -> Iterator[Session]:  # pragma: no cover - thin wrapper for dependency injection
    """Expose a transactional SQLAlchemy session dependency."""

    with get_session() as session:
        yield session

"""Engine, session and schema helpers for the course store."""
from __future__ import annotations

import contextlib
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from bibleschool.config import DATABASE_URL, SQLALCHEMY_ECHO

SQLITE_PRAGMA = "PRAGMA foreign_keys = ON"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute(SQLITE_PRAGMA)
    cursor.close()


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement."""
    db_engine = create_engine(url, future=True, echo=echo)
    if db_engine.dialect.name == "sqlite":
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)
    return db_engine


engine = create_db_engine(DATABASE_URL, echo=SQLALCHEMY_ECHO)
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)

Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
    """Create tables for every registered model on ``bind`` (default engine)."""
    from bibleschool.db import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextlib.contextmanager
def get_session() -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "Base",
    "DATABASE_URL",
    "SessionLocal",
    "create_db_engine",
    "engine",
    "get_session",
    "init_db",
]

from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy.orm import Session, sessionmaker

from bibleschool.db import create_db_engine, init_db


@pytest.fixture()
def session() -> Iterator[Session]:
    engine = create_db_engine("sqlite:///:memory:")
    TestingSession = sessionmaker(bind=engine, future=True)
    init_db(engine)
    with TestingSession() as session:
        yield session
        session.rollback()
    engine.dispose()

"""FastAPI application serving the course catalog and learner progress."""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .config import SEED_PUBLIC_COURSES_ON_STARTUP
from .db import get_session, init_db
from .routers import courses as courses_router
from .routers import learners as learners_router
from .routers import public_courses as public_courses_router
from .services import PUBLIC_COURSES, CourseSyncError, SyncReport, ensure_public_courses

LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Bible School Service", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(courses_router.router)
app.include_router(learners_router.router)
app.include_router(public_courses_router.router)


def seed_public_courses() -> SyncReport | None:
    """Seed the public courses, logging instead of failing when the store cannot be synchronised."""
    try:
        with get_session() as session:
            return ensure_public_courses(session, PUBLIC_COURSES)
    except (SQLAlchemyError, CourseSyncError) as exc:
        LOGGER.warning("Public course seeding failed; serving existing data: %s", exc)
        return None


@app.on_event("startup")
def startup_event() -> None:  # pragma: no cover - exercised indirectly
    init_db()
    if SEED_PUBLIC_COURSES_ON_STARTUP:
        seed_public_courses()


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}

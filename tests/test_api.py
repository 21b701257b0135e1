"""Integration-style tests calling the API route functions with a test session."""
from __future__ import annotations

import contextlib
import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bibleschool import app as app_module
from bibleschool.db import create_db_engine, init_db
from bibleschool.routers import courses, learners, public_courses
from bibleschool.schemas import ManifestCoursePayload, ManifestLessonPayload, SyncRequest, UserUpsert
from bibleschool.services import course_sync


@pytest.fixture
def db() -> Iterator[Session]:
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    TestingSession = sessionmaker(bind=engine, future=True)
    with TestingSession() as session:
        yield session
    engine.dispose()


def test_health_check() -> None:
    assert app_module.health_check() == {"status": "ok"}


def test_sync_defaults_to_public_courses_and_is_idempotent(db: Session) -> None:
    report = public_courses.sync_public_courses(request=None, db=db)

    assert report.courses_created == 2
    assert report.lessons_created == 36

    again = public_courses.sync_public_courses(request=SyncRequest(), db=db)
    assert again.writes == 0
    assert again.courses_matched == 2

    listed = courses.list_courses(db=db)
    assert [course.title for course in listed] == ["Discover", "Ugunduzi"]
    lessons = courses.list_course_lessons(listed[1].id, db=db)
    assert [lesson.lesson_number for lesson in lessons] == list(range(1, 11))
    assert lessons[0].content_url == "/lessons/ugunduzi/lesson1.htm"


def test_sync_accepts_custom_manifest(db: Session) -> None:
    request = SyncRequest(
        courses=[
            ManifestCoursePayload(
                title="Discover",
                lessons=[
                    ManifestLessonPayload(number=1),
                    ManifestLessonPayload(number=2, url="/custom/2.htm"),
                    ManifestLessonPayload(number="x"),
                ],
            )
        ]
    )

    report = public_courses.sync_public_courses(request=request, db=db)

    assert report.lessons_created == 2
    assert report.skipped_lessons == 1
    course = courses.list_courses(db=db)[0]
    urls = [lesson.content_url for lesson in courses.list_course_lessons(course.id, db=db)]
    assert urls == ["/lessons/discover/lesson1.htm", "/custom/2.htm"]


def test_url_sync_endpoint_backfills_null_links(db: Session) -> None:
    request = SyncRequest(courses=[ManifestCoursePayload(title="Health", lessons=[ManifestLessonPayload(number=1)])])
    public_courses.sync_public_courses(request=request, db=db)

    request = SyncRequest(
        courses=[
            ManifestCoursePayload(title="Health", lessons=[ManifestLessonPayload(number=1, url="/health/1.htm")])
        ]
    )
    response = public_courses.sync_lesson_urls(request=request, db=db)

    assert response.updated == 1
    lesson = courses.list_course_lessons(courses.list_courses(db=db)[0].id, db=db)[0]
    assert lesson.content_url == "/health/1.htm"


def test_store_error_maps_to_service_unavailable(db: Session, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(public_courses, "ensure_public_courses", broken)

    with pytest.raises(HTTPException) as excinfo:
        public_courses.sync_public_courses(request=None, db=db)
    assert excinfo.value.status_code == 503


def test_missing_course_and_lesson_return_404(db: Session) -> None:
    with pytest.raises(HTTPException) as excinfo:
        courses.get_course(42, db=db)
    assert excinfo.value.status_code == 404

    with pytest.raises(HTTPException) as excinfo:
        courses.list_course_lessons(42, db=db)
    assert excinfo.value.status_code == 404

    with pytest.raises(HTTPException) as excinfo:
        courses.get_lesson(42, db=db)
    assert excinfo.value.status_code == 404


def test_learner_progress_flow(db: Session) -> None:
    public_courses.sync_public_courses(request=None, db=db)
    user = learners.upsert_user(UserUpsert(clerk_id="user_abc", full_name="Neema"), db=db)
    assert learners.get_user("user_abc", db=db).id == user.id

    discover = courses.list_courses(db=db)[0]
    first_lesson = courses.list_course_lessons(discover.id, db=db)[0]
    progress = learners.complete_lesson(user.id, first_lesson.id, db=db)
    assert progress.is_completed is True

    assert [row.lesson_id for row in learners.get_progress(user.id, db=db)] == [first_lesson.id]
    stats = learners.get_stats(user.id, db=db)
    assert (stats.completed, stats.total_lessons) == (1, 36)

    summaries = learners.get_course_progress(user.id, db=db)
    assert [(s.title, s.completed_lessons, s.progress_percent) for s in summaries] == [
        ("Discover", 1, 4),
        ("Ugunduzi", 0, 0),
    ]


def test_learner_endpoints_reject_unknown_ids(db: Session) -> None:
    with pytest.raises(HTTPException) as excinfo:
        learners.get_user("nobody", db=db)
    assert excinfo.value.status_code == 404

    with pytest.raises(HTTPException) as excinfo:
        learners.get_stats(99, db=db)
    assert excinfo.value.status_code == 404

    user = learners.upsert_user(UserUpsert(clerk_id="user_xyz"), db=db)
    with pytest.raises(HTTPException) as excinfo:
        learners.complete_lesson(user.id, 999, db=db)
    assert excinfo.value.status_code == 404


def test_startup_seeding_failure_is_only_a_warning(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    @contextlib.contextmanager
    def unreachable_store() -> Iterator[Session]:
        raise OperationalError("SELECT", {}, Exception("connection refused"))
        yield  # pragma: no cover

    monkeypatch.setattr(app_module, "get_session", unreachable_store)

    with caplog.at_level(logging.WARNING, logger=app_module.LOGGER.name):
        assert app_module.seed_public_courses() is None
    assert "Public course seeding failed" in caplog.text


def test_startup_seeding_returns_report(db: Session, monkeypatch: pytest.MonkeyPatch) -> None:
    @contextlib.contextmanager
    def test_session() -> Iterator[Session]:
        yield db

    monkeypatch.setattr(app_module, "get_session", test_session)

    report = app_module.seed_public_courses()
    assert report is not None
    assert report.courses_created == 2


def test_startup_seeding_on_unsupported_store_is_only_a_warning(
    db: Session, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    @contextlib.contextmanager
    def test_session() -> Iterator[Session]:
        yield db

    monkeypatch.setattr(app_module, "get_session", test_session)
    monkeypatch.setattr(course_sync, "_UPSERT_DIALECTS", {})

    with caplog.at_level(logging.WARNING, logger=app_module.LOGGER.name):
        assert app_module.seed_public_courses() is None
    assert "not supported" in caplog.text


def test_unsupported_store_maps_to_not_implemented(db: Session, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(course_sync, "_UPSERT_DIALECTS", {})

    with pytest.raises(HTTPException) as excinfo:
        public_courses.sync_public_courses(request=None, db=db)
    assert excinfo.value.status_code == 501

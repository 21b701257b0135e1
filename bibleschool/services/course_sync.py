"""Seed the public courses and keep their lesson links filled in.

The manifest (see :mod:`bibleschool.services.manifest`) describes which
courses and numbered lessons should exist. :func:`ensure_public_courses`
creates whatever is missing and backfills empty lesson titles and content
URLs. It never deletes rows and never replaces a content URL that is already
set, so it can run on every start-up.

Each course is committed on its own. A database error rolls back only the
course being processed; the remaining courses are still synchronised and the
first error is re-raised once the manifest has been walked.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Mapping

from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import validate_lesson_url_patterns
from ..db.models import Course, Lesson
from .manifest import ManifestLesson, coerce_lesson_number, parse_manifest, resolve_lesson_url

LOGGER = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CourseSyncError(RuntimeError):
    """Raised when the configured store cannot run the synchroniser."""


@dataclass
class SyncReport:
    """Counters describing what a synchronisation run changed."""

    courses_created: int = 0
    courses_matched: int = 0
    lessons_created: int = 0
    lessons_updated: int = 0
    skipped_courses: int = 0
    skipped_lessons: int = 0
    failed_courses: list[str] = field(default_factory=list)

    @property
    def writes(self) -> int:
        return self.courses_created + self.lessons_created + self.lessons_updated

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["writes"] = self.writes
        return data


@dataclass(slots=True)
class _LessonPlan:
    rows: list[dict[str, Any]] = field(default_factory=list)
    created: int = 0
    updated: int = 0
    skipped: int = 0


def _title_key(title: str) -> str:
    return title.strip().lower()


def _load_course_index(session: Session) -> dict[str, int]:
    index: dict[str, int] = {}
    for course_id, title in session.execute(select(Course.id, Course.title).order_by(Course.id)):
        if title:
            index.setdefault(_title_key(title), course_id)
    return index


def _insert_factory(session: Session):
    dialect = session.get_bind().dialect.name
    factory = _UPSERT_DIALECTS.get(dialect)
    if factory is None:
        raise CourseSyncError(f"Lesson upserts are not supported on the {dialect!r} dialect")
    return factory


def _check_patterns(patterns: Mapping[str, str] | None) -> None:
    if patterns is None:
        return
    try:
        validate_lesson_url_patterns(patterns)
    except ValueError as exc:
        raise CourseSyncError(str(exc)) from exc


def _create_course(session: Session, title: str, description: str | None) -> int:
    course = Course(title=title, description=description)
    session.add(course)
    session.flush()
    LOGGER.info("Created course %r (id=%s)", title, course.id)
    return course.id


def _existing_lessons(session: Session, course_id: int) -> dict[int, Any]:
    stmt = select(Lesson.id, Lesson.lesson_number, Lesson.title, Lesson.content_url).where(
        Lesson.course_id == course_id
    )
    return {row.lesson_number: row for row in session.execute(stmt)}


def _plan_lessons(
    course_id: int,
    course_title: str,
    lessons: Iterable[ManifestLesson],
    existing: Mapping[int, Any],
    patterns: Mapping[str, str] | None,
) -> _LessonPlan:
    plan = _LessonPlan()
    staged: set[int] = set()
    for lesson in lessons:
        number = coerce_lesson_number(lesson.number)
        if number is None or number in staged:
            plan.skipped += 1
            LOGGER.debug("Skipping lesson entry %r of %r", lesson.number, course_title)
            continue
        staged.add(number)

        desired_title = lesson.title or f"Lesson {number}"
        desired_url = resolve_lesson_url(course_title, number, lesson.url, patterns)
        current = existing.get(number)

        if current is None:
            plan.rows.append(
                {
                    "course_id": course_id,
                    "lesson_number": number,
                    "title": desired_title,
                    "content_url": desired_url,
                }
            )
            plan.created += 1
            continue

        needs_url = not current.content_url and desired_url is not None
        needs_title = not current.title
        if not (needs_url or needs_title):
            continue
        plan.rows.append(
            {
                "course_id": course_id,
                "lesson_number": number,
                "title": desired_title if needs_title else current.title,
                "content_url": desired_url if needs_url else current.content_url,
            }
        )
        plan.updated += 1
    return plan


def _upsert_lessons(session: Session, rows: list[dict[str, Any]]) -> None:
    insert = _insert_factory(session)
    stmt = insert(Lesson).values(rows)
    # Stored non-empty values win over the staged row, even if the row changed
    # after it was read.
    stmt = stmt.on_conflict_do_update(
        index_elements=["course_id", "lesson_number"],
        set_={
            "title": func.coalesce(func.nullif(Lesson.title, ""), stmt.excluded.title),
            "content_url": func.coalesce(func.nullif(Lesson.content_url, ""), stmt.excluded.content_url),
        },
        where=or_(
            Lesson.title.is_(None),
            Lesson.title == "",
            Lesson.content_url.is_(None),
            Lesson.content_url == "",
        ),
    )
    session.execute(stmt)


def ensure_public_courses(
    session: Session,
    manifest: Any,
    patterns: Mapping[str, str] | None = None,
) -> SyncReport:
    """Create missing courses and lessons from ``manifest`` and backfill links.

    ``patterns`` overrides the configured title to URL-template table.
    Re-running with the same manifest performs no further writes.
    """
    report = SyncReport()
    courses = parse_manifest(manifest)
    if not courses:
        return report

    _insert_factory(session)
    _check_patterns(patterns)
    index = _load_course_index(session)
    first_error: SQLAlchemyError | None = None

    for entry in courses:
        title = (entry.title or "").strip()
        if not title:
            report.skipped_courses += 1
            LOGGER.debug("Skipping manifest course without a title")
            continue

        key = _title_key(title)
        course_id = index.get(key)
        created = False
        try:
            if course_id is None:
                course_id = _create_course(session, title, entry.description)
                index[key] = course_id
                created = True
            existing = _existing_lessons(session, course_id)
            plan = _plan_lessons(course_id, title, entry.lessons, existing, patterns)
            if plan.rows:
                _upsert_lessons(session, plan.rows)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            if created:
                index.pop(key, None)
            report.failed_courses.append(title)
            LOGGER.exception("Synchronising course %r failed", title)
            if first_error is None:
                first_error = exc
            continue

        if created:
            report.courses_created += 1
        else:
            report.courses_matched += 1
        report.lessons_created += plan.created
        report.lessons_updated += plan.updated
        report.skipped_lessons += plan.skipped

    LOGGER.info(
        "Public course sync: %d created, %d matched, %d lessons created, %d lessons updated",
        report.courses_created,
        report.courses_matched,
        report.lessons_created,
        report.lessons_updated,
    )
    if first_error is not None:
        raise first_error
    return report


def sync_public_lesson_urls(
    session: Session,
    manifest: Any,
    patterns: Mapping[str, str] | None = None,
) -> int:
    """Fill lesson content URLs that are still ``NULL``.

    Only courses that already exist are considered and no rows are created.
    Returns the number of lessons updated.
    """
    courses = parse_manifest(manifest)
    if not courses:
        return 0

    _check_patterns(patterns)
    index = _load_course_index(session)
    updated = 0
    for entry in courses:
        title = (entry.title or "").strip()
        if not title:
            continue
        course_id = index.get(_title_key(title))
        if course_id is None:
            LOGGER.debug("No stored course matches %r", title)
            continue

        for lesson in entry.lessons:
            number = coerce_lesson_number(lesson.number)
            if number is None:
                continue
            desired_url = resolve_lesson_url(title, number, lesson.url, patterns)
            if desired_url is None:
                continue
            result = session.execute(
                update(Lesson)
                .where(
                    Lesson.course_id == course_id,
                    Lesson.lesson_number == number,
                    Lesson.content_url.is_(None),
                )
                .values(content_url=desired_url)
            )
            updated += result.rowcount or 0

    session.flush()
    LOGGER.info("Backfilled %d lesson URLs", updated)
    return updated


__all__ = [
    "CourseSyncError",
    "SyncReport",
    "ensure_public_courses",
    "sync_public_lesson_urls",
]

"""Repository helpers for courses, lessons, learners and their progress."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bibleschool.db.models import Course, Lesson, Progress, User
from bibleschool.db.models.user import ROLE_LEARNER


@dataclass(slots=True)
class LearnerStats:
    completed: int
    total_lessons: int
    last_activity: datetime | None = None


@dataclass(slots=True)
class CourseProgress:
    course_id: int
    title: str
    description: str | None
    total_lessons: int
    completed_lessons: int
    progress_percent: int
    last_activity: datetime | None = None


def list_courses(session: Session) -> Sequence[Course]:
    return session.scalars(select(Course).order_by(Course.id)).all()


def get_course(session: Session, course_id: int) -> Course | None:
    return session.get(Course, course_id)


def list_lessons_by_course(session: Session, course_id: int) -> Sequence[Lesson]:
    stmt = select(Lesson).where(Lesson.course_id == course_id).order_by(Lesson.lesson_number)
    return session.scalars(stmt).all()


def get_lesson(session: Session, lesson_id: int) -> Lesson | None:
    return session.get(Lesson, lesson_id)


def get_user_by_clerk_id(session: Session, clerk_id: str) -> User | None:
    return session.scalar(select(User).where(User.clerk_id == clerk_id))


def upsert_user(
    session: Session,
    *,
    clerk_id: str,
    full_name: str | None = None,
    email: str | None = None,
    gender: str | None = None,
    dob: date | None = None,
    church_id: int | None = None,
    role_id: int = ROLE_LEARNER,
) -> User:
    """Create or refresh the account keyed by ``clerk_id``."""
    user = get_user_by_clerk_id(session, clerk_id)
    if user is None:
        user = User(clerk_id=clerk_id)
        session.add(user)
    user.full_name = full_name
    user.email = email
    user.gender = gender
    user.dob = dob
    user.church_id = church_id
    user.role_id = role_id
    session.flush()
    return user


def get_progress_for_user(session: Session, user_id: int) -> Sequence[Progress]:
    stmt = select(Progress).where(Progress.user_id == user_id).order_by(Progress.lesson_id)
    return session.scalars(stmt).all()


def mark_lesson_complete(session: Session, user_id: int, lesson_id: int) -> Progress:
    """Record a completed lesson; repeated calls refresh ``completed_at``."""
    progress = session.scalar(
        select(Progress).where(Progress.user_id == user_id, Progress.lesson_id == lesson_id)
    )
    if progress is None:
        progress = Progress(user_id=user_id, lesson_id=lesson_id)
        session.add(progress)
    progress.is_completed = True
    progress.completed_at = datetime.now(tz=timezone.utc)
    session.flush()
    return progress


def learner_stats(session: Session, user_id: int) -> LearnerStats:
    completed, last_activity = session.execute(
        select(func.count(Progress.id), func.max(Progress.completed_at)).where(
            Progress.user_id == user_id, Progress.is_completed.is_(True)
        )
    ).one()
    total = session.scalar(select(func.count(Lesson.id))) or 0
    return LearnerStats(completed=completed or 0, total_lessons=total, last_activity=last_activity)


def learner_course_progress(session: Session, user_id: int) -> list[CourseProgress]:
    """Summarise a learner's completion for every course, most advanced first."""
    totals = dict(
        session.execute(select(Lesson.course_id, func.count(Lesson.id)).group_by(Lesson.course_id)).all()
    )
    completed_rows = session.execute(
        select(Lesson.course_id, func.count(Progress.id), func.max(Progress.completed_at))
        .join(Progress, Progress.lesson_id == Lesson.id)
        .where(Progress.user_id == user_id, Progress.is_completed.is_(True))
        .group_by(Lesson.course_id)
    ).all()
    completed = {course_id: (count, last) for course_id, count, last in completed_rows}

    summaries: list[CourseProgress] = []
    for course in list_courses(session):
        total = totals.get(course.id, 0)
        done, last_activity = completed.get(course.id, (0, None))
        percent = round(done * 100 / total) if total else 0
        summaries.append(
            CourseProgress(
                course_id=course.id,
                title=course.title,
                description=course.description,
                total_lessons=total,
                completed_lessons=done,
                progress_percent=percent,
                last_activity=last_activity,
            )
        )
    summaries.sort(key=lambda item: (-item.progress_percent, item.course_id))
    return summaries


__all__ = [
    "CourseProgress",
    "LearnerStats",
    "get_course",
    "get_lesson",
    "get_progress_for_user",
    "get_user_by_clerk_id",
    "learner_course_progress",
    "learner_stats",
    "list_courses",
    "list_lessons_by_course",
    "mark_lesson_complete",
    "upsert_user",
]

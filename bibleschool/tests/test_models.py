from __future__ import annotations

import pytest
import sqlalchemy as sa
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bibleschool.db import Base
from bibleschool.db.models import Course, Lesson, Progress, User


def count_rows(session: Session, model: type[Base]) -> int:
    return session.scalar(select(sa.func.count()).select_from(model)) or 0


def build_course() -> Course:
    return Course(
        title="Discover",
        description="Discover Bible lessons.",
        lessons=[
            Lesson(lesson_number=1, title="Lesson 1", content_url="/lessons/discover/lesson1.htm"),
            Lesson(lesson_number=2, title="Lesson 2"),
        ],
    )


def test_lessons_are_ordered_by_number(session: Session) -> None:
    course = Course(
        title="Discover",
        lessons=[Lesson(lesson_number=2), Lesson(lesson_number=1)],
    )
    session.add(course)
    session.commit()
    session.expire_all()

    stored = session.scalar(select(Course).where(Course.id == course.id))
    assert [lesson.lesson_number for lesson in stored.lessons] == [1, 2]


def test_lesson_number_is_unique_within_a_course(session: Session) -> None:
    course = build_course()
    session.add(course)
    session.flush()

    session.add(Lesson(course_id=course.id, lesson_number=1, title="Duplicate"))
    with pytest.raises(IntegrityError):
        session.flush()


def test_same_lesson_number_allowed_in_different_courses(session: Session) -> None:
    session.add_all([build_course(), Course(title="Ugunduzi", lessons=[Lesson(lesson_number=1)])])
    session.flush()

    assert count_rows(session, Lesson) == 3


def test_deleting_course_removes_lessons_and_progress(session: Session) -> None:
    course = build_course()
    user = User(clerk_id="user_123")
    session.add_all([course, user])
    session.flush()
    course.lessons[0].progress.append(Progress(user=user, is_completed=True))
    session.flush()

    session.delete(course)
    session.flush()

    assert count_rows(session, Course) == 0
    assert count_rows(session, Lesson) == 0
    assert count_rows(session, Progress) == 0
    assert count_rows(session, User) == 1


def test_progress_is_unique_per_user_and_lesson(session: Session) -> None:
    course = build_course()
    user = User(clerk_id="user_456")
    session.add_all([course, user])
    session.flush()

    lesson_id = course.lessons[0].id
    session.add(Progress(user_id=user.id, lesson_id=lesson_id, is_completed=True))
    session.flush()
    session.add(Progress(user_id=user.id, lesson_id=lesson_id, is_completed=False))
    with pytest.raises(IntegrityError):
        session.flush()


def test_user_defaults_to_learner_role(session: Session) -> None:
    user = User(clerk_id="user_789")
    session.add(user)
    session.flush()

    assert user.role_id == 1


def test_lessons_require_an_existing_course(session: Session) -> None:
    session.add(Lesson(course_id=999, lesson_number=1))
    with pytest.raises(IntegrityError):
        session.flush()

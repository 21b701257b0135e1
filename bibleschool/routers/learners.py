"""Learner account and progress endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..db.models import User
from ..dependencies import get_db
from ..schemas import (
    CourseProgressRead,
    LearnerStatsRead,
    ProgressRead,
    UserRead,
    UserUpsert,
)
from ..services import catalog

router = APIRouter(prefix="/users", tags=["learners"])


def _require_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("", response_model=UserRead)
def upsert_user(payload: UserUpsert, db: Session = Depends(get_db)) -> UserRead:
    user = catalog.upsert_user(db, **payload.model_dump())
    return UserRead.model_validate(user)


@router.get("/{clerk_id}", response_model=UserRead)
def get_user(clerk_id: str, db: Session = Depends(get_db)) -> UserRead:
    user = catalog.get_user_by_clerk_id(db, clerk_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead.model_validate(user)


@router.get("/{user_id}/progress", response_model=List[ProgressRead])
def get_progress(user_id: int, db: Session = Depends(get_db)) -> List[ProgressRead]:
    _require_user(db, user_id)
    return [ProgressRead.model_validate(row) for row in catalog.get_progress_for_user(db, user_id)]


@router.post(
    "/{user_id}/progress/{lesson_id}",
    response_model=ProgressRead,
    status_code=status.HTTP_201_CREATED,
)
def complete_lesson(user_id: int, lesson_id: int, db: Session = Depends(get_db)) -> ProgressRead:
    _require_user(db, user_id)
    if catalog.get_lesson(db, lesson_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found")
    progress = catalog.mark_lesson_complete(db, user_id, lesson_id)
    return ProgressRead.model_validate(progress)


@router.get("/{user_id}/stats", response_model=LearnerStatsRead)
def get_stats(user_id: int, db: Session = Depends(get_db)) -> LearnerStatsRead:
    _require_user(db, user_id)
    return LearnerStatsRead.model_validate(catalog.learner_stats(db, user_id))


@router.get("/{user_id}/courses", response_model=List[CourseProgressRead])
def get_course_progress(user_id: int, db: Session = Depends(get_db)) -> List[CourseProgressRead]:
    _require_user(db, user_id)
    return [
        CourseProgressRead.model_validate(summary)
        for summary in catalog.learner_course_progress(db, user_id)
    ]

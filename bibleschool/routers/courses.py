"""Course catalog endpoints."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..dependencies import get_db
from ..schemas import CourseRead, LessonRead
from ..services import catalog

router = APIRouter(tags=["courses"])


@router.get("/courses", response_model=List[CourseRead])
def list_courses(db: Session = Depends(get_db)) -> List[CourseRead]:
    return [CourseRead.model_validate(course) for course in catalog.list_courses(db)]


@router.get("/courses/{course_id}", response_model=CourseRead)
def get_course(course_id: int, db: Session = Depends(get_db)) -> CourseRead:
    course = catalog.get_course(db, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return CourseRead.model_validate(course)


@router.get("/courses/{course_id}/lessons", response_model=List[LessonRead])
def list_course_lessons(course_id: int, db: Session = Depends(get_db)) -> List[LessonRead]:
    if catalog.get_course(db, course_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    return [LessonRead.model_validate(lesson) for lesson in catalog.list_lessons_by_course(db, course_id)]


@router.get("/lessons/{lesson_id}", response_model=LessonRead)
def get_lesson(lesson_id: int, db: Session = Depends(get_db)) -> LessonRead:
    lesson = catalog.get_lesson(db, lesson_id)
    if lesson is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found")
    return LessonRead.model_validate(lesson)

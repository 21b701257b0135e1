"""Pydantic schemas shared across the school backend."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class CourseRead(BaseModel):
    id: int
    title: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LessonRead(BaseModel):
    id: int
    course_id: int
    lesson_number: int
    title: Optional[str] = None
    content_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Learners
# ---------------------------------------------------------------------------


class UserUpsert(BaseModel):
    clerk_id: str = Field(..., min_length=1)
    full_name: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[date] = None
    church_id: Optional[int] = None
    role_id: int = Field(1, ge=1)


class UserRead(UserUpsert):
    id: int

    model_config = ConfigDict(from_attributes=True)


class ProgressRead(BaseModel):
    lesson_id: int
    is_completed: bool
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LearnerStatsRead(BaseModel):
    completed: int
    total_lessons: int
    last_activity: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CourseProgressRead(BaseModel):
    course_id: int
    title: str
    description: Optional[str] = None
    total_lessons: int
    completed_lessons: int
    progress_percent: int
    last_activity: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Public course manifest
# ---------------------------------------------------------------------------


class ManifestLessonPayload(BaseModel):
    # Invalid numbers are skipped by the synchroniser rather than rejected here.
    number: Union[int, float, str, None] = None
    title: Optional[str] = None
    url: Optional[str] = None


class ManifestCoursePayload(BaseModel):
    title: str = ""
    description: Optional[str] = None
    lessons: List[ManifestLessonPayload] = Field(default_factory=list)


class SyncRequest(BaseModel):
    courses: Optional[List[ManifestCoursePayload]] = None


class SyncReportRead(BaseModel):
    courses_created: int
    courses_matched: int
    lessons_created: int
    lessons_updated: int
    skipped_courses: int
    skipped_lessons: int
    failed_courses: List[str] = Field(default_factory=list)
    writes: int


class UrlSyncResponse(BaseModel):
    updated: int

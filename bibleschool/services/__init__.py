"""Convenient re-exports for the backend service layer."""
from __future__ import annotations

from .catalog import (
    CourseProgress,
    LearnerStats,
    get_course,
    get_lesson,
    get_progress_for_user,
    get_user_by_clerk_id,
    learner_course_progress,
    learner_stats,
    list_courses,
    list_lessons_by_course,
    mark_lesson_complete,
    upsert_user,
)
from .course_sync import (
    CourseSyncError,
    SyncReport,
    ensure_public_courses,
    sync_public_lesson_urls,
)
from .manifest import (
    PUBLIC_COURSES,
    ManifestCourse,
    ManifestLesson,
    load_manifest_file,
    parse_manifest,
    resolve_lesson_url,
)

__all__ = [
    "CourseProgress",
    "CourseSyncError",
    "LearnerStats",
    "ManifestCourse",
    "ManifestLesson",
    "PUBLIC_COURSES",
    "SyncReport",
    "ensure_public_courses",
    "get_course",
    "get_lesson",
    "get_progress_for_user",
    "get_user_by_clerk_id",
    "learner_course_progress",
    "learner_stats",
    "list_courses",
    "list_lessons_by_course",
    "load_manifest_file",
    "mark_lesson_complete",
    "parse_manifest",
    "resolve_lesson_url",
    "sync_public_lesson_urls",
    "upsert_user",
]

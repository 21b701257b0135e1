"""Declarative description of the public courses seeded into the store."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..config import LESSON_URL_PATTERNS

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ManifestLesson:
    # Left raw; validated by ``coerce_lesson_number`` when the manifest is applied.
    number: Any
    title: str | None = None
    url: str | None = None


@dataclass(slots=True)
class ManifestCourse:
    title: str
    description: str | None = None
    lessons: list[ManifestLesson] = field(default_factory=list)


def coerce_lesson_number(value: Any) -> int | None:
    """Return ``value`` as a positive integer lesson number, or ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            try:
                return coerce_lesson_number(float(value))
            except ValueError:
                return None
    else:
        return None
    return number if number > 0 else None


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def resolve_lesson_url(
    course_title: str,
    number: int,
    explicit_url: str | None = None,
    patterns: Mapping[str, str] | None = None,
) -> str | None:
    """Pick the content URL for a lesson.

    An explicit URL from the manifest always wins. Otherwise the course title is
    looked up (case-insensitively) in the pattern table; unknown series have no
    derivable URL.
    """
    explicit = _clean_text(explicit_url)
    if explicit:
        return explicit
    table = LESSON_URL_PATTERNS if patterns is None else patterns
    template = table.get((course_title or "").strip().lower())
    if template is None:
        return None
    return template.format(number=number)


def _lesson_from_entry(entry: Any) -> ManifestLesson | None:
    if isinstance(entry, ManifestLesson):
        return entry
    if isinstance(entry, Mapping):
        return ManifestLesson(
            number=entry.get("number"),
            title=_clean_text(entry.get("title")),
            url=_clean_text(entry.get("url")),
        )
    return None


def _course_from_entry(entry: Any) -> ManifestCourse | None:
    if isinstance(entry, ManifestCourse):
        return entry
    if not isinstance(entry, Mapping):
        return None
    lessons: list[ManifestLesson] = []
    raw_lessons = entry.get("lessons") or []
    if isinstance(raw_lessons, (list, tuple)):
        for raw_lesson in raw_lessons:
            lesson = _lesson_from_entry(raw_lesson)
            if lesson is not None:
                lessons.append(lesson)
    return ManifestCourse(
        title=str(entry.get("title") or ""),
        description=_clean_text(entry.get("description")),
        lessons=lessons,
    )


def parse_manifest(raw: Any) -> list[ManifestCourse]:
    """Normalise a manifest given as dataclasses or plain mappings.

    Anything that is not a list yields an empty manifest. Entries that are
    neither mappings nor ``ManifestCourse`` instances are dropped.
    """
    if not isinstance(raw, (list, tuple)):
        return []
    courses: list[ManifestCourse] = []
    for entry in raw:
        course = _course_from_entry(entry)
        if course is None:
            LOGGER.debug("Ignoring manifest entry of type %s", type(entry).__name__)
            continue
        courses.append(course)
    return courses


def load_manifest_file(path: Path) -> list[ManifestCourse]:
    """Read a JSON manifest file."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return parse_manifest(data)


def numbered_lessons(count: int) -> list[ManifestLesson]:
    return [ManifestLesson(number=number, title=f"Lesson {number}") for number in range(1, count + 1)]


# Lesson URLs are derived from the course title, see ``LESSON_URL_PATTERNS``.
PUBLIC_COURSES: list[ManifestCourse] = [
    ManifestCourse(
        title="Discover",
        description="Discover Bible lessons.",
        lessons=numbered_lessons(26),
    ),
    ManifestCourse(
        title="Ugunduzi",
        description="Ugunduzi Bible lessons (Swahili).",
        lessons=numbered_lessons(10),
    ),
]


__all__ = [
    "ManifestCourse",
    "ManifestLesson",
    "PUBLIC_COURSES",
    "coerce_lesson_number",
    "load_manifest_file",
    "numbered_lessons",
    "parse_manifest",
    "resolve_lesson_url",
]

"""Application configuration settings."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Final, Mapping

BASE_DIR: Final[Path] = Path(__file__).resolve().parent.parent
DATA_DIR: Final[Path] = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

DATABASE_URL: Final[str] = os.getenv(
    "DATABASE_URL", f"sqlite:///{(DATA_DIR / 'bibleschool.db').as_posix()}"
)
SQLALCHEMY_ECHO: Final[bool] = os.getenv("SQLALCHEMY_ECHO") == "1"

# Static lesson pages served by the front end.
LESSONS_ROOT: Final[Path] = Path(os.getenv("LESSONS_ROOT", str(BASE_DIR / "public" / "lessons")))
LESSON_STYLESHEET_HREF: Final[str] = os.getenv("LESSON_STYLESHEET_HREF", "/lessons/style.css")

SEED_PUBLIC_COURSES_ON_STARTUP: Final[bool] = os.getenv(
    "SEED_PUBLIC_COURSES_ON_STARTUP", "1"
).lower() in ("1", "true", "yes")

# Lowercase course title -> lesson URL template with a ``{number}`` field.
DEFAULT_LESSON_URL_PATTERNS: Final[dict[str, str]] = {
    "discover": "/lessons/discover/lesson{number}.htm",
    "ugunduzi": "/lessons/ugunduzi/lesson{number}.htm",
}


def validate_lesson_url_patterns(patterns: Mapping[str, str]) -> None:
    """Check that every template formats with a ``number`` field only."""
    for title, template in patterns.items():
        try:
            template.format(number=1)
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"Invalid lesson URL template for {title!r}: {template!r}") from exc


def _load_lesson_url_patterns() -> dict[str, str]:
    raw = os.getenv("LESSON_URL_PATTERNS")
    if not raw:
        return dict(DEFAULT_LESSON_URL_PATTERNS)
    overrides = json.loads(raw)
    if not isinstance(overrides, dict):
        raise ValueError("LESSON_URL_PATTERNS must be a JSON object")
    patterns = dict(DEFAULT_LESSON_URL_PATTERNS)
    patterns.update({str(key).lower(): str(value) for key, value in overrides.items()})
    validate_lesson_url_patterns(patterns)
    return patterns


LESSON_URL_PATTERNS: Final[dict[str, str]] = _load_lesson_url_patterns()

DATA_DIR.mkdir(parents=True, exist_ok=True)

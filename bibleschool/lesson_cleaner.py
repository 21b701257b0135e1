"""Clean Word-exported lesson pages before they are published."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, Tuple

import bleach

from .config import LESSON_STYLESHEET_HREF

LOGGER = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: Tuple[str, ...] = (".htm", ".html")

ALLOWED_TAGS = frozenset(bleach.ALLOWED_TAGS) | {"img", "h1", "h2", "h3", "blockquote", "p", "br"}
ALLOWED_ATTRIBUTES = {
    "a": ["href"],
    "img": ["src", "alt"],
}
RESPONSIVE_IMAGE_STYLE = "max-width:100%;height:auto;display:block;margin:1rem auto;border-radius:8px;"

_BODY_RE = re.compile(r"<body[^>]*>(?P<body>.*)</body>", re.IGNORECASE | re.DOTALL)
_TITLE_RE = re.compile(r"<title[^>]*>(?P<title>.*?)</title>", re.IGNORECASE | re.DOTALL)
_DROP_BLOCKS_RE = re.compile(r"<(script|style|xml)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_IMG_RE = re.compile(r"<img\b", re.IGNORECASE)


def _extract(html: str) -> tuple[str, str | None]:
    title_match = _TITLE_RE.search(html)
    title = bleach.clean(title_match.group("title"), tags=set(), strip=True).strip() if title_match else None
    body_match = _BODY_RE.search(html)
    body = body_match.group("body") if body_match else html
    return _DROP_BLOCKS_RE.sub("", body), title or None


def clean_lesson_html(html: str, stylesheet_href: str = LESSON_STYLESHEET_HREF) -> str:
    """Return a sanitised standalone page for a lesson.

    Inline ``style``/``class`` attributes and any markup outside the allow
    list are stripped, images get a responsive inline style and the page links
    the shared lesson stylesheet.
    """
    body, title = _extract(html)
    cleaned = bleach.clean(
        body,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True,
        strip_comments=True,
    )
    cleaned = _IMG_RE.sub(f'<img style="{RESPONSIVE_IMAGE_STYLE}"', cleaned)

    head = ['<meta charset="utf-8">']
    if title:
        head.append(f"<title>{title}</title>")
    head.append(f'<link rel="stylesheet" href="{stylesheet_href}">')
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        + "\n".join(head)
        + "\n</head>\n<body>\n"
        + cleaned.strip()
        + "\n</body>\n</html>\n"
    )


def iter_lesson_files(directory: Path) -> Iterator[Path]:
    """Yield lesson pages in ``directory`` in name order."""
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
            yield path


def clean_lessons_dir(
    directory: Path,
    stylesheet_href: str = LESSON_STYLESHEET_HREF,
) -> list[Path]:
    """Clean every lesson page in ``directory`` in place."""
    if not directory.is_dir():
        raise FileNotFoundError(f"Lesson directory {directory} does not exist")

    cleaned: list[Path] = []
    for path in iter_lesson_files(directory):
        html = path.read_text(encoding="utf-8", errors="ignore")
        path.write_text(clean_lesson_html(html, stylesheet_href), encoding="utf-8")
        LOGGER.info("Cleaned %s", path.name)
        cleaned.append(path)
    return cleaned


def clean_lesson_dirs(directories: Iterable[Path], stylesheet_href: str = LESSON_STYLESHEET_HREF) -> list[Path]:
    cleaned: list[Path] = []
    for directory in directories:
        cleaned.extend(clean_lessons_dir(directory, stylesheet_href))
    return cleaned


__all__ = [
    "ALLOWED_ATTRIBUTES",
    "ALLOWED_TAGS",
    "clean_lesson_dirs",
    "clean_lesson_html",
    "clean_lessons_dir",
    "iter_lesson_files",
]

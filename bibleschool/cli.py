"""Command line entry point for database and lesson maintenance."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError

from .config import LESSON_STYLESHEET_HREF, LESSONS_ROOT
from .db import get_session, init_db
from .lesson_cleaner import clean_lesson_dirs
from .services import PUBLIC_COURSES, CourseSyncError, ensure_public_courses, load_manifest_file, sync_public_lesson_urls

LOGGER = logging.getLogger(__name__)


def _manifest(path: Path | None):
    if path is None:
        return PUBLIC_COURSES
    return load_manifest_file(path)


def _cmd_init_db(args: argparse.Namespace) -> int:
    init_db()
    LOGGER.info("Database tables are ready")
    return 0


def _cmd_seed(args: argparse.Namespace) -> int:
    init_db()
    with get_session() as session:
        report = ensure_public_courses(session, _manifest(args.manifest))
    print(json.dumps(report.to_dict(), indent=2))
    return 0


def _cmd_sync_urls(args: argparse.Namespace) -> int:
    with get_session() as session:
        updated = sync_public_lesson_urls(session, _manifest(args.manifest))
    print(f"Updated {updated} lesson URLs")
    return 0


def _cmd_clean_lessons(args: argparse.Namespace) -> int:
    directories = args.directories or [LESSONS_ROOT / "discover"]
    cleaned = clean_lesson_dirs(directories, args.stylesheet)
    print(f"Cleaned {len(cleaned)} lesson pages")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bibleschool", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="create database tables")
    init_parser.set_defaults(handler=_cmd_init_db)

    seed_parser = subparsers.add_parser("seed", help="create missing public courses and lessons")
    seed_parser.add_argument("--manifest", type=Path, help="JSON manifest (defaults to the public courses)")
    seed_parser.set_defaults(handler=_cmd_seed)

    urls_parser = subparsers.add_parser("sync-urls", help="fill lesson URLs that are still empty")
    urls_parser.add_argument("--manifest", type=Path, help="JSON manifest (defaults to the public courses)")
    urls_parser.set_defaults(handler=_cmd_sync_urls)

    clean_parser = subparsers.add_parser("clean-lessons", help="sanitise exported lesson pages in place")
    clean_parser.add_argument("directories", nargs="*", type=Path)
    clean_parser.add_argument("--stylesheet", default=LESSON_STYLESHEET_HREF)
    clean_parser.set_defaults(handler=_cmd_clean_lessons)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        return args.handler(args)
    except SQLAlchemyError as exc:
        LOGGER.error("Database error: %s", exc)
        return 1
    except CourseSyncError as exc:
        LOGGER.error("%s", exc)
        return 1
    except FileNotFoundError as exc:
        LOGGER.error("%s", exc)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

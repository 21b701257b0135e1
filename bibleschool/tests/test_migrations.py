from __future__ import annotations

import importlib.util
from pathlib import Path
from types import ModuleType

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations

import bibleschool.db

VERSIONS_DIR = Path(bibleschool.db.__file__).resolve().parent / "migrations" / "versions"


def load_revision(filename: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(filename.removesuffix(".py"), VERSIONS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_initial_schema_upgrade_and_downgrade() -> None:
    revision = load_revision("20251019_000001_initial_schema.py")
    engine = sa.create_engine("sqlite:///:memory:", future=True)

    with engine.begin() as conn:
        context = MigrationContext.configure(conn)
        with Operations.context(context):
            revision.upgrade()

        inspector = sa.inspect(conn)
        assert set(inspector.get_table_names()) == {"courses", "lessons", "users", "progress"}
        unique_columns = [set(c["column_names"]) for c in inspector.get_unique_constraints("lessons")]
        assert {"course_id", "lesson_number"} in unique_columns

        with Operations.context(context):
            revision.downgrade()

        assert sa.inspect(conn).get_table_names() == []

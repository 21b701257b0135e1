"""Course model."""
from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bibleschool.db import Base


class Course(Base):
    """A study series such as *Discover*, made of numbered lessons."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Matched case-insensitively by the seeder; not unique in the store.
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    lessons: Mapped[list["Lesson"]] = relationship(
        "Lesson",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Lesson.lesson_number",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"Course(id={self.id!r}, title={self.title!r})"

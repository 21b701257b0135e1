"""Lesson model."""
from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bibleschool.db import Base


class Lesson(Base):
    """Represents a numbered lesson within a course."""

    __tablename__ = "lessons"
    __table_args__ = (
        UniqueConstraint("course_id", "lesson_number", name="uq_lessons_course_lesson_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    lesson_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    course: Mapped["Course"] = relationship("Course", back_populates="lessons")
    progress: Mapped[list["Progress"]] = relationship(
        "Progress",
        back_populates="lesson",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"Lesson(id={self.id!r}, course_id={self.course_id!r}, number={self.lesson_number!r})"

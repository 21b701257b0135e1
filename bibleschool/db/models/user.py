"""Learner account model."""
from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bibleschool.db import Base

ROLE_LEARNER = 1


class User(Base):
    """A school member identified by their external auth-provider id."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    clerk_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    church_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    role_id: Mapped[int] = mapped_column(Integer, nullable=False, default=ROLE_LEARNER)

    progress: Mapped[list["Progress"]] = relationship(
        "Progress",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:  # pragma: no cover - repr not critical
        return f"User(id={self.id!r}, clerk_id={self.clerk_id!r})"

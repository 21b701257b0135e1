"""SQLAlchemy model package."""
from bibleschool.db.models.course import Course
from bibleschool.db.models.lesson import Lesson
from bibleschool.db.models.progress import Progress
from bibleschool.db.models.user import User

__all__ = [
    "Course",
    "Lesson",
    "Progress",
    "User",
]

from ..extensions import db
from .people import Teacher
from .course import Course, StudyMaterial
from .task import Task
from .user import User

__all__ = [
    "Teacher", "Course", "StudyMaterial", "Task", "User",
]

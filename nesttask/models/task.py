from datetime import datetime
from .course import new_id
from ..extensions import db

TASK_CATEGORIES = (
    "presentation", "assignment", "quiz", "lab-report", "lab-final",
    "lab-performance", "task", "documents", "blc", "groups", "project",
    "midterm", "final-exam", "others",
)
TASK_STATUSES = ("my-tasks", "in-progress", "completed")

class Task(db.Model):
    __tablename__ = "tasks"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(32), nullable=False, default="task")
    due_date = db.Column(db.Date, nullable=False)
    description = db.Column(db.Text, default="")
    status = db.Column(db.String(16), nullable=False, default="my-tasks")
    is_admin_task = db.Column(db.Boolean, nullable=False, default=False)
    section_id = db.Column(db.String(64))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    created_by = db.Column(db.String(36))

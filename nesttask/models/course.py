from datetime import datetime
import uuid
from ..extensions import db

def new_id():
    return str(uuid.uuid4())

class Course(db.Model):
    __tablename__ = "courses"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(128), nullable=False)
    code = db.Column(db.String(32), unique=True, nullable=False)
    teacher = db.Column(db.String(128))                      # display name, denormalized
    class_time = db.Column(db.Text, nullable=False, default="")  # "Mon at 10:00 in R1, ..."
    telegram_group = db.Column(db.String(255))
    blc_link = db.Column(db.String(255))
    blc_enroll_key = db.Column(db.String(64))
    credit = db.Column(db.Float, nullable=False, default=0)
    section = db.Column(db.String(64))
    teacher_id = db.Column(db.String(36), db.ForeignKey("teachers.id", ondelete="SET NULL"))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    created_by = db.Column(db.String(36))
    __table_args__ = (
        db.CheckConstraint("credit >= 0", name="ck_course_credit_non_negative"),
    )

    materials = db.relationship("StudyMaterial", back_populates="course",
                                cascade="all, delete-orphan")

class StudyMaterial(db.Model):
    __tablename__ = "study_materials"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    course_id = db.Column(db.String(36), db.ForeignKey("courses.id", ondelete="CASCADE"),
                          nullable=False)
    category = db.Column(db.String(64))
    file_urls = db.Column(db.JSON, nullable=False, default=list)
    original_file_names = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    created_by = db.Column(db.String(36))

    course = db.relationship("Course", back_populates="materials")

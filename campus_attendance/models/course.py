"""Course catalog model."""
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class Course(BaseModel):
    """Course offered by a department, referenced by its code."""

    __tablename__ = 'courses'

    course_code = db.Column(db.String(20), unique=True, nullable=False, index=True)
    course_name = db.Column(db.String(255), nullable=False)
    credits = db.Column(db.Integer, nullable=True)
    dept_id = db.Column(db.Integer, db.ForeignKey('departments.id'), nullable=True)

    def __repr__(self) -> str:
        return f'<Course {self.course_code}>'

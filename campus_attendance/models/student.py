"""Student model."""
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class Student(BaseModel):
    """Enrolled student belonging to one section."""

    __tablename__ = 'students'

    roll_number = db.Column(db.String(50), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    section_id = db.Column(db.Integer, db.ForeignKey('sections.id'), nullable=False, index=True)

    def to_dict(self, exclude: list = None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['section_name'] = self.section.section_name if self.section else None
        return data

    def __repr__(self) -> str:
        return f'<Student {self.roll_number}>'

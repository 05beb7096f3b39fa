"""Department, batch and section models."""
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class Department(BaseModel):
    """Academic department."""

    __tablename__ = 'departments'

    dept_name = db.Column(db.String(255), nullable=False)
    dept_code = db.Column(db.String(20), unique=True, nullable=False, index=True)

    batches = db.relationship('Batch', backref='department', lazy='dynamic')

class Batch(BaseModel):
    """Admission batch of a department, e.g. 2022-2026."""

    __tablename__ = 'batches'

    dept_id = db.Column(db.Integer, db.ForeignKey('departments.id'), nullable=False)
    start_year = db.Column(db.Integer, nullable=False)
    end_year = db.Column(db.Integer, nullable=False)
    batch_name = db.Column(db.String(100), nullable=False)

    sections = db.relationship('Section', backref='batch', lazy='dynamic')

    def to_dict(self, exclude: list = None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['dept_code'] = self.department.dept_code if self.department else None
        return data

class Section(BaseModel):
    """Section of a batch; the unit timetables and students belong to."""

    __tablename__ = 'sections'

    batch_id = db.Column(db.Integer, db.ForeignKey('batches.id'), nullable=False)
    section_name = db.Column(db.String(20), nullable=False)

    students = db.relationship('Student', backref='section', lazy='dynamic')

    @property
    def full_title(self) -> str:
        """Human readable class title, e.g. 'CSE 2022-26 (A)'."""
        batch = self.batch
        return f"{batch.department.dept_code} {batch.batch_name} ({self.section_name})"

    def to_dict(self, exclude: list = None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['batch_name'] = self.batch.batch_name if self.batch else None
        return data

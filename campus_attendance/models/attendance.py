"""Per-student attendance records."""
import enum
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class AttendanceStatus(enum.Enum):
    """Canonical attendance statuses."""
    PRESENT = 'present'
    ABSENT = 'absent'

    @classmethod
    def normalize(cls, value) -> 'AttendanceStatus':
        """Map free-form status text ('Present', ' ABSENT ') to a member."""
        if not isinstance(value, str):
            raise ValueError(f"Invalid attendance status: {value!r}")
        return cls(value.strip().lower())

class AttendanceRecord(BaseModel):
    """Attendance record model."""

    __tablename__ = 'attendance_records'
    __table_args__ = (
        db.UniqueConstraint('session_id', 'student_id', name='uq_record_session_student'),
    )

    session_id = db.Column(db.Integer, db.ForeignKey('attendance_sessions.id'), nullable=False, index=True)
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    status = db.Column(db.String(10), nullable=False)

    student = db.relationship('Student', backref=db.backref('attendance_records', lazy='dynamic'))

    def __repr__(self):
        return f'<AttendanceRecord {self.session_id}-{self.student_id} {self.status}>'

"""Attendance session: one recorded occurrence of a timetable slot."""
import enum
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class SessionCategory(enum.Enum):
    """What actually happened in a scheduled slot."""
    NORMAL = 'normal'
    SWAP = 'swap'
    FREE = 'free'

class AttendanceSession(BaseModel):
    """Session recorded for a timetable slot on a calendar date."""

    __tablename__ = 'attendance_sessions'
    __table_args__ = (
        db.UniqueConstraint('timetable_id', 'session_date', name='uq_session_slot_date'),
    )

    timetable_id = db.Column(db.Integer, db.ForeignKey('timetable.id'), nullable=False, index=True)
    session_date = db.Column(db.Date, nullable=False, index=True)
    marked_by_user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    session_category = db.Column(db.Enum(SessionCategory), nullable=False, default=SessionCategory.NORMAL)
    actual_course_code = db.Column(db.String(20), db.ForeignKey('courses.course_code'), nullable=True)

    # Verification
    is_verified_by_faculty = db.Column(db.Boolean, default=False, nullable=False)
    verified_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    marked_by = db.relationship('User')
    actual_course = db.relationship('Course')
    records = db.relationship('AttendanceRecord', backref='session', lazy='dynamic')

    def to_dict(self, exclude: list = None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['marked_by'] = self.marked_by.email if self.marked_by else None
        return data

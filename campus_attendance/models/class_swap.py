"""Audit log of deviations from the timetable."""
from campus_attendance import db
from campus_attendance.models.base import BaseModel

SWAP_STATUS_APPROVED = 'approved'

class ClassSwap(BaseModel):
    """Swap entry written when a session is recorded as swap or free.

    Entries are inferred after the fact, so they are always approved.
    """

    __tablename__ = 'class_swaps'

    source_timetable_id = db.Column(db.Integer, db.ForeignKey('timetable.id'), nullable=False, index=True)
    requesting_faculty_id = db.Column(db.Integer, db.ForeignKey('faculty_profiles.id'), nullable=False)
    target_faculty_id = db.Column(db.Integer, db.ForeignKey('faculty_profiles.id'), nullable=True)
    requested_date = db.Column(db.Date, nullable=False)
    reason = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=SWAP_STATUS_APPROVED)

    source_timetable = db.relationship('TimetableSlot')
    requesting_faculty = db.relationship('FacultyProfile', foreign_keys=[requesting_faculty_id])
    target_faculty = db.relationship('FacultyProfile', foreign_keys=[target_faculty_id])

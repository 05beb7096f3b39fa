"""Timetable model for weekly class schedules."""
import enum
from datetime import date, timedelta
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class WeekDay(enum.Enum):
    """Days of the week, stored as their short names."""
    MONDAY = 'Mon'
    TUESDAY = 'Tue'
    WEDNESDAY = 'Wed'
    THURSDAY = 'Thu'
    FRIDAY = 'Fri'
    SATURDAY = 'Sat'
    SUNDAY = 'Sun'

    @classmethod
    def parse(cls, value: str) -> 'WeekDay':
        """Accept 'Mon', 'mon', 'MONDAY' or 'monday'."""
        text = (value or '').strip()
        for day in cls:
            if text.lower() in (day.value.lower(), day.name.lower()):
                return day
        raise ValueError(f"Invalid day: {value}")

    @classmethod
    def from_date(cls, target: date) -> 'WeekDay':
        return list(cls)[target.weekday()]

# Offsets from the first day of a week grid. Weekend days are not mapped
# and fall back to 0.
WEEK_GRID_OFFSETS = {
    WeekDay.MONDAY: 0,
    WeekDay.TUESDAY: 1,
    WeekDay.WEDNESDAY: 2,
    WeekDay.THURSDAY: 3,
    WeekDay.FRIDAY: 4,
}

DAY_ORDER = {day: index for index, day in enumerate(WeekDay)}

class TimetableSlot(BaseModel):
    """One cell of a section's weekly timetable."""

    __tablename__ = 'timetable'
    __table_args__ = (
        db.UniqueConstraint('section_id', 'semester', 'day', 'slot_number',
                            name='uq_timetable_cell'),
    )

    section_id = db.Column(db.Integer, db.ForeignKey('sections.id'), nullable=False, index=True)
    semester = db.Column(db.Integer, nullable=False)
    day = db.Column(db.Enum(WeekDay), nullable=False)
    slot_number = db.Column(db.Integer, nullable=False)
    course_code = db.Column(db.String(20), db.ForeignKey('courses.course_code'), nullable=False)
    faculty_profile_id = db.Column(db.Integer, db.ForeignKey('faculty_profiles.id'), nullable=False)
    room_info = db.Column(db.String(100), nullable=True)

    # Relationships
    section = db.relationship('Section', backref=db.backref('timetable_slots', lazy='dynamic'))
    course = db.relationship('Course')
    faculty = db.relationship('FacultyProfile', backref=db.backref('timetable_slots', lazy='dynamic'))
    sessions = db.relationship('AttendanceSession', backref='timetable_slot', lazy='dynamic')

    def date_in_week(self, week_start: date) -> date:
        """Concrete date of this slot in the week starting at ``week_start``."""
        return week_start + timedelta(days=WEEK_GRID_OFFSETS.get(self.day, 0))

    def to_dict(self, exclude: list = None) -> dict:
        """Convert to dictionary."""
        data = super().to_dict(exclude=exclude)
        data['course_name'] = self.course.course_name if self.course else None
        data['faculty_name'] = self.faculty.faculty_name if self.faculty else None
        return data

    def __repr__(self) -> str:
        return f'<TimetableSlot {self.section_id}/{self.semester} {self.day.value}#{self.slot_number}>'

"""Models package with all models."""
from .base import BaseModel
from .user import User, UserRole
from .department import Department, Batch, Section
from .course import Course
from .faculty import FacultyProfile
from .student import Student
from .timetable import TimetableSlot, WeekDay, WEEK_GRID_OFFSETS
from .attendance_session import AttendanceSession, SessionCategory
from .attendance import AttendanceRecord, AttendanceStatus
from .class_swap import ClassSwap, SWAP_STATUS_APPROVED

__all__ = [
    'BaseModel', 'User', 'UserRole',
    'Department', 'Batch', 'Section', 'Course',
    'FacultyProfile', 'Student',
    'TimetableSlot', 'WeekDay', 'WEEK_GRID_OFFSETS',
    'AttendanceSession', 'SessionCategory',
    'AttendanceRecord', 'AttendanceStatus',
    'ClassSwap', 'SWAP_STATUS_APPROVED'
]

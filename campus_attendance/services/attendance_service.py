"""Attendance session recording and class-swap inference."""
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple
from flask import current_app
from sqlalchemy.exc import IntegrityError
from campus_attendance import db
from campus_attendance.models.attendance import AttendanceRecord, AttendanceStatus
from campus_attendance.models.attendance_session import AttendanceSession, SessionCategory
from campus_attendance.models.course import Course
from campus_attendance.models.class_swap import ClassSwap, SWAP_STATUS_APPROVED
from campus_attendance.models.faculty import FacultyProfile
from campus_attendance.models.student import Student
from campus_attendance.models.timetable import TimetableSlot
from campus_attendance.models.user import UserRole
from campus_attendance.utils.exceptions import (
    ConflictError, ForbiddenError, NotFoundError, ValidationError
)
from campus_attendance.utils.helpers import parse_date, parse_int

FREE_REASON = 'Class declared Free during attendance marking'

@dataclass
class Recorder:
    """The authenticated user recording a session."""
    user_id: int
    role: str
    student_id: Optional[int] = None

@dataclass
class RecordedSession:
    """Outcome of a recording call."""
    session_id: int
    category: SessionCategory

    def to_dict(self) -> Dict:
        return {'session_id': self.session_id, 'category': self.category.value}

def classify_session(scheduled_course_code: str, selected_course_code: Optional[str],
                     is_free: bool) -> Tuple[SessionCategory, Optional[str]]:
    """Return the session category and the course actually taught."""
    if is_free:
        return SessionCategory.FREE, None
    if selected_course_code != scheduled_course_code:
        return SessionCategory.SWAP, selected_course_code
    return SessionCategory.NORMAL, selected_course_code

def resolve_swap_target(section_id: int, course_code: str, recorder: Recorder) -> Optional[int]:
    """Find the faculty profile that actually taught ``course_code``.

    First any slot teaching the course to the same section, then the
    recording user's own profile when that user is faculty.
    """
    slot = TimetableSlot.query.filter_by(
        section_id=section_id,
        course_code=course_code
    ).order_by(TimetableSlot.id).first()
    if slot:
        return slot.faculty_profile_id

    if recorder.role == UserRole.FACULTY.value:
        profile = FacultyProfile.query.filter_by(user_id=recorder.user_id).first()
        if profile:
            return profile.id

    return None

def swap_reason(category: SessionCategory, scheduled_course_code: str,
                selected_course_code: Optional[str]) -> str:
    if category == SessionCategory.FREE:
        return FREE_REASON
    return f"Course changed from {scheduled_course_code} to {selected_course_code}"

def normalize_records(records) -> List[Tuple[int, AttendanceStatus]]:
    """Validate the submitted roll call before anything is written."""
    if records is None:
        return []
    if not isinstance(records, list):
        raise ValidationError("records must be a list")

    normalized = []
    seen = set()
    for index, entry in enumerate(records):
        if not isinstance(entry, dict):
            raise ValidationError(f"records[{index}] must be an object")
        student_id = parse_int(entry.get('id'), f"records[{index}].id")
        try:
            status = AttendanceStatus.normalize(entry.get('status'))
        except ValueError:
            raise ValidationError(
                f"records[{index}].status must be 'present' or 'absent'"
            )
        if student_id in seen:
            raise ValidationError(f"Duplicate record for student {student_id}")
        seen.add(student_id)
        normalized.append((student_id, status))

    return normalized

class AttendanceService:
    """Records what actually happened in a timetable slot."""

    @staticmethod
    def record_attendance(data: Dict, recorder: Recorder) -> RecordedSession:
        """Create a session, its records and, for deviations, a swap entry."""
        if not isinstance(data, dict):
            raise ValidationError("Request body must be JSON")

        # Validate everything before touching the database
        timetable_id = parse_int(data.get('timetable_id'), 'timetable_id')
        session_date = parse_date(data.get('date'))
        is_free = data.get('is_free', False)
        if not isinstance(is_free, bool):
            raise ValidationError("is_free must be a boolean")
        selected_course_code = data.get('selected_course_code')
        if not is_free and not selected_course_code:
            raise ValidationError("selected_course_code is required unless the class is free")
        records = [] if is_free else normalize_records(data.get('records'))

        slot = db.session.get(TimetableSlot, timetable_id)
        if not slot:
            raise NotFoundError("Timetable slot not found")

        AttendanceService._check_recorder_scope(slot, recorder)

        category, actual_course_code = classify_session(
            slot.course_code, selected_course_code, is_free
        )

        if category == SessionCategory.SWAP and not Course.query.filter_by(
                course_code=selected_course_code).first():
            raise NotFoundError(f"Course {selected_course_code} not found")

        if category != SessionCategory.FREE and records:
            student_ids = [student_id for student_id, _ in records]
            found = {
                row.id for row in
                Student.query.with_entities(Student.id).filter(Student.id.in_(student_ids))
            }
            missing = sorted(set(student_ids) - found)
            if missing:
                raise NotFoundError(f"Students not found: {', '.join(map(str, missing))}")

        existing = AttendanceSession.query.filter_by(
            timetable_id=slot.id,
            session_date=session_date
        ).first()
        if existing:
            raise ConflictError(
                f"Attendance already recorded for this slot on {session_date.isoformat()}"
            )

        try:
            session = AttendanceSession(
                timetable_id=slot.id,
                session_date=session_date,
                marked_by_user_id=recorder.user_id,
                session_category=category,
                actual_course_code=actual_course_code
            )
            db.session.add(session)
            db.session.flush()

            if category != SessionCategory.FREE:
                for student_id, status in records:
                    db.session.add(AttendanceRecord(
                        session_id=session.id,
                        student_id=student_id,
                        status=status.value
                    ))

            if category in (SessionCategory.SWAP, SessionCategory.FREE):
                AttendanceService._log_swap(slot, session_date, category,
                                            selected_course_code, recorder)

            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError(
                f"Attendance already recorded for this slot on {session_date.isoformat()}"
            )
        except Exception:
            db.session.rollback()
            current_app.logger.exception(
                "Recording attendance failed for timetable %s on %s", timetable_id, session_date
            )
            raise

        current_app.logger.info(
            "Session %s recorded for timetable %s on %s as %s by user %s",
            session.id, timetable_id, session_date, category.value, recorder.user_id
        )
        return RecordedSession(session_id=session.id, category=category)

    @staticmethod
    def _check_recorder_scope(slot: TimetableSlot, recorder: Recorder) -> None:
        """Class representatives may only record for their own section."""
        if recorder.role != UserRole.CR.value:
            return
        student = db.session.get(Student, recorder.student_id) if recorder.student_id else None
        if not student or student.section_id != slot.section_id:
            raise ForbiddenError("You can only record attendance for your own section")

    @staticmethod
    def _log_swap(slot: TimetableSlot, session_date: date, category: SessionCategory,
                  selected_course_code: Optional[str], recorder: Recorder) -> ClassSwap:
        target_faculty_id = None
        if category == SessionCategory.SWAP:
            target_faculty_id = resolve_swap_target(slot.section_id, selected_course_code, recorder)

        swap = ClassSwap(
            source_timetable_id=slot.id,
            requesting_faculty_id=slot.faculty_profile_id,
            target_faculty_id=target_faculty_id,
            requested_date=session_date,
            reason=swap_reason(category, slot.course_code, selected_course_code),
            status=SWAP_STATUS_APPROVED
        )
        db.session.add(swap)
        current_app.logger.info(
            "Swap logged for timetable %s on %s: %s (target faculty %s)",
            slot.id, session_date, swap.reason, target_faculty_id
        )
        return swap

    @staticmethod
    def sessions_for_slot(timetable_id: int) -> List[Dict]:
        """Sessions recorded for a slot, newest first."""
        sessions = AttendanceSession.query.filter_by(
            timetable_id=timetable_id
        ).order_by(AttendanceSession.session_date.desc()).all()

        return [{
            'id': session.id,
            'session_date': session.session_date.isoformat(),
            'session_category': session.session_category.value,
            'actual_course_code': session.actual_course_code,
            'is_verified_by_faculty': session.is_verified_by_faculty,
            'marked_by': session.marked_by.email if session.marked_by else None
        } for session in sessions]

    @staticmethod
    def records_for_session(session_id: int) -> List[Dict]:
        """Student records of a session ordered by roll number."""
        rows = db.session.query(
            Student.roll_number, Student.full_name, AttendanceRecord.status
        ).join(
            AttendanceRecord, AttendanceRecord.student_id == Student.id
        ).filter(
            AttendanceRecord.session_id == session_id
        ).order_by(Student.roll_number.asc()).all()

        return [{
            'roll_number': row.roll_number,
            'full_name': row.full_name,
            'status': row.status
        } for row in rows]

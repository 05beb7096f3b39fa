"""Attendance percentages, shortage lists and schedule grids."""
from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional
from sqlalchemy import case, func
from campus_attendance import db
from campus_attendance.models.attendance import AttendanceRecord, AttendanceStatus
from campus_attendance.models.attendance_session import AttendanceSession, SessionCategory
from campus_attendance.models.course import Course
from campus_attendance.models.student import Student
from campus_attendance.models.timetable import TimetableSlot, WeekDay, DAY_ORDER

ALL_COURSES = 'ALL'

def attendance_percentage(attended: int, total: int) -> Optional[float]:
    """Percentage rounded half-up to one decimal; None when nothing was held."""
    if not total:
        return None
    value = Decimal(attended * 100) / Decimal(total)
    return float(value.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))

class ReportService:
    """Read-only aggregation over sessions and records."""

    @staticmethod
    def attendance_report(section_id: int, course_code: Optional[str] = None,
                          threshold: Optional[float] = None) -> List[Dict]:
        """Per student, per course attendance for a section.

        Free sessions count neither as held nor as attended. With a
        threshold only rows strictly below it are returned.
        """
        filter_course = course_code and course_code != ALL_COURSES

        totals_query = db.session.query(
            AttendanceSession.actual_course_code,
            func.count(AttendanceSession.id)
        ).join(
            TimetableSlot, AttendanceSession.timetable_id == TimetableSlot.id
        ).filter(
            TimetableSlot.section_id == section_id,
            AttendanceSession.session_category != SessionCategory.FREE
        )
        if filter_course:
            totals_query = totals_query.filter(AttendanceSession.actual_course_code == course_code)
        totals = dict(totals_query.group_by(AttendanceSession.actual_course_code).all())

        present = case(
            (func.lower(AttendanceRecord.status) == AttendanceStatus.PRESENT.value, 1),
            else_=0
        )
        attended_query = db.session.query(
            Student.roll_number,
            Student.full_name,
            AttendanceSession.actual_course_code.label('subject'),
            func.sum(present).label('attended')
        ).select_from(Student).join(
            AttendanceRecord, AttendanceRecord.student_id == Student.id
        ).join(
            AttendanceSession, AttendanceRecord.session_id == AttendanceSession.id
        ).join(
            TimetableSlot, AttendanceSession.timetable_id == TimetableSlot.id
        ).filter(
            Student.section_id == section_id,
            TimetableSlot.section_id == section_id,
            AttendanceSession.session_category != SessionCategory.FREE
        )
        if filter_course:
            attended_query = attended_query.filter(AttendanceSession.actual_course_code == course_code)
        attended_rows = attended_query.group_by(
            Student.id, Student.roll_number, Student.full_name,
            AttendanceSession.actual_course_code
        ).all()

        report = []
        for row in attended_rows:
            total = totals.get(row.subject, 0)
            if not total:
                continue
            attended = int(row.attended or 0)
            if threshold is not None and attended * 100 / total >= threshold:
                continue
            report.append({
                'roll_number': row.roll_number,
                'full_name': row.full_name,
                'subject': row.subject,
                'total': total,
                'attended': attended,
                'percentage': attendance_percentage(attended, total)
            })

        report.sort(key=lambda item: (item['roll_number'], item['subject']))
        return report

    @staticmethod
    def daily_overview(section_id: int, day: date, semester: int) -> List[Dict]:
        """Slots scheduled on ``day``'s weekday merged with that day's sessions."""
        slots = TimetableSlot.query.filter_by(
            section_id=section_id,
            semester=semester,
            day=WeekDay.from_date(day)
        ).order_by(TimetableSlot.slot_number.asc()).all()

        sessions = ReportService._sessions_by_slot_and_date(slots, {day})
        counts = ReportService._status_counts(s.id for s in sessions.values())

        overview = []
        for slot in slots:
            session = sessions.get((slot.id, day))
            row = {
                'timetable_id': slot.id,
                'slot_number': slot.slot_number,
                'scheduled_course_code': slot.course_code,
                'scheduled_course_name': slot.course.course_name if slot.course else None,
                'faculty_name': slot.faculty.faculty_name if slot.faculty else None,
            }
            row.update(ReportService._session_fields(session, counts))
            overview.append(row)

        return overview

    @staticmethod
    def week_grid(section_id: int, week_start: date, semester: int) -> List[Dict]:
        """Whole weekly timetable merged with the sessions of one week."""
        slots = TimetableSlot.query.filter_by(
            section_id=section_id,
            semester=semester
        ).all()
        slots.sort(key=lambda slot: (DAY_ORDER[slot.day], slot.slot_number))

        dates = {slot.date_in_week(week_start) for slot in slots}
        sessions = ReportService._sessions_by_slot_and_date(slots, dates)
        counts = ReportService._status_counts(s.id for s in sessions.values())

        grid = []
        for slot in slots:
            slot_date = slot.date_in_week(week_start)
            session = sessions.get((slot.id, slot_date))
            row = slot.to_dict()
            row['date'] = slot_date.isoformat()
            row.update(ReportService._session_fields(session, counts))
            grid.append(row)

        return grid

    @staticmethod
    def _sessions_by_slot_and_date(slots: List[TimetableSlot], dates: set) -> Dict:
        if not slots or not dates:
            return {}
        sessions = AttendanceSession.query.filter(
            AttendanceSession.timetable_id.in_([slot.id for slot in slots]),
            AttendanceSession.session_date.in_(dates)
        ).all()
        return {(s.timetable_id, s.session_date): s for s in sessions}

    @staticmethod
    def _status_counts(session_ids: Iterable[int]) -> Dict[int, Dict[str, int]]:
        session_ids = list(session_ids)
        counts = defaultdict(lambda: {'present': 0, 'absent': 0, 'total': 0})
        if not session_ids:
            return counts

        rows = db.session.query(
            AttendanceRecord.session_id,
            func.lower(AttendanceRecord.status),
            func.count(AttendanceRecord.id)
        ).filter(
            AttendanceRecord.session_id.in_(session_ids)
        ).group_by(
            AttendanceRecord.session_id, func.lower(AttendanceRecord.status)
        ).all()

        for session_id, status, count in rows:
            if status in ('present', 'absent'):
                counts[session_id][status] += count
            counts[session_id]['total'] += count
        return counts

    @staticmethod
    def _session_fields(session: Optional[AttendanceSession], counts: Dict) -> Dict:
        if session is None:
            return {
                'session_id': None,
                'session_category': None,
                'session_date': None,
                'is_verified_by_faculty': None,
                'actual_course_code': None,
                'actual_course_name': None,
                'present_count': 0,
                'absent_count': 0,
                'total_count': 0
            }

        actual_course = None
        if session.actual_course_code:
            actual_course = Course.query.filter_by(course_code=session.actual_course_code).first()
        session_counts = counts[session.id]
        return {
            'session_id': session.id,
            'session_category': session.session_category.value,
            'session_date': session.session_date.isoformat(),
            'is_verified_by_faculty': session.is_verified_by_faculty,
            'actual_course_code': session.actual_course_code,
            'actual_course_name': actual_course.course_name if actual_course else None,
            'present_count': session_counts['present'],
            'absent_count': session_counts['absent'],
            'total_count': session_counts['total']
        }

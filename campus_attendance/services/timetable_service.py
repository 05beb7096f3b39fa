"""Timetable management and schedule views."""
from typing import Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from campus_attendance import db
from campus_attendance.models.course import Course
from campus_attendance.models.department import Section
from campus_attendance.models.faculty import FacultyProfile
from campus_attendance.models.student import Student
from campus_attendance.models.timetable import TimetableSlot, WeekDay, DAY_ORDER
from campus_attendance.models.user import User
from campus_attendance.utils.exceptions import (
    ConflictError, ForbiddenError, NotFoundError, ValidationError
)
from campus_attendance.utils.helpers import parse_int
from campus_attendance.utils.validators import require_fields

def _parse_day(value) -> WeekDay:
    try:
        return WeekDay.parse(value)
    except ValueError as e:
        raise ValidationError(str(e))

def _schedule_sort_key(slot: TimetableSlot):
    return (slot.semester, DAY_ORDER[slot.day], slot.slot_number)

def group_by_class(rows: List[Dict]) -> List[Dict[str, List[Dict]]]:
    """Group slot rows under their ``full_class_title``.

    The grouped mapping is wrapped in a one-element list, which is the
    shape schedule clients consume.
    """
    grouped = {}
    for row in rows:
        details = dict(row)
        title = details.pop('full_class_title')
        grouped.setdefault(title, []).append(details)
    return [grouped]

class TimetableService:
    """Service for timetable slots and schedule views."""

    @staticmethod
    def create_slot(data: Dict) -> TimetableSlot:
        require_fields(data, ['section_id', 'semester', 'day', 'slot', 'course_code', 'faculty_id'])
        slot = TimetableSlot(
            section_id=parse_int(data['section_id'], 'section_id'),
            semester=parse_int(data['semester'], 'semester'),
            day=_parse_day(data['day']),
            slot_number=parse_int(data['slot'], 'slot'),
            course_code=data['course_code'],
            faculty_profile_id=parse_int(data['faculty_id'], 'faculty_id'),
            room_info=data.get('room')
        )
        TimetableService._check_references(slot)
        TimetableService._check_cell_free(slot)
        return TimetableService._commit(slot)

    @staticmethod
    def update_slot(slot_id: int, data: Dict) -> TimetableSlot:
        slot = db.session.get(TimetableSlot, slot_id)
        if not slot:
            raise NotFoundError("Timetable slot not found")

        if data.get('day'):
            slot.day = _parse_day(data['day'])
        if data.get('slot') is not None:
            slot.slot_number = parse_int(data['slot'], 'slot')
        if data.get('course_code'):
            slot.course_code = data['course_code']
        if data.get('faculty_id') is not None:
            slot.faculty_profile_id = parse_int(data['faculty_id'], 'faculty_id')
        if 'room' in data:
            slot.room_info = data['room']

        with db.session.no_autoflush:
            TimetableService._check_references(slot)
            TimetableService._check_cell_free(slot)
        return TimetableService._commit(slot)

    @staticmethod
    def delete_slot(slot_id: int) -> None:
        slot = db.session.get(TimetableSlot, slot_id)
        if not slot:
            raise NotFoundError("Timetable slot not found")
        if slot.sessions.count():
            raise ConflictError("Timetable slot has recorded attendance sessions")
        slot.delete()

    @staticmethod
    def _check_references(slot: TimetableSlot) -> None:
        if not db.session.get(Section, slot.section_id):
            raise NotFoundError("Section not found")
        if not Course.query.filter_by(course_code=slot.course_code).first():
            raise NotFoundError(f"Course {slot.course_code} not found")
        if not db.session.get(FacultyProfile, slot.faculty_profile_id):
            raise NotFoundError("Faculty profile not found")

    @staticmethod
    def _check_cell_free(slot: TimetableSlot) -> None:
        query = TimetableSlot.query.filter_by(
            section_id=slot.section_id,
            semester=slot.semester,
            day=slot.day,
            slot_number=slot.slot_number
        )
        if slot.id:
            query = query.filter(TimetableSlot.id != slot.id)
        clash = query.first()
        if clash:
            raise ConflictError("Slot already occupied for this section, semester and day")

    @staticmethod
    def _commit(slot: TimetableSlot) -> TimetableSlot:
        try:
            db.session.add(slot)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("Slot already occupied for this section, semester and day")
        return slot

    @staticmethod
    def slots_for_class(section_id: int, semester: int) -> List[TimetableSlot]:
        slots = TimetableSlot.query.filter_by(section_id=section_id, semester=semester).all()
        return sorted(slots, key=lambda slot: (DAY_ORDER[slot.day], slot.slot_number))

    @staticmethod
    def class_of_user(user_id: int) -> Dict[str, int]:
        """Section and semester a CR account belongs to."""
        user = db.session.get(User, user_id)
        if not user or not user.student_id:
            raise ForbiddenError("Not a student/CR account, and no parameters provided.")
        if not user.student:
            raise NotFoundError("User details not found")
        return {'section_id': user.student.section_id, 'semester': user.semester}

    @staticmethod
    def courses_for_student(student_id: Optional[int]) -> List[Course]:
        """Distinct courses timetabled for a student's section."""
        student = db.session.get(Student, student_id) if student_id else None
        if not student:
            raise NotFoundError("Student not found")
        return Course.query.join(
            TimetableSlot, TimetableSlot.course_code == Course.course_code
        ).filter(
            TimetableSlot.section_id == student.section_id
        ).distinct().order_by(Course.course_name.asc()).all()

    @staticmethod
    def faculty_profile_for_user(user_id: int) -> FacultyProfile:
        profile = FacultyProfile.query.filter_by(user_id=user_id).first()
        if not profile:
            raise NotFoundError("Faculty profile not found for this user.")
        return profile

    @staticmethod
    def faculty_schedule(profile_id: int) -> List[Dict[str, List[Dict]]]:
        """A faculty member's own slots grouped by class."""
        slots = TimetableSlot.query.filter_by(faculty_profile_id=profile_id).all()
        rows = []
        for slot in sorted(slots, key=_schedule_sort_key):
            rows.append({
                'timetable_id': slot.id,
                'day': slot.day.value,
                'slot_number': slot.slot_number,
                'room_info': slot.room_info,
                'semester': slot.semester,
                'course_name': slot.course.course_name if slot.course else None,
                'course_code': slot.course_code,
                'full_class_title': slot.section.full_title
            })
        return group_by_class(rows)

    @staticmethod
    def faculty_class_timetables(profile_id: int) -> List[Dict[str, List[Dict]]]:
        """Full timetables of every class (section and semester) the faculty teaches."""
        classes = db.session.query(
            TimetableSlot.section_id, TimetableSlot.semester
        ).filter(
            TimetableSlot.faculty_profile_id == profile_id
        ).distinct().all()

        rows = []
        for section_id, semester in classes:
            for slot in TimetableService.slots_for_class(section_id, semester):
                batch = slot.section.batch
                rows.append({
                    'timetable_id': slot.id,
                    'day': slot.day.value,
                    'slot_number': slot.slot_number,
                    'room_info': slot.room_info,
                    'semester': slot.semester,
                    'course_name': slot.course.course_name if slot.course else None,
                    'course_code': slot.course_code,
                    'faculty_name': slot.faculty.faculty_name if slot.faculty else None,
                    'full_class_title': (
                        f"{batch.department.dept_code} Batch {batch.start_year}-{batch.end_year} "
                        f"Section {slot.section.section_name} Sem {slot.semester}"
                    )
                })

        rows.sort(key=lambda row: row['full_class_title'])
        return group_by_class(rows)

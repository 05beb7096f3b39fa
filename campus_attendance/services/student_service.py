"""Student management service."""
from typing import Dict, List, Optional
import pandas as pd
from flask import current_app
from sqlalchemy import exists
from campus_attendance import db
from campus_attendance.models.department import Batch, Section
from campus_attendance.models.student import Student
from campus_attendance.models.timetable import TimetableSlot
from campus_attendance.models.user import User, UserRole
from campus_attendance.utils.exceptions import ConflictError, NotFoundError, ValidationError
from campus_attendance.utils.helpers import parse_int
from campus_attendance.utils.validators import Validator, require_fields

class StudentService:
    """Service for managing students and class representatives."""

    @staticmethod
    def create_student(roll: str, name: str, email: Optional[str], section_id: int) -> Student:
        """Create a new student in a section."""
        roll = str(roll).strip()
        if not roll or not name or not str(name).strip():
            raise ValidationError("Roll number and name are required")
        if not db.session.get(Section, section_id):
            raise NotFoundError("Section not found")
        if Student.query.filter_by(roll_number=roll).first():
            raise ConflictError(f"Roll number {roll} already exists")

        student = Student(
            roll_number=roll,
            full_name=str(name).strip(),
            email=email.lower().strip() if email else None,
            section_id=section_id
        )
        return student.save()

    @staticmethod
    def import_students(df: pd.DataFrame, section_id: int = None) -> List[Dict]:
        """Create multiple students from a DataFrame, one result per row."""
        missing_columns = [col for col in ('roll', 'name') if col not in df.columns]
        if missing_columns:
            raise ValidationError(f"Missing columns: {', '.join(missing_columns)}")
        if section_id is None and 'section_id' not in df.columns:
            raise ValidationError("section_id is required either as a column or a form field")

        df = df.fillna('')

        results = []
        for index, row in df.iterrows():
            try:
                row_section = section_id if section_id is not None else int(row['section_id'])
                email = row.get('email')
                student = StudentService.create_student(
                    roll=row['roll'],
                    name=row['name'],
                    email=email if isinstance(email, str) else None,
                    section_id=row_section
                )
                results.append({
                    'row': index + 2,  # spreadsheet row number
                    'roll_number': student.roll_number,
                    'success': True
                })
            except Exception as e:
                db.session.rollback()
                message = getattr(e, 'message', None) or str(e)
                results.append({
                    'row': index + 2,
                    'roll_number': str(row.get('roll', '')),
                    'success': False,
                    'error': message
                })

        current_app.logger.info(
            "Student import finished: %s of %s rows created",
            sum(1 for r in results if r['success']), len(results)
        )
        return results

    @staticmethod
    def promote_cr(data: Dict) -> User:
        """Give a student a class representative login."""
        require_fields(data, ['student_id', 'password'])
        student_id = parse_int(data['student_id'], 'student_id')
        semester = parse_int(data.get('semester'), 'semester', required=False) or 1

        result = Validator.validate_password(data['password'])
        if not result['is_valid']:
            raise ValidationError(', '.join(result['errors']))

        student = db.session.get(Student, student_id)
        if not student:
            raise NotFoundError("Student not found")
        if not student.email:
            raise ValidationError("Student has no email to log in with")
        if User.query.filter_by(student_id=student_id, role=UserRole.CR).first():
            raise ConflictError("Student is already a CR")

        user = User(
            email=student.email,
            role=UserRole.CR,
            student_id=student_id,
            semester=semester
        )
        user.set_password(data['password'])
        user.save()

        current_app.logger.info("Student %s promoted to CR (semester %s)", student_id, semester)
        return user

    @staticmethod
    def demote_cr(student_id: int) -> None:
        deleted = User.query.filter_by(student_id=student_id, role=UserRole.CR).delete()
        if not deleted:
            raise NotFoundError("User not found or not a CR")
        db.session.commit()

    @staticmethod
    def students_by_filter(section_id: int, semester: Optional[int] = None) -> List[Dict]:
        """Students of a section with their CR account details, if any."""
        query = db.session.query(Student, Section, Batch, User).join(
            Section, Student.section_id == Section.id
        ).join(
            Batch, Section.batch_id == Batch.id
        ).outerjoin(
            User, User.student_id == Student.id
        ).filter(Student.section_id == section_id)

        if semester is not None:
            query = query.filter(exists().where(
                TimetableSlot.section_id == Student.section_id,
                TimetableSlot.semester == semester
            ))

        return [{
            'id': student.id,
            'roll_number': student.roll_number,
            'full_name': student.full_name,
            'email': student.email,
            'section_name': section.section_name,
            'batch_name': batch.batch_name,
            'role': user.role.value if user else None,
            'cr_semester': user.semester if user else None
        } for student, section, batch, user in query.order_by(Student.roll_number.asc()).all()]

    @staticmethod
    def students_in_section_of(student_id: int) -> List[Student]:
        """Classmates of a student, including the student."""
        student = db.session.get(Student, student_id) if student_id else None
        if not student:
            raise NotFoundError("Student not found")
        return Student.query.filter_by(
            section_id=student.section_id
        ).order_by(Student.roll_number.asc()).all()

    @staticmethod
    def students_for_slot(timetable_id: int) -> List[Student]:
        slot = db.session.get(TimetableSlot, timetable_id)
        if not slot:
            raise NotFoundError("Timetable slot not found")
        return Student.query.filter_by(
            section_id=slot.section_id
        ).order_by(Student.roll_number.asc()).all()

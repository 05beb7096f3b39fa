"""Student Management API."""
import io
import pandas as pd
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required
from campus_attendance import db, limiter
from campus_attendance.models.department import Section
from campus_attendance.models.student import Student
from campus_attendance.services.student_service import StudentService
from campus_attendance.utils.decorators import permission_required
from campus_attendance.utils.exceptions import ConflictError, NotFoundError
from campus_attendance.utils.helpers import success_response, error_response, parse_int
from campus_attendance.utils.validators import require_fields

students_bp = Blueprint('students', __name__)

@students_bp.route('/students/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Students service is running')

@students_bp.route('/students', methods=['POST'])
@jwt_required()
@permission_required('students.manage')
def create_student():
    data = require_fields(request.get_json(silent=True), ['roll', 'name', 'section_id'])
    student = StudentService.create_student(
        roll=data['roll'],
        name=data['name'],
        email=data.get('email'),
        section_id=parse_int(data['section_id'], 'section_id')
    )
    return success_response(data=student.to_dict(), message="Student Added", status_code=201)

@students_bp.route('/students', methods=['GET'])
@jwt_required()
def get_students():
    """Get all students with their section name."""
    query = Student.query
    section_id = request.args.get('section_id', type=int)
    if section_id:
        query = query.filter_by(section_id=section_id)

    students = query.order_by(Student.roll_number.asc()).all()
    return success_response(data=[s.to_dict() for s in students])

@students_bp.route('/students/<int:student_id>', methods=['PUT'])
@jwt_required()
@permission_required('students.manage')
def update_student(student_id):
    student = db.session.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")

    data = request.get_json(silent=True) or {}
    roll = str(data.get('roll') or student.roll_number).strip()
    if roll != student.roll_number and Student.query.filter_by(roll_number=roll).first():
        raise ConflictError(f"Roll number {roll} already exists")

    section_id = parse_int(data.get('section_id'), 'section_id', required=False) or student.section_id
    if not db.session.get(Section, section_id):
        raise NotFoundError("Section not found")

    student.update(
        full_name=data.get('name', student.full_name),
        roll_number=roll,
        email=data.get('email', student.email),
        section_id=section_id
    )
    return success_response(data=student.to_dict(), message="Student Updated")

@students_bp.route('/students/<int:student_id>', methods=['DELETE'])
@jwt_required()
@permission_required('students.manage')
def delete_student(student_id):
    student = db.session.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    if student.attendance_records.count():
        raise ConflictError("Student has attendance records")
    student.accounts.delete()
    student.delete()
    return success_response(message="Student Deleted")

@students_bp.route('/students/import', methods=['POST'])
@jwt_required()
@permission_required('students.manage')
@limiter.limit("10 per hour")
def import_students():
    """Bulk create students from a CSV/Excel file."""
    if 'file' not in request.files:
        return error_response("No file uploaded", 400)

    file = request.files['file']
    if file.filename == '':
        return error_response("No file selected", 400)

    extension = file.filename.rsplit('.', 1)[-1].lower() if '.' in file.filename else ''
    if extension not in current_app.config.get('ALLOWED_EXTENSIONS', {'csv'}):
        return error_response("Invalid file format. Use CSV or Excel", 400)

    try:
        if extension == 'csv':
            df = pd.read_csv(io.StringIO(file.stream.read().decode("utf-8")), dtype=str)
        else:
            df = pd.read_excel(file.stream, dtype=str)
    except Exception as e:
        return error_response(f"Error reading file: {str(e)}", 400)

    section_id = parse_int(request.form.get('section_id'), 'section_id', required=False)
    results = StudentService.import_students(df, section_id=section_id)
    created = sum(1 for r in results if r['success'])

    return success_response(
        data={'results': results, 'created': created, 'failed': len(results) - created},
        message=f"Imported {created} of {len(results)} students"
    )

@students_bp.route('/promote-cr', methods=['POST'])
@jwt_required()
@permission_required('students.manage')
def promote_cr():
    user = StudentService.promote_cr(request.get_json(silent=True))
    return success_response(
        data={'user_id': user.id, 'semester': user.semester},
        message="Student promoted to Class Representative (CR)",
        status_code=201
    )

@students_bp.route('/demote-cr/<int:student_id>', methods=['DELETE'])
@jwt_required()
@permission_required('students.manage')
def demote_cr(student_id):
    StudentService.demote_cr(student_id)
    return success_response(message="CR privileges removed successfully")

@students_bp.route('/students-by-filter', methods=['GET'])
@jwt_required()
def students_by_filter():
    """Students of a section, optionally limited to a timetabled semester."""
    section_id = parse_int(request.args.get('section_id'), 'Section ID')
    semester = parse_int(request.args.get('semester'), 'semester', required=False)
    return success_response(data=StudentService.students_by_filter(section_id, semester))

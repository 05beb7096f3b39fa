"""Course catalog API, keyed by course code."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from campus_attendance import db
from campus_attendance.models.course import Course
from campus_attendance.models.department import Department
from campus_attendance.models.timetable import TimetableSlot
from campus_attendance.utils.decorators import permission_required
from campus_attendance.utils.exceptions import ConflictError, NotFoundError
from campus_attendance.utils.helpers import success_response, parse_int
from campus_attendance.utils.validators import require_fields

courses_bp = Blueprint('courses', __name__)

def _get_course(code: str) -> Course:
    course = Course.query.filter_by(course_code=code).first()
    if not course:
        raise NotFoundError(f"Course {code} not found")
    return course

@courses_bp.route('/', methods=['POST'])
@jwt_required()
@permission_required('catalog.manage')
def create_course():
    data = require_fields(request.get_json(silent=True), ['code', 'name'])
    code = data['code'].strip().upper()
    if Course.query.filter_by(course_code=code).first():
        raise ConflictError(f"Course {code} already exists")

    dept_id = parse_int(data.get('dept_id'), 'dept_id', required=False)
    if dept_id is not None and not db.session.get(Department, dept_id):
        raise NotFoundError("Department not found")

    course = Course(
        course_code=code,
        course_name=data['name'].strip(),
        credits=parse_int(data.get('credits'), 'credits', required=False),
        dept_id=dept_id
    ).save()
    return success_response(data=course.to_dict(), message="Course Created", status_code=201)

@courses_bp.route('/', methods=['GET'])
@jwt_required()
def get_courses():
    courses = Course.query.order_by(Course.course_code).all()
    return success_response(data=[c.to_dict() for c in courses])

@courses_bp.route('/<string:code>', methods=['PUT'])
@jwt_required()
@permission_required('catalog.manage')
def update_course(code):
    course = _get_course(code)
    data = request.get_json(silent=True) or {}
    course.update(
        course_name=data.get('name', course.course_name),
        credits=parse_int(data.get('credits'), 'credits', required=False) or course.credits
    )
    return success_response(data=course.to_dict(), message="Course Updated")

@courses_bp.route('/<string:code>', methods=['DELETE'])
@jwt_required()
@permission_required('catalog.manage')
def delete_course(code):
    course = _get_course(code)
    if TimetableSlot.query.filter_by(course_code=course.course_code).first():
        raise ConflictError("Course is used in the timetable")
    course.delete()
    return success_response(message="Course Deleted")

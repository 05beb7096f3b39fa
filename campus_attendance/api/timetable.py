"""Timetable API: admin slot management and schedule views."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt
from campus_attendance.services.timetable_service import TimetableService
from campus_attendance.utils.decorators import (
    ADMIN, current_role, current_user_id, permission_required
)
from campus_attendance.utils.helpers import success_response, error_response, parse_int

timetable_bp = Blueprint('timetable', __name__)

@timetable_bp.route('/admin/timetable', methods=['POST'])
@jwt_required()
@permission_required('timetable.manage')
def create_slot():
    slot = TimetableService.create_slot(request.get_json(silent=True))
    return success_response(data=slot.to_dict(), message="Slot Added", status_code=201)

@timetable_bp.route('/admin/timetable/<int:slot_id>', methods=['PUT'])
@jwt_required()
@permission_required('timetable.manage')
def update_slot(slot_id):
    slot = TimetableService.update_slot(slot_id, request.get_json(silent=True) or {})
    return success_response(data=slot.to_dict(), message="Slot Updated")

@timetable_bp.route('/admin/timetable/<int:slot_id>', methods=['DELETE'])
@jwt_required()
@permission_required('timetable.manage')
def delete_slot(slot_id):
    TimetableService.delete_slot(slot_id)
    return success_response(message="Slot Deleted")

@timetable_bp.route('/common/timetable', methods=['GET'])
@jwt_required()
def get_timetable():
    """Timetable of one section and semester."""
    section_id = parse_int(request.args.get('section_id'), 'section_id')
    semester = parse_int(request.args.get('semester'), 'semester')
    slots = TimetableService.slots_for_class(section_id, semester)
    return success_response(data=[slot.to_dict() for slot in slots])

@timetable_bp.route('/common/timetable-by-class', methods=['GET'])
@jwt_required()
def get_timetable_by_class():
    """Timetable for the given class, or for the caller's own class."""
    section_id = parse_int(request.args.get('section_id'), 'section_id', required=False)
    semester = parse_int(request.args.get('semester'), 'semester', required=False)

    if not section_id or not semester:
        context = TimetableService.class_of_user(current_user_id())
        section_id, semester = context['section_id'], context['semester']

    slots = TimetableService.slots_for_class(section_id, semester)
    return success_response(data=[slot.to_dict() for slot in slots])

@timetable_bp.route('/cr/my-courses', methods=['GET'])
@jwt_required()
@permission_required('cr.courses')
def get_my_courses():
    """Courses timetabled for the CR's section."""
    courses = TimetableService.courses_for_student(get_jwt().get('student_id'))
    return success_response(data=[course.to_dict() for course in courses])

@timetable_bp.route('/faculty/my-schedule', methods=['GET'])
@jwt_required()
@permission_required('faculty.schedule')
def get_my_schedule():
    """Own schedule grouped by class; admins may look up any faculty."""
    faculty_id = request.args.get('faculty_id', type=int)

    if faculty_id:
        if current_role() != ADMIN:
            return error_response("Access denied", 403)
        profile_id = faculty_id
    else:
        profile_id = TimetableService.faculty_profile_for_user(current_user_id()).id

    return success_response(data=TimetableService.faculty_schedule(profile_id))

@timetable_bp.route('/faculty/my-classes-full-timetables', methods=['GET'])
@jwt_required()
@permission_required('faculty.class_timetables')
def get_my_classes_full_timetables():
    profile = TimetableService.faculty_profile_for_user(current_user_id())
    return success_response(data=TimetableService.faculty_class_timetables(profile.id))

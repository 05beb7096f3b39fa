"""Faculty directory API - Admin Only."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from campus_attendance.models.faculty import FacultyProfile
from campus_attendance.services.faculty_service import FacultyService
from campus_attendance.utils.decorators import ADMIN, current_role, permission_required
from campus_attendance.utils.helpers import success_response, parse_int
from campus_attendance.utils.validators import require_fields

faculty_bp = Blueprint('faculty', __name__)

@faculty_bp.route('/faculty', methods=['GET'])
@jwt_required()
def get_faculty():
    """All faculty profiles, including those without a login."""
    profiles = FacultyProfile.query.order_by(FacultyProfile.faculty_name.asc()).all()
    include_key = current_role() == ADMIN
    return success_response(data=[p.to_dict(include_key=include_key) for p in profiles])

@faculty_bp.route('/faculty-profile', methods=['POST'])
@jwt_required()
@permission_required('faculty.manage')
def create_faculty_profile():
    profile = FacultyService.create_profile(request.get_json(silent=True))
    return success_response(data=profile.to_dict(include_key=True), message="Faculty Profile Added", status_code=201)

@faculty_bp.route('/faculty-login', methods=['POST'])
@jwt_required()
@permission_required('faculty.manage')
def create_faculty_login():
    """Create a login for an existing faculty profile."""
    data = require_fields(request.get_json(silent=True), ['faculty_profile_id', 'password'])
    user = FacultyService.create_login(
        parse_int(data['faculty_profile_id'], 'faculty_profile_id'),
        data['password']
    )
    return success_response(
        data={'user_id': user.id},
        message="User account created and linked to faculty profile",
        status_code=201
    )

@faculty_bp.route('/faculty/<int:user_id>', methods=['PUT'])
@jwt_required()
@permission_required('faculty.manage')
def update_faculty(user_id):
    profile = FacultyService.update_by_user(user_id, request.get_json(silent=True) or {})
    return success_response(data=profile.to_dict(include_key=True), message="Faculty Profile Updated")

@faculty_bp.route('/faculty/<int:user_id>', methods=['DELETE'])
@jwt_required()
@permission_required('faculty.manage')
def delete_faculty(user_id):
    FacultyService.delete_login(user_id)
    return success_response(message="Faculty Deleted")

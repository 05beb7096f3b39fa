"""Authentication API."""
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required
from campus_attendance import limiter
from campus_attendance.models.faculty import FacultyProfile
from campus_attendance.services.auth_service import AuthService
from campus_attendance.utils.decorators import current_user_id
from campus_attendance.utils.helpers import success_response, error_response

auth_bp = Blueprint("auth", __name__)

def _login_limit():
    return current_app.config.get('LOGIN_RATE_LIMIT', '5 per minute')

@auth_bp.route("/auth/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return success_response(message="Auth service is running")

@auth_bp.route("/login", methods=["POST"])
@limiter.limit(_login_limit)
def login():
    """Email and password login for admins, faculty and CRs."""
    data = request.get_json(silent=True)

    if not data:
        return error_response("Request body must be JSON", 400)

    result = AuthService.login(data.get("email", ""), data.get("password", ""))
    return success_response(data=result, message="Login successful")

@auth_bp.route("/auth/me", methods=["GET"])
@jwt_required()
def get_current_user():
    """Get current user profile."""
    user = AuthService.get_user_by_id(current_user_id())

    if not user:
        return error_response("User not found", 404)

    response_data = user.to_dict()
    if user.student:
        response_data['student'] = user.student.to_dict()
    profile = FacultyProfile.query.filter_by(user_id=user.id).first()
    if profile:
        response_data['faculty_profile'] = profile.to_dict(include_key=True)

    return success_response(data=response_data)

"""Authorization decorators driven by a permission table."""
from functools import wraps
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from campus_attendance.utils.helpers import error_response

ADMIN = 'admin'
FACULTY = 'faculty'
CR = 'cr'

# Operation name -> roles allowed to perform it.
PERMISSIONS = {
    'catalog.manage': {ADMIN},
    'faculty.manage': {ADMIN},
    'students.manage': {ADMIN},
    'timetable.manage': {ADMIN},
    'sessions.inspect': {ADMIN},
    'attendance.record': {CR, FACULTY, ADMIN},
    'attendance.verify': {CR, FACULTY},
    'faculty.regenerate_token': {FACULTY},
    'faculty.schedule': {FACULTY, ADMIN},
    'faculty.class_timetables': {FACULTY},
    'cr.courses': {CR},
    'cr.students': {CR, ADMIN},
}

def current_user_id() -> int:
    """Identity of the authenticated user as an int."""
    return int(get_jwt_identity())

def current_role() -> str:
    """Role claim of the authenticated user."""
    return get_jwt().get('role')

def is_allowed(operation: str, role: str) -> bool:
    """Check a role against the permission table."""
    return role in PERMISSIONS.get(operation, set())

def permission_required(operation: str):
    """Decorator to require a role allowed for ``operation``."""
    if operation not in PERMISSIONS:
        raise KeyError(f"Unknown operation: {operation}")

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            verify_jwt_in_request()
            if not is_allowed(operation, current_role()):
                return error_response("Access denied", 403)
            return f(*args, **kwargs)
        return decorated_function
    return decorator

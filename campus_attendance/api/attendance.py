"""Attendance API: recording, verification and session inspection."""
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required, get_jwt
from campus_attendance import db
from campus_attendance.services.attendance_service import AttendanceService, Recorder
from campus_attendance.services.student_service import StudentService
from campus_attendance.services.verification_service import VerificationService
from campus_attendance.utils.decorators import current_user_id, permission_required
from campus_attendance.utils.exceptions import ServiceError
from campus_attendance.utils.helpers import success_response, error_response

attendance_bp = Blueprint('attendance', __name__)

@attendance_bp.route('/attendance/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Attendance service is running')

@attendance_bp.route('/cr/attendance', methods=['POST'])
@jwt_required()
@permission_required('attendance.record')
def record_attendance():
    """Record a session for a timetable slot on a date.

    Body: ``timetable_id``, ``date``, ``records`` (``[{id, status}]``),
    ``selected_course_code`` and ``is_free``. A course other than the
    scheduled one, or a free class, also writes a swap log entry.
    """
    claims = get_jwt()
    recorder = Recorder(
        user_id=current_user_id(),
        role=claims.get('role'),
        student_id=claims.get('student_id')
    )

    try:
        result = AttendanceService.record_attendance(request.get_json(silent=True), recorder)
    except ServiceError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Unexpected error while recording attendance")
        return error_response("Error recording attendance", 500)

    return success_response(
        data=result.to_dict(),
        message="Attendance processed and swap logged",
        status_code=201
    )

@attendance_bp.route('/faculty/verify/<int:session_id>', methods=['PUT'])
@jwt_required()
@permission_required('attendance.verify')
def verify_session(session_id):
    """Lock a session with the scheduled faculty's 6-digit token."""
    try:
        session = VerificationService.verify_session(session_id, request.get_json(silent=True))
    except ServiceError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Unexpected error while verifying session %s", session_id)
        return error_response("Error verifying attendance", 500)

    return success_response(
        data={
            'session_id': session.id,
            'verified_at': session.verified_at.isoformat() if session.verified_at else None
        },
        message="Attendance verified and locked"
    )

@attendance_bp.route('/faculty/regen-token', methods=['PUT'])
@jwt_required()
@permission_required('faculty.regenerate_token')
def regenerate_token():
    token = VerificationService.regenerate_token(
        current_user_id(),
        length=current_app.config.get('FACULTY_TOKEN_LENGTH', 6)
    )
    return success_response(data={'token': token}, message="New Token Generated")

@attendance_bp.route('/cr/students-by-timetable/<int:tt_id>', methods=['GET'])
@jwt_required()
@permission_required('cr.students')
def students_by_timetable(tt_id):
    """Roll call for a slot: every student of its section."""
    students = StudentService.students_for_slot(tt_id)
    return success_response(data=[s.to_dict() for s in students])

@attendance_bp.route('/cr/students-by-studentid', methods=['GET'])
@jwt_required()
@permission_required('cr.students')
def students_by_student_id():
    """Classmates of the CR making the request."""
    students = StudentService.students_in_section_of(get_jwt().get('student_id'))
    return success_response(data=[s.to_dict() for s in students])

@attendance_bp.route('/admin/sessions-by-timetable/<int:tt_id>', methods=['GET'])
@jwt_required()
@permission_required('sessions.inspect')
def sessions_by_timetable(tt_id):
    return success_response(data=AttendanceService.sessions_for_slot(tt_id))

@attendance_bp.route('/admin/records-by-session/<int:session_id>', methods=['GET'])
@jwt_required()
@permission_required('sessions.inspect')
def records_by_session(session_id):
    return success_response(data=AttendanceService.records_for_session(session_id))

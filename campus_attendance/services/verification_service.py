"""Faculty verification of recorded sessions."""
from datetime import datetime
from typing import Dict
from flask import current_app
from campus_attendance import db
from campus_attendance.models.attendance_session import AttendanceSession
from campus_attendance.models.faculty import FacultyProfile
from campus_attendance.models.timetable import TimetableSlot
from campus_attendance.utils.exceptions import NotFoundError, UnauthorizedError, ValidationError
from campus_attendance.utils.helpers import parse_int

class VerificationService:
    """Locks sessions once the scheduled faculty confirms them."""

    @staticmethod
    def verify_session(session_id: int, data: Dict) -> AttendanceSession:
        """Mark a session verified if ``data['token']`` matches the faculty key.

        The key checked is the one of the faculty originally scheduled for
        the slot, not necessarily the one who taught.
        """
        if not isinstance(data, dict):
            raise ValidationError("Request body must be JSON")

        timetable_id = parse_int(data.get('timetable_id'), 'timetable_id')
        token = data.get('token')
        if token is None or token == '':
            raise ValidationError("token is required")

        slot = db.session.get(TimetableSlot, timetable_id)
        if not slot:
            raise NotFoundError("Timetable slot not found")

        profile = db.session.get(FacultyProfile, slot.faculty_profile_id)
        if not profile:
            raise NotFoundError("Faculty profile not found")

        session = db.session.get(AttendanceSession, session_id)
        if not session:
            raise NotFoundError("Attendance session not found")
        if session.timetable_id != slot.id:
            raise ValidationError("Session does not belong to this timetable slot")

        if profile.authorization_key is None or profile.authorization_key != str(token):
            current_app.logger.warning(
                "Verification rejected for session %s: token mismatch", session_id
            )
            raise UnauthorizedError("Invalid 6-digit Token")

        if session.is_verified_by_faculty:
            return session

        session.is_verified_by_faculty = True
        session.verified_at = datetime.utcnow()
        db.session.commit()

        current_app.logger.info(
            "Session %s verified by faculty profile %s", session_id, profile.id
        )
        return session

    @staticmethod
    def regenerate_token(user_id: int, length: int = 6) -> str:
        """Replace the faculty's authorization key with a new random one."""
        profile = FacultyProfile.query.filter_by(user_id=user_id).first()
        if not profile:
            raise NotFoundError("Faculty profile not found for this user")

        profile.authorization_key = FacultyProfile.generate_authorization_key(length)
        db.session.commit()

        current_app.logger.info("Authorization key regenerated for faculty profile %s", profile.id)
        return profile.authorization_key

"""Faculty directory and faculty login management."""
from typing import Dict
from flask import current_app
from campus_attendance import db
from campus_attendance.models.department import Department
from campus_attendance.models.faculty import FacultyProfile
from campus_attendance.models.user import User, UserRole
from campus_attendance.utils.exceptions import ConflictError, NotFoundError, ValidationError
from campus_attendance.utils.helpers import parse_int
from campus_attendance.utils.validators import Validator, require_fields

class FacultyService:
    """Service for managing faculty profiles and their accounts."""

    @staticmethod
    def create_profile(data: Dict) -> FacultyProfile:
        """Add a directory entry; no login account is created."""
        require_fields(data, ['name', 'email', 'dept_id'])
        email = data['email'].lower().strip()
        if not Validator.validate_email(email):
            raise ValidationError("Invalid email format")

        dept_id = parse_int(data['dept_id'], 'dept_id')
        if not db.session.get(Department, dept_id):
            raise NotFoundError("Department not found")
        if FacultyProfile.query.filter_by(email=email).first():
            raise ConflictError("A faculty profile with this email already exists")

        auth_key = data.get('auth_key')
        profile = FacultyProfile(
            faculty_name=data['name'].strip(),
            email=email,
            dept_id=dept_id,
            authorization_key=str(auth_key) if auth_key else None
        )
        return profile.save()

    @staticmethod
    def create_login(faculty_profile_id: int, password: str) -> User:
        """Create a faculty account from a profile's email and link it."""
        result = Validator.validate_password(password)
        if not result['is_valid']:
            raise ValidationError(', '.join(result['errors']))

        profile = db.session.get(FacultyProfile, faculty_profile_id)
        if not profile:
            raise NotFoundError("Profile not found")
        if profile.user_id:
            raise ConflictError("Faculty profile already has a login account")

        try:
            user = User(email=profile.email, role=UserRole.FACULTY)
            user.set_password(password)
            db.session.add(user)
            db.session.flush()

            profile.user_id = user.id
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info("Login account %s linked to faculty profile %s", user.id, profile.id)
        return user

    @staticmethod
    def update_by_user(user_id: int, data: Dict) -> FacultyProfile:
        profile = FacultyProfile.query.filter_by(user_id=user_id).first()
        if not profile:
            raise NotFoundError("Faculty profile not found")

        if data.get('name'):
            profile.faculty_name = data['name'].strip()
        if 'auth_key' in data:
            profile.authorization_key = str(data['auth_key']) if data['auth_key'] else None
        if data.get('dept_id') is not None:
            dept_id = parse_int(data['dept_id'], 'dept_id')
            if not db.session.get(Department, dept_id):
                raise NotFoundError("Department not found")
            profile.dept_id = dept_id

        db.session.commit()
        return profile

    @staticmethod
    def delete_login(user_id: int) -> None:
        """Remove a faculty account; the directory entry stays."""
        user = User.query.filter_by(id=user_id, role=UserRole.FACULTY).first()
        if not user:
            raise NotFoundError("Faculty user not found")

        FacultyProfile.query.filter_by(user_id=user_id).update({'user_id': None})
        db.session.delete(user)
        db.session.commit()

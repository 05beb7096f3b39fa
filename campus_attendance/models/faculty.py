"""Faculty directory model."""
import secrets
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class FacultyProfile(BaseModel):
    """Faculty directory entry, optionally linked to a login account.

    ``authorization_key`` is the short numeric credential a faculty member
    hands out to confirm a recorded session.
    """

    __tablename__ = 'faculty_profiles'

    faculty_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    dept_id = db.Column(db.Integer, db.ForeignKey('departments.id'), nullable=False)
    authorization_key = db.Column(db.String(20), nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, unique=True)

    department = db.relationship('Department')
    user = db.relationship('User', backref=db.backref('faculty_profile', uselist=False))

    @staticmethod
    def generate_authorization_key(length: int = 6) -> str:
        """Random numeric key without a leading zero."""
        lower = 10 ** (length - 1)
        return str(lower + secrets.randbelow(9 * lower))

    def to_dict(self, exclude: list = None, include_key: bool = False) -> dict:
        """Directory entry; the authorization key only when ``include_key``."""
        data = {
            'profile_id': self.id,
            'faculty_name': self.faculty_name,
            'email': self.email,
            'dept_id': self.dept_id,
            'dept_code': self.department.dept_code if self.department else None,
            'user_id': self.user_id
        }
        if include_key:
            data['authorization_key'] = self.authorization_key
        return data

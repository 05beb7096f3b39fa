"""User model for authentication and authorization."""
from enum import Enum
from werkzeug.security import generate_password_hash, check_password_hash
from campus_attendance import db
from campus_attendance.models.base import BaseModel

class UserRole(Enum):
    """User roles enumeration."""
    ADMIN = 'admin'
    FACULTY = 'faculty'
    CR = 'cr'

class User(BaseModel):
    """Login account for admins, faculty and class representatives."""

    __tablename__ = 'users'

    email = db.Column(db.String(255), nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(UserRole), nullable=False)

    # Class representatives are students with a login
    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=True, index=True)
    semester = db.Column(db.Integer, nullable=True)

    student = db.relationship('Student', backref=db.backref('accounts', lazy='dynamic'))

    def set_password(self, password: str) -> None:
        """Set user password with hashing."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check if provided password matches user's password."""
        return check_password_hash(self.password_hash, password)

    def token_claims(self) -> dict:
        """Claims embedded in the access token next to the identity."""
        return {
            'role': self.role.value,
            'student_id': self.student_id
        }

    def to_dict(self, exclude: list = None) -> dict:
        """Convert to dictionary excluding sensitive data."""
        exclude = (exclude or []) + ['password_hash']
        return super().to_dict(exclude=exclude)

    def __repr__(self) -> str:
        return f'<User {self.email} ({self.role.value})>'

"""Authentication service for user management."""
from flask_jwt_extended import create_access_token
from campus_attendance import db
from campus_attendance.models.user import User
from campus_attendance.utils.exceptions import UnauthorizedError, ValidationError
from campus_attendance.utils.validators import Validator

class AuthService:
    """Password login and token issuance."""

    @staticmethod
    def issue_token(user: User) -> str:
        """Signed access token carrying the user's role and student link."""
        return create_access_token(
            identity=str(user.id),
            additional_claims=user.token_claims()
        )

    @staticmethod
    def login(email: str, password: str) -> dict:
        """Authenticate user and return a token."""
        if not email or not password:
            raise ValidationError("Email and password are required")

        if not Validator.validate_email(email):
            raise ValidationError("Invalid email format")

        # Accounts are not unique by email; the password picks the account.
        users = User.query.filter_by(email=email.lower().strip()).order_by(User.id).all()
        user = next((u for u in users if u.check_password(password)), None)

        if not user:
            raise UnauthorizedError("Invalid credentials")

        return {
            "token": AuthService.issue_token(user),
            "role": user.role.value
        }

    @staticmethod
    def get_user_by_id(user_id: int) -> User:
        """Get user by ID."""
        return db.session.get(User, user_id)

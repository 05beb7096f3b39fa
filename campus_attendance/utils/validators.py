"""Validation utilities for the application."""
import re
from typing import Dict, List, Any
from campus_attendance.utils.exceptions import ValidationError

class Validator:
    """Validation helper class."""

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format."""
        if not email:
            return False
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return bool(re.match(pattern, email))

    @staticmethod
    def validate_password(password: str) -> Dict[str, Any]:
        """Validate password strength."""
        errors = []

        if not password:
            errors.append("Password is required")
        elif len(password) < 6:
            errors.append("Password must be at least 6 characters long")
        elif len(password) > 128:
            errors.append("Password is too long")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

    @staticmethod
    def validate_required_fields(data: Dict, required_fields: List[str]) -> Dict[str, Any]:
        """Validate required fields in data."""
        errors = []

        for field in required_fields:
            if field not in data or data[field] is None or data[field] == '':
                errors.append(f"{field} is required")

        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }

def require_fields(data: Dict, required_fields: List[str]) -> Dict:
    """Raise ValidationError unless every field is present."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be JSON")
    result = Validator.validate_required_fields(data, required_fields)
    if not result['is_valid']:
        raise ValidationError(', '.join(result['errors']))
    return data

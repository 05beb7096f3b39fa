"""Helper functions for the application."""
from datetime import date, datetime
from typing import Any, Optional
from flask import jsonify
from campus_attendance.utils.exceptions import ValidationError

def handle_error(error, status_code: int):
    """Handle application errors with consistent format."""
    return jsonify({
        'error': True,
        'message': str(error),
        'status_code': status_code
    }), status_code

def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }

    if data is not None:
        response['data'] = data

    return jsonify(response), status_code

def error_response(message: str, status_code: int = 400):
    """Return consistent error response."""
    return jsonify({
        'error': True,
        'message': message,
        'status_code': status_code
    }), status_code

def parse_date(value: Optional[str], field: str = 'date') -> date:
    """Parse an ISO ``YYYY-MM-DD`` string, raising ValidationError."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        text = str(value).strip()
        if 'T' in text:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field} format. Use YYYY-MM-DD")

def parse_int(value: Any, field: str, required: bool = True) -> Optional[int]:
    """Coerce request values to int, raising ValidationError."""
    if value is None or value == '':
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")

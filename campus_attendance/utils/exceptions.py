"""Service-layer exceptions mapped to HTTP status codes."""

class ServiceError(Exception):
    """Base exception for business rule violations."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

class ValidationError(ServiceError):
    """Raised when input data is malformed or incomplete."""
    status_code = 400

class UnauthorizedError(ServiceError):
    """Raised when a submitted credential does not match."""
    status_code = 401

class ForbiddenError(ServiceError):
    """Raised when a user lacks permission for an action."""
    status_code = 403

class NotFoundError(ServiceError):
    """Raised when a referenced entity does not exist."""
    status_code = 404

class ConflictError(ServiceError):
    """Raised when a write would duplicate an existing entity."""
    status_code = 409

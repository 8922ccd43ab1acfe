# backend/utils/errors.py
from typing import Dict, Optional


class IntakeError(Exception):
    """Base class for failures reported to the caller as {"error": message}."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class ValidationError(IntakeError):
    status_code = 400
    default_message = "Invalid request"


class ParseError(ValidationError):
    default_message = "Items must be a JSON array"


class Unauthorized(IntakeError):
    status_code = 401
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(IntakeError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(IntakeError):
    status_code = 404
    default_message = "File not found"


class PayloadTooLarge(IntakeError):
    status_code = 413
    default_message = "File too large"


class StorageError(IntakeError):
    status_code = 500

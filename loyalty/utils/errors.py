"""
Standardized error response utilities for the loyalty API.

Every error body has the same shape:
{
    "message": "User-friendly error message",
    "code": "ERROR_CODE",
    "errors": [{"field": "...", "message": "..."}]   # validation only
}

Usage:
    from loyalty.utils.errors import error_response, ErrorCode

    return error_response("Deal not found", ErrorCode.NOT_FOUND, 404)
"""
import logging
from enum import Enum
from flask import jsonify
from typing import List, Optional

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Authentication & Authorization (401, 403)
    AUTH_REQUIRED = "AUTH_REQUIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    ACCOUNT_PENDING = "ACCOUNT_PENDING"
    PERMISSION_DENIED = "PERMISSION_DENIED"

    # Validation Errors (400)
    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Not Found (404)
    NOT_FOUND = "NOT_FOUND"

    # Conflict (409)
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Business Logic Errors
    INSUFFICIENT_POINTS = "INSUFFICIENT_POINTS"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    REDEMPTION_CLOSED = "REDEMPTION_CLOSED"

    # Server Errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_response(
    message: str,
    code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    status_code: int = 500,
    log_error: bool = True,
    errors: Optional[List[dict]] = None,
    details: Optional[dict] = None
) -> tuple:
    """
    Create a standardized error response.

    Args:
        message: User-friendly error message
        code: Error code from ErrorCode enum (or a plain string code)
        status_code: HTTP status code
        log_error: Whether to log the error
        errors: Optional field-level validation messages, returned to the client
        details: Optional additional details (only logged, not returned to user)

    Returns:
        Tuple of (response, status_code) for Flask
    """
    code_value = code.value if isinstance(code, ErrorCode) else code

    if log_error and status_code >= 500:
        logger.error(f"API Error [{code_value}]: {message}", extra={"details": details})
    elif log_error and status_code >= 400:
        logger.warning(f"API Error [{code_value}]: {message}", extra={"details": details})

    response = {
        "message": message,
        "code": code_value
    }
    if errors:
        response["errors"] = errors

    return jsonify(response), status_code


def bad_request(message: str, code: ErrorCode = ErrorCode.INVALID_REQUEST, errors: Optional[List[dict]] = None) -> tuple:
    """400 Bad Request error."""
    return error_response(message, code, 400, log_error=False, errors=errors)


def unauthorized(message: str = "Authentication required", code: ErrorCode = ErrorCode.AUTH_REQUIRED) -> tuple:
    """401 Unauthorized error."""
    return error_response(message, code, 401, log_error=False)


def forbidden(message: str = "Permission denied", code: ErrorCode = ErrorCode.PERMISSION_DENIED) -> tuple:
    """403 Forbidden error."""
    return error_response(message, code, 403, log_error=False)


def not_found(message: str = "Resource not found", code: ErrorCode = ErrorCode.NOT_FOUND) -> tuple:
    """404 Not Found error."""
    return error_response(message, code, 404, log_error=False)


def conflict(message: str = "Resource already exists", code: ErrorCode = ErrorCode.DUPLICATE_ENTRY) -> tuple:
    """409 Conflict error."""
    return error_response(message, code, 409, log_error=False)


def internal_error(message: str = "An unexpected error occurred", details: Optional[dict] = None) -> tuple:
    """500 Internal Server Error."""
    return error_response(message, ErrorCode.INTERNAL_ERROR, 500, log_error=True, details=details)


def validation_errors(exc) -> List[dict]:
    """Flatten a pydantic ValidationError into [{field, message}] entries."""
    flattened = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err.get('loc', ()) if part != 'body')
        message = err.get('msg', 'Invalid value')
        if message.startswith('Value error, '):
            message = message[len('Value error, '):]
        flattened.append({'field': field, 'message': message})
    return flattened

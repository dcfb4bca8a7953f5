"""
Utility modules for the loyalty platform.
"""
from .logging_config import setup_logging, get_logger
from .errors import (
    ErrorCode,
    error_response,
    bad_request,
    unauthorized,
    forbidden,
    not_found,
    conflict,
    internal_error
)
from .exceptions import (
    LoyaltyError,
    NotFoundError,
    ValidationError,
    InsufficientPointsError,
    InvalidStatusTransitionError,
    DuplicateError,
    OutOfStockError,
    RedemptionWindowError,
    AuthenticationError,
    AuthorizationError,
    InvalidTokenError
)

"""
Custom exceptions for loyalty business logic.

Services raise these; the app-level error handler turns them into the
standard JSON error body with the exception's HTTP status.
"""


class LoyaltyError(Exception):
    """Base exception for all loyalty business logic errors."""

    status_code = 400

    def __init__(self, message: str, code: str = "LOYALTY_ERROR", status_code: int = None):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class NotFoundError(LoyaltyError):
    """Resource not found."""

    status_code = 404

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with ID {identifier} not found"
        super().__init__(message, "NOT_FOUND")


class ValidationError(LoyaltyError):
    """Invalid input data."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message, "VALIDATION_ERROR")


class InsufficientPointsError(LoyaltyError):
    """Not enough available points for the operation."""

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        message = f"Insufficient points. Available: {available}, Required: {required}"
        super().__init__(message, "INSUFFICIENT_POINTS")


class InvalidStatusTransitionError(LoyaltyError):
    """Invalid status transition for a resource."""

    status_code = 409

    def __init__(self, resource: str, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        message = f"Cannot change {resource} status from '{from_status}' to '{to_status}'"
        super().__init__(message, "INVALID_STATUS_TRANSITION")


class DuplicateError(LoyaltyError):
    """Resource already exists."""

    status_code = 409

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} already exists"
        if identifier:
            message = f"{resource} with {identifier} already exists"
        super().__init__(message, "DUPLICATE_ENTRY")


class OutOfStockError(LoyaltyError):
    """Reward has no stock left."""

    status_code = 409

    def __init__(self, reward_name: str):
        super().__init__(f"Reward '{reward_name}' is out of stock", "OUT_OF_STOCK")


class RedemptionWindowError(LoyaltyError):
    """Redemption attempted outside the region's configured window."""

    def __init__(self, message: str = "Redemptions are closed for your region at this time"):
        super().__init__(message, "REDEMPTION_CLOSED")


class AuthenticationError(LoyaltyError):
    """Credentials or token rejected."""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials", code: str = "INVALID_CREDENTIALS"):
        super().__init__(message, code)


class AuthorizationError(LoyaltyError):
    """User not authorized for this operation."""

    status_code = 403

    def __init__(self, message: str = "Not authorized for this operation"):
        super().__init__(message, "PERMISSION_DENIED")


class InvalidTokenError(LoyaltyError):
    """Invite or reset token is unknown, expired or already used."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, "INVALID_TOKEN")

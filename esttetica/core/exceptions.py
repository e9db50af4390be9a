"""Custom exception types for the service and API layers."""
from typing import Optional


class AppError(Exception):
    """Base app exception, rendered as a JSON error with its status code."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(AppError):
    """Missing or unresolvable bearer credential."""

    status_code = 401
    default_message = "Unauthorized"


class BadRequestError(AppError):
    """Validation failure for user input."""

    status_code = 400
    default_message = "Bad request"


class NotFoundError(AppError):
    """Requested record does not exist."""

    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Request does not apply to the record's current state."""

    status_code = 409
    default_message = "Conflict"


class IntegrationError(AppError):
    """External integration call failure."""

    status_code = 502
    default_message = "Upstream provider error"


class PremiumRequiredError(Exception):
    """Raised by the entitlement gate; answered with a redirect."""

    def __init__(self, redirect_to: str):
        self.redirect_to = redirect_to
        super().__init__(f"Premium subscription required, redirecting to {redirect_to}")

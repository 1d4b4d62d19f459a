"""Custom exceptions for Kantin Bot."""
from __future__ import annotations


class KantinException(Exception):
    """Base exception for all Kantin Bot errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


# =============================================================================
# AUTH
# =============================================================================


class AuthenticationRequired(KantinException):
    """Action needs a signed-in user but no token is stored."""

    def __init__(self, message: str = "Login required") -> None:
        super().__init__(message)


class SessionExpired(KantinException):
    """API answered 401 or the stored token is past its expiry."""

    def __init__(self, message: str = "Session expired") -> None:
        super().__init__(message)


class AuthorizationException(KantinException):
    """Signed-in user lacks the role for an action."""

    pass


# =============================================================================
# VALIDATION (blocked before any network call)
# =============================================================================


class ValidationException(KantinException):
    """Input validation errors."""

    pass


class EmptyCartError(ValidationException):
    def __init__(self) -> None:
        super().__init__("Cart is empty")


class ProofImageRequired(ValidationException):
    def __init__(self) -> None:
        super().__init__("Proof of payment image is required")


class ProofImageTooLarge(ValidationException):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Proof image is {size} bytes, limit is {limit}")
        self.size = size
        self.limit = limit


class NotesTooLong(ValidationException):
    def __init__(self, length: int, limit: int) -> None:
        super().__init__(f"Notes are {length} characters, limit is {limit}")
        self.length = length
        self.limit = limit


class InvalidPaymentMethod(ValidationException):
    def __init__(self, method: str) -> None:
        super().__init__(f"Unsupported payment method: {method}")
        self.method = method


class ConfirmationRequired(ValidationException):
    """Irreversible action fired without the confirmation step."""

    pass


class InvalidFlowState(ValidationException):
    """Checkout confirmation action not allowed in the current state."""

    def __init__(self, state: str, action: str) -> None:
        super().__init__(f"Cannot {action} while {state}")
        self.state = state
        self.action = action


# =============================================================================
# NETWORK / API
# =============================================================================


class ApiError(KantinException):
    """Non-2xx response or ``success: false`` body from the API."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NotFoundError(ApiError):
    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message, status=404)


class ApiUnavailable(ApiError):
    """Request never completed (connection error or timeout)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status=None)


class ConfigurationException(KantinException):
    """Configuration errors."""

    pass

"""
Custom exceptions for the application
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Error kinds reported to API clients"""
    BAD_REQUEST = "BadRequest"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    NOT_FOUND = "NotFound"
    PAYMENT_ERROR = "PaymentError"
    INTERNAL_ERROR = "InternalError"


class PropertyServiceError(Exception):
    """Base error carrying the kind and HTTP status used by the shared error handler"""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(PropertyServiceError):
    """Raised for malformed or empty input and duplicate unique keys"""

    kind = ErrorKind.BAD_REQUEST
    status_code = 400


class UnauthorizedError(PropertyServiceError):
    """Raised when the caller is not the owner of a listing"""

    kind = ErrorKind.UNAUTHORIZED
    status_code = 401


class ForbiddenError(PropertyServiceError):
    """Raised for invalid state transitions"""

    kind = ErrorKind.FORBIDDEN
    status_code = 403


class NotFoundError(PropertyServiceError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class UnknownPlanError(BadRequestError):
    """Raised when a premium plan key is not in the catalog"""

    def __init__(self, plan_key: str):
        self.plan_key = plan_key
        super().__init__(f"Unknown premium plan: {plan_key!r}")


class PaymentProviderError(PropertyServiceError):
    """Raised when the checkout provider fails or times out"""

    kind = ErrorKind.PAYMENT_ERROR
    status_code = 502

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(message)


class PaymentSessionUsedError(ForbiddenError):
    """Raised when a paid checkout session has already activated premium"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__("Payment session has already been used")

"""
Error codes and exceptions shared by the API and the client library.

Every failure leaves the server as ``{'error': <message>, 'code': <code>}``;
the client turns the code back into the matching exception class.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes"""
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    DATES_UNAVAILABLE = 'DATES_UNAVAILABLE'
    UNAUTHORIZED = 'UNAUTHORIZED'
    FORBIDDEN = 'FORBIDDEN'
    EMAIL_NOT_VERIFIED = 'EMAIL_NOT_VERIFIED'
    RATE_LIMITED = 'RATE_LIMITED'
    NOT_FOUND = 'NOT_FOUND'
    SERVICE_UNAVAILABLE = 'SERVICE_UNAVAILABLE'
    INTERNAL_ERROR = 'INTERNAL_ERROR'


class ApiError(Exception):
    """Base class for errors that map onto an API error response"""
    code = ErrorCode.INTERNAL_ERROR
    status_code = 500
    retryable = False
    default_message = 'An unexpected error occurred'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        data = {'error': self.message, 'code': self.code.value}
        data.update(self.details)
        return data


class ValidationError(ApiError):
    """Malformed or policy-violating request; reported inline, never retried"""
    code = ErrorCode.VALIDATION_ERROR
    status_code = 400
    default_message = 'Validation failed'


class DatesUnavailableError(ApiError):
    """The requested range collides with a booking or a block"""
    code = ErrorCode.DATES_UNAVAILABLE
    status_code = 409
    default_message = 'Date range is no longer available'


class AuthenticationRequiredError(ApiError):
    code = ErrorCode.UNAUTHORIZED
    status_code = 401
    default_message = 'Authentication required'


class ForbiddenError(ApiError):
    code = ErrorCode.FORBIDDEN
    status_code = 403
    default_message = 'Insufficient permissions'


class VerificationRequiredError(ApiError):
    """The renter must verify their email before booking"""
    code = ErrorCode.EMAIL_NOT_VERIFIED
    status_code = 403
    default_message = 'Please verify your email address before booking'

    def __init__(self, message=None, verify_url=None):
        details = {'verifyUrl': verify_url} if verify_url else None
        super().__init__(message, details)
        self.verify_url = verify_url


class RateLimitedError(ApiError):
    code = ErrorCode.RATE_LIMITED
    status_code = 429
    default_message = 'Too many requests, slow down'


class NotFoundError(ApiError):
    code = ErrorCode.NOT_FOUND
    status_code = 404
    default_message = 'Resource not found'


class ServiceUnavailableError(ApiError):
    """Transport or storage failure; the only class eligible for retry"""
    code = ErrorCode.SERVICE_UNAVAILABLE
    status_code = 503
    retryable = True
    default_message = 'Service temporarily unavailable, please retry'


ERRORS_BY_CODE = {
    cls.code: cls for cls in (
        ValidationError,
        DatesUnavailableError,
        AuthenticationRequiredError,
        ForbiddenError,
        VerificationRequiredError,
        RateLimitedError,
        NotFoundError,
        ServiceUnavailableError,
    )
}


def error_for_code(code, message=None, payload=None):
    """Build the exception matching a wire error code.

    Extra payload fields (``reason``, ``bookingIds``, ...) end up in
    ``details`` so callers can tell why a range was refused.
    """
    payload = payload or {}
    details = {key: value for key, value in payload.items() if key not in ('error', 'code')}
    try:
        cls = ERRORS_BY_CODE[ErrorCode(code)]
    except (ValueError, KeyError):
        return ApiError(message, details)
    if cls is VerificationRequiredError:
        return cls(message, verify_url=payload.get('verifyUrl'))
    return cls(message, details)

"""
Identifier Verification Error Classes

Exception hierarchy for failures talking to the bibliographic lookup
service. The retry policy decides from the exception type whether a batch
request is worth repeating.

Error Hierarchy:
    VerificationError (base)
    ├── RateLimitError (HTTP 429, transient)
    ├── NetworkError (no response received, transient)
    ├── RequestTimeoutError (no response within the timeout, transient)
    ├── InvalidRequestError (other 4xx, permanent)
    ├── ServiceError (5xx, permanent)
    └── ResponseFormatError (unexpected response body, permanent)
"""

from typing import Optional


class VerificationError(Exception):
    """Base exception for identifier verification failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(VerificationError):
    """Raised when the service answers 429 Too Many Requests.

    Transient: retried with exponential backoff.
    """
    pass


class NetworkError(VerificationError):
    """Raised when no response was received (DNS, refused connection, TLS).

    Transient: retried with exponential backoff.
    """
    pass


class RequestTimeoutError(VerificationError):
    """Raised when the service did not answer within the request timeout.

    Transient: retried with exponential backoff.
    """
    pass


class InvalidRequestError(VerificationError):
    """Raised for 4xx answers other than 429, e.g. a malformed payload.

    Permanent: never retried.
    """
    pass


class ServiceError(VerificationError):
    """Raised for 5xx answers. Permanent: never retried."""
    pass


class ResponseFormatError(VerificationError):
    """Raised when the response body is not a list parallel to the request.

    Permanent: never retried.
    """
    pass

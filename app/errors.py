# app/errors.py

from typing import Optional


class ServiceError(Exception):
    """Base error rendered as an ErrorResponse with its own status code."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class ValidationError(ServiceError):
    """Bad or missing client input."""

    status_code = 400


class ConfigurationError(ServiceError):
    """Missing credentials or index ids."""

    status_code = 500


class AuthenticationError(ServiceError):
    status_code = 401

    def __init__(self, message: str = "Authentication failed. Please check your API configuration."):
        super().__init__(message)


class RateLimitError(ServiceError):
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please wait a moment before searching again."):
        super().__init__(message)


class UpstreamUnavailableError(ServiceError):
    """Upstream kept answering 500 after every retry."""

    status_code = 500

    def __init__(self, message: str = (
        "Twelve Labs API is temporarily unavailable (500). Please try again in a few moments."
    )):
        super().__init__(message)


class UpstreamError(ServiceError):
    """Any other non-2xx upstream answer, or a failed upstream exchange."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[str] = None):
        super().__init__(message, status_code=status_code, details=details)

"""Exception classes for postcheck.

This module defines the exception hierarchy used to separate fatal setup
failures from per-scenario failures when verifying a posts API.
"""

from typing import Optional, Dict, Any


class PostCheckError(Exception):
    """Base exception class for all postcheck errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(PostCheckError):
    """Exception raised for configuration-related errors."""
    pass


class SetupError(PostCheckError):
    """Exception raised when registration or login fails.

    Setup is a hard precondition: no scenario runs after this is raised.
    """

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            step: Setup step that failed (register, login)
            status_code: HTTP status code returned, if any
            **kwargs: Additional arguments passed to parent class
        """
        super().__init__(message, **kwargs)
        self.step = step
        self.status_code = status_code


class ExpectationError(PostCheckError):
    """Exception raised when a response does not meet an expectation."""

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
        response_data: Any = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            expected: The expected value
            actual: The value actually observed
            response_data: Raw response body, for debugging
        """
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.response_data = response_data


class RequestFailedError(PostCheckError):
    """Exception raised when a request fails at the network level."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            method: HTTP method of the failed request
            url: Target URL of the failed request
            timeout: Timeout in effect, if the request timed out
        """
        super().__init__(message)
        self.method = method
        self.url = url
        self.timeout = timeout


class ValidationError(PostCheckError):
    """Exception raised for data validation and rendering errors."""
    pass


def format_error_for_user(error: Exception, debug: bool = False) -> str:
    """Format an error message for user display.

    Args:
        error: The exception to format
        debug: Whether to include debug information

    Returns:
        Formatted error message
    """
    if isinstance(error, ExpectationError):
        message = error.message
        message += f"\n  expected: {error.expected!r}"
        message += f"\n  actual:   {error.actual!r}"
        if debug and error.response_data is not None:
            message += f"\n  response: {error.response_data!r}"
        return message

    if isinstance(error, SetupError):
        message = f"Setup failed: {error.message}"
        if error.step:
            message += f"\nStep: {error.step}"
        if error.status_code is not None:
            message += f"\nStatus code: {error.status_code}"
        return message

    if isinstance(error, RequestFailedError):
        message = f"Request failed: {error.message}"
        if error.method and error.url:
            message += f"\nRequest: {error.method} {error.url}"
        if error.timeout:
            message += f"\nTimeout: {error.timeout}s"
        return message

    if isinstance(error, ConfigError):
        return f"Configuration error: {error.message}"

    if debug:
        return f"Error: {str(error)}\nType: {type(error).__name__}"
    return f"Error: {str(error)}"

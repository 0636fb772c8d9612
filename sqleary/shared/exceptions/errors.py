"""
Sqleary Exceptions

Configuration problems are raised before any SQL is built or sent.
Transport problems are raised by the transports and pass through the
engine unchanged.
"""

from typing import Optional


class SqlearyError(Exception):
    """Base exception for sqleary."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        return self.message


class QueryConfigError(SqlearyError):
    """Raised when a query object cannot be turned into SQL."""
    pass


class SQLBuilderError(SqlearyError):
    """Raised when sqlglot cannot validate or convert generated SQL."""
    pass


class TransportError(SqlearyError):
    """Base exception for failures while sending SQL to its destination."""

    def __init__(
        self,
        message: str,
        transport: str = "",
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
        details: dict = None
    ):
        super().__init__(message, details=details)
        self.transport = transport
        self.status_code = status_code
        self.original_error = original_error

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class ConnectionError(TransportError):
    """Raised when the execution destination cannot be reached."""
    pass


class TimeoutError(TransportError):
    """Raised when the execution destination does not answer in time."""
    pass


class AuthenticationError(TransportError):
    """Raised when the HTTP endpoint rejects the API key."""
    pass


class RateLimitError(TransportError):
    """Raised when the HTTP endpoint throttles requests."""

    def __init__(self, message: str, transport: str = "", retry_after: int = None):
        super().__init__(message, transport=transport, status_code=429)
        self.retry_after = retry_after


class QueryError(TransportError):
    """Raised when the destination fails to execute the SQL."""
    pass

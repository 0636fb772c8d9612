"""
Shared Exceptions

Package-wide exception classes.
"""

from sqleary.shared.exceptions.errors import (
    SqlearyError,
    QueryConfigError,
    SQLBuilderError,
    TransportError,
    ConnectionError,
    TimeoutError,
    AuthenticationError,
    RateLimitError,
    QueryError
)

__all__ = [
    "SqlearyError",
    "QueryConfigError",
    "SQLBuilderError",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "AuthenticationError",
    "RateLimitError",
    "QueryError"
]

"""Exception hierarchy for the JustTCG client.

Transport-level failures are raised. API-level failures (a 2xx response
carrying ``error``/``code``) are returned as data on ``ApiResponse`` and
only raised as ``ApiError`` where a caller cannot inspect each response,
e.g. inside a pagination sequence.
"""

from __future__ import annotations

from typing import Optional


class JustTCGError(Exception):
    """Base class for all errors raised by this package."""


class AuthenticationError(JustTCGError):
    """No API key could be resolved when the client was constructed."""


class ConfigError(JustTCGError, ValueError):
    """Invalid client configuration."""


class TransportError(JustTCGError):
    """The HTTP exchange failed: network error, non-2xx status or bad JSON."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class ApiError(JustTCGError):
    """The server answered successfully but reported an error in the payload."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if not self.code:
            return self.message
        return f"{self.message} (code: {self.code})"


class PaginationError(JustTCGError):
    """A paginated sequence exceeded its configured page bound."""

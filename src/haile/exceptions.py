"""Custom exception hierarchy for haile.

All exceptions that cross module boundaries must inherit from
:class:`HaileError`.  Raw ``requests`` exceptions must NEVER propagate
beyond :mod:`haile.client`. They are turned into failed
:class:`~haile.response.Response` objects there, and only become
:class:`RequestError` when the caller asks for it explicitly.

Hierarchy
---------
HaileError
├── BootstrapError
│   └── UnitNotFoundError        (also a ModuleNotFoundError)
├── DependencyMissingError       (also an ImportError)
├── ConfigurationError
├── InvalidURLError
├── InvalidRequestError
└── RequestError
    └── HttpStatusError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from haile.response import Response


class HaileError(Exception):
    """Base exception for all haile errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Load time -------------------------------------------------------------

class BootstrapError(HaileError):
    """Raised when the library cannot finish initialising."""


class UnitNotFoundError(BootstrapError, ModuleNotFoundError):
    """Raised when one of the library's own units cannot be imported.

    Also a :class:`ModuleNotFoundError`, so callers guarding imports
    with the builtin keep working.
    """

    def __init__(self, message: str, *, unit: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.name = unit


class DependencyMissingError(HaileError, ImportError):
    """Raised when a required third-party package is not installed."""

    def __init__(self, message: str, *, package: str, hint: str | None = None) -> None:
        super().__init__(
            message,
            hint=hint or f"Install with: pip install {package}",
        )
        self.name = package


# --- Configuration / input -------------------------------------------------

class ConfigurationError(HaileError):
    """Raised when configuration values are missing or malformed."""


class InvalidURLError(HaileError):
    """Raised when a base URL or request target fails validation."""


class InvalidRequestError(HaileError):
    """Raised when request arguments (headers, body) are malformed."""


# --- Transport -------------------------------------------------------------

class RequestError(HaileError):
    """Raised when a request could not be completed."""

    def __init__(
        self,
        message: str,
        *,
        response: Response | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.response: Response | None = response


class HttpStatusError(RequestError):
    """Raised for a completed request with a non-2xx status code."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        response: Response | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, response=response, hint=hint)
        self.status_code: int = status_code

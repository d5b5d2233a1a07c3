"""Exception hierarchy for SocialMesh.

Everything the application raises on purpose derives from
:class:`SocialMeshException`, which carries a machine-readable ``code`` and a
``context`` dict.  The web layer turns the class into an HTTP status and the
code and context into the JSON error body.

- BusinessException: bad input, missing records, conflicting state
- SecurityException: missing or rejected credentials, missing authority
- ConfigurationException: the application cannot start as configured
"""

from __future__ import annotations

from typing import Any, ClassVar


class SocialMeshException(Exception):
    """Root of the SocialMesh exception hierarchy.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code, e.g. ``"EMAIL_TAKEN"``.  Falls back
            to the class's ``default_code``.
        context: Extra structured details, returned to the client as-is.
    """

    default_code: ClassVar[str | None] = None

    def __init__(self, message: str, code: str | None = None, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.context: dict[str, Any] = context if context is not None else {}


# -- business ---------------------------------------------------------------


class BusinessException(SocialMeshException):
    """A request the domain rules refuse."""


class ValidationException(BusinessException):
    default_code = "VALIDATION_FAILED"


class ResourceNotFoundException(BusinessException):
    default_code = "NOT_FOUND"


class ConflictException(BusinessException):
    """The operation clashes with stored state, such as an email already registered."""

    default_code = "CONFLICT"


# -- security ---------------------------------------------------------------


class SecurityException(SocialMeshException):
    """Authentication and authorization failures."""


class UnauthorizedException(SecurityException):
    """No usable credentials were presented."""

    default_code = "UNAUTHORIZED"


class BadCredentialsException(UnauthorizedException):
    """Sign-in with an unknown email or a wrong password."""

    default_code = "BAD_CREDENTIALS"


class InvalidTokenException(UnauthorizedException):
    """A bearer token that is malformed, wrongly signed, or expired."""

    default_code = "INVALID_TOKEN"


class ForbiddenException(SecurityException):
    """The principal is known but lacks the required authority."""

    default_code = "FORBIDDEN"


# -- startup ----------------------------------------------------------------


class ConfigurationException(SocialMeshException):
    """Missing or invalid configuration, detected while the application is assembled."""

    default_code = "CONFIGURATION_ERROR"

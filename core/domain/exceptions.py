"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Callers branch on ``code``,
never on the message text.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainException):
    """Missing or malformed request data. Not retryable."""

    pass


class NotFoundError(DomainException):
    """A license or plan lookup missed."""

    pass


class ConflictError(DomainException):
    """The requested transition conflicts with the current record state."""

    pass


class StateError(DomainException):
    """A license exists but is not usable in its current state."""

    pass


class InfrastructureError(DomainException):
    """The record store or plan catalog failed. Safe to retry by the caller."""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message, code="SERVICE_UNAVAILABLE")


class MissingParametersError(ValidationError):
    """Raised when a required request field is missing."""

    def __init__(self, message: str = "Missing required parameters"):
        super().__init__(message, code="MISSING_PARAMETERS")


class InvalidParametersError(ValidationError):
    """Raised when a request field has an unusable value."""

    def __init__(self, message: str = "Invalid parameters"):
        super().__init__(message, code="INVALID_PARAMETERS")


class InvalidDurationError(ValidationError):
    """Raised when a plan duration cannot be parsed."""

    def __init__(self, message: str = "Invalid plan duration"):
        super().__init__(message, code="INVALID_DURATION")


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class PlanNotFoundError(NotFoundError):
    """Raised when a plan reference does not resolve."""

    def __init__(self, message: str = "Invalid plan"):
        super().__init__(message, code="INVALID_PLAN")


class NoPlanToLicenseError(NotFoundError):
    """Raised when a license has no resolvable plan at activation time."""

    def __init__(self, message: str = "No plan attached to this license"):
        super().__init__(message, code="NO_PLAN_TO_LICENSE")


class LicenseAlreadyActiveError(ConflictError):
    """Raised when activating a license that was already activated."""

    def __init__(self, message: str = "License is already active"):
        super().__init__(message, code="LICENSE_ALREADY_ACTIVE")


class StaleCandidateError(ConflictError):
    """Raised when a superseded license changed before it could be truncated."""

    def __init__(self, message: str = "Superseded license was modified concurrently"):
        super().__init__(message, code="CANDIDATE_CONSUMED")


class DuplicateLicenseValueError(ConflictError):
    """Raised by the store when a generated license value already exists."""

    def __init__(self, message: str = "License value already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE_VALUE")


class LicenseNotActiveError(StateError):
    """Raised when validating a license that was never activated."""

    def __init__(self, message: str = "License is not active"):
        super().__init__(message, code="LICENSE_NOT_ACTIVE")


class IdentifierMismatchError(StateError):
    """Raised when a license is bound to a different identifier."""

    def __init__(self, message: str = "Identifier does not match license"):
        super().__init__(message, code="IDENTIFIER_MISMATCH")


class LicenseExpiredError(StateError):
    """Raised when a license has expired."""

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="LICENSE_EXPIRED")

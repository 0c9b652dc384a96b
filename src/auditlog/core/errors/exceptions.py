"""Domain exceptions for the audit policy.

These exceptions represent policy and configuration errors and are
converted to RFC 7807 Problem Details responses by the exception handlers
when raised through the admin API.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all audit policy errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Type not mapped", resource="type", resource_id=name)
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class TypeNotFoundError(NotFoundError):
    """Raised when a fully-qualified type name cannot be loaded.

    Example:
        raise TypeNotFoundError(name="app.models.Patient")
    """

    message = "Type not found"
    error_code = "type_not_found"

    def __init__(self, message: str | None = None, name: str | None = None) -> None:
        super().__init__(
            message=message or (f"Failed to load type: {name}" if name else None),
            resource="type",
            resource_id=name,
        )
        self.name = name


class PolicyStateError(AppException):
    """Raised when an operation is not allowed under the active strategy.

    Example:
        raise PolicyStateError(
            "Can't start auditing when the strategy is NONE",
            details={"strategy": "NONE"},
        )
    """

    message = "Operation not allowed under the current auditing strategy"
    error_code = "policy_state_error"
    status_code = 409


class PersistenceError(AppException):
    """Raised when a configuration value cannot be written.

    Example:
        raise PersistenceError("Failed to save auditlog.exceptions")
    """

    message = "Failed to persist configuration"
    error_code = "persistence_error"
    status_code = 503


class ConfigurationError(AppException):
    """Raised when a stored configuration value is malformed.

    Example:
        raise ConfigurationError(
            "Unknown auditing strategy",
            details={"property": "auditlog.auditingStrategy", "value": "SOME"},
        )
    """

    message = "Invalid configuration"
    error_code = "configuration_error"
    status_code = 500

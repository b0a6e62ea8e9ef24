"""Core exception hierarchy for the Trifonius engine.

All Trifonius exceptions inherit from TrifoniusError. The hierarchy follows
four families that callers can branch on:

- ``ValidationError``: bad input (identifiers, placeholders, junction
  bindings, parameters, profiles). Always raised before any remote call.
- ``ResourceNotFoundError``: unknown realization, resource or deployed service.
- ``RemoteError``: the platform client failed. Never retried by the engine.
- ``ConfigurationError``: invalid static configuration. Fatal to registry
  construction.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class TrifoniusError(Exception):
    """Base exception for all Trifonius errors.

    Catch this to handle all Trifonius errors.
    """

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(TrifoniusError):
    """Raised when static configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("processor 'consentfilter'", "missing 'dshservice' section")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the component with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in {component}: {reason}")
        self.component = component
        self.reason = reason


class ValidationError(TrifoniusError):
    """Raised when input validation fails.

    Examples
    --------
    Example usage::

        raise ValidationError("profile", "is not declared", value="huge")
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


class IdentifierError(ValidationError):
    """Raised when a raw string does not match an identifier pattern.

    The message always reads ``'<value>' is not a valid <description>``.
    """

    def __init__(self, domain: str, value: str, description: str) -> None:
        Exception.__init__(self, f"'{value}' is not a valid {description}")
        self.field = description
        self.constraint = "does not match pattern"
        self.domain = domain
        self.value = value
        self.description = description


class PlaceholderError(ValidationError):
    """Base exception for template placeholder errors."""

    def __init__(self, placeholder: str, reason: str) -> None:
        Exception.__init__(self, f"Placeholder '{placeholder}' {reason}")
        self.field = "template"
        self.constraint = reason
        self.value = placeholder
        self.placeholder = placeholder


class UnknownPlaceholderError(PlaceholderError):
    """Raised when a template marker names no defined placeholder."""

    def __init__(self, text: str) -> None:
        super().__init__(text, "is not a recognized placeholder")


class UnresolvedPlaceholderError(PlaceholderError):
    """Raised when a placeholder has no value in the template mapping."""

    def __init__(self, placeholder: str) -> None:
        super().__init__(placeholder, "has no value")


class PlaceholderNotAllowedError(PlaceholderError):
    """Raised when a template uses a placeholder outside its allow-list."""

    def __init__(self, placeholder: str) -> None:
        super().__init__(placeholder, "is not allowed in this template")


class JunctionBindingError(ValidationError):
    """Raised when a junction to resource binding is invalid."""


class ParameterError(ValidationError):
    """Raised when a deployment parameter is missing, unknown or invalid."""


class ProfileError(ValidationError):
    """Raised when a deployment profile is not declared."""


# ============================================================================
# Resource Errors
# ============================================================================


class ResourceNotFoundError(TrifoniusError):
    """Raised when a requested entity cannot be found.

    Examples
    --------
    Example usage::

        raise ResourceNotFoundError("dsh-topic", "stream-x", ["stream-a", "stream-b"])
    """

    def __init__(
        self, resource_type: str, resource_id: str, available: list[str] | None = None
    ) -> None:
        """Initialize resource not found error.

        Args
        ----
            resource_type: Kind of entity (e.g., "processor", "dsh-topic", "service")
            resource_id: Identifier of the missing entity
            available: Identifiers that do exist (optional)
        """
        msg = f"{resource_type.title()} '{resource_id}' not found"
        if available:
            msg += f". Available: {', '.join(available[:5])}"
            if len(available) > 5:
                msg += f" ... and {len(available) - 5} more"
        super().__init__(msg)
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.available = available


class ProcessorNotFoundError(ResourceNotFoundError):
    """Raised when a processor realization is not in the registry."""

    def __init__(self, processor: str, available: list[str] | None = None) -> None:
        super().__init__("processor", processor, available)


class ServiceNotFoundError(ResourceNotFoundError):
    """Raised when no deployed service exists on the platform."""

    def __init__(self, service_name: str) -> None:
        super().__init__("service", service_name)


# ============================================================================
# Remote Errors
# ============================================================================


class RemoteError(TrifoniusError):
    """Raised when the platform client fails.

    Examples
    --------
    Example usage::

        raise RemoteError("deploy service 'pipeline-filter'", "HTTP 500")
    """

    def __init__(self, operation: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"Remote operation '{operation}' failed: {reason}")
        self.operation = operation
        self.reason = reason
        self.status_code = status_code


class PlatformNotFoundError(RemoteError):
    """Raised by platform clients when the addressed object does not exist."""

    def __init__(self, operation: str, target: str) -> None:
        super().__init__(operation, f"'{target}' does not exist", status_code=404)
        self.target = target


__all__ = [
    # Base
    "TrifoniusError",
    # Configuration & Validation
    "ConfigurationError",
    "ValidationError",
    "IdentifierError",
    "PlaceholderError",
    "UnknownPlaceholderError",
    "UnresolvedPlaceholderError",
    "PlaceholderNotAllowedError",
    "JunctionBindingError",
    "ParameterError",
    "ProfileError",
    # Resource
    "ResourceNotFoundError",
    "ProcessorNotFoundError",
    "ServiceNotFoundError",
    # Remote
    "RemoteError",
    "PlatformNotFoundError",
]

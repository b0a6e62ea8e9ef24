"""Trifonius kernel.

Identifiers, placeholder templates, platforms and tenants, the engine
target, port protocols, configuration models, logging and exceptions.
Nothing in the kernel knows about specific processor or resource
technologies.
"""

from trifonius.kernel.config import LoggingConfig, TargetConfig, TrifoniusConfig
from trifonius.kernel.exceptions import (
    ConfigurationError,
    IdentifierError,
    JunctionBindingError,
    ParameterError,
    PlaceholderError,
    PlaceholderNotAllowedError,
    PlatformNotFoundError,
    ProcessorNotFoundError,
    ProfileError,
    RemoteError,
    ResourceNotFoundError,
    ServiceNotFoundError,
    TrifoniusError,
    UnknownPlaceholderError,
    UnresolvedPlaceholderError,
    ValidationError,
)
from trifonius.kernel.identifiers import (
    Identifier,
    JunctionId,
    ParameterId,
    PipelineId,
    ProcessorId,
    ProcessorRealizationId,
    ProfileId,
    ResourceId,
    ServiceName,
    TaskId,
    TenantName,
    identifier_kinds,
    identifier_type,
)
from trifonius.kernel.logging import configure_logging, get_logger
from trifonius.kernel.placeholder import (
    Placeholder,
    TemplateMapping,
    resolve_template,
    template_mapping,
    validate_template,
)
from trifonius.kernel.platform import DshPlatform, Tenant, all_platforms, platform
from trifonius.kernel.ports import ConfigSource, PlatformClient, PlatformClientFactory
from trifonius.kernel.target import EngineTarget

__all__ = [
    # Configuration
    "LoggingConfig",
    "TargetConfig",
    "TrifoniusConfig",
    # Exceptions
    "ConfigurationError",
    "IdentifierError",
    "JunctionBindingError",
    "ParameterError",
    "PlaceholderError",
    "PlaceholderNotAllowedError",
    "PlatformNotFoundError",
    "ProcessorNotFoundError",
    "ProfileError",
    "RemoteError",
    "ResourceNotFoundError",
    "ServiceNotFoundError",
    "TrifoniusError",
    "UnknownPlaceholderError",
    "UnresolvedPlaceholderError",
    "ValidationError",
    # Identifiers
    "Identifier",
    "JunctionId",
    "ParameterId",
    "PipelineId",
    "ProcessorId",
    "ProcessorRealizationId",
    "ProfileId",
    "ResourceId",
    "ServiceName",
    "TaskId",
    "TenantName",
    "identifier_kinds",
    "identifier_type",
    # Logging
    "configure_logging",
    "get_logger",
    # Placeholders
    "Placeholder",
    "TemplateMapping",
    "resolve_template",
    "template_mapping",
    "validate_template",
    # Platforms and target
    "DshPlatform",
    "EngineTarget",
    "Tenant",
    "all_platforms",
    "platform",
    # Ports
    "ConfigSource",
    "PlatformClient",
    "PlatformClientFactory",
]

"""Port interface for static processor and resource configuration."""

from abc import abstractmethod
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConfigSource(Protocol):
    """Source of the static configurations that populate the registries.

    Configurations are plain mappings; the registries parse and validate
    them. Name listings must be sorted so that registry construction is
    deterministic.
    """

    @abstractmethod
    def processor_config_names(self, technology: str) -> list[str]:
        """List the processor configurations available for a technology tag."""
        ...

    @abstractmethod
    def processor_config(self, technology: str, name: str) -> dict[str, Any]:
        """Return one processor configuration.

        Raises
        ------
        ResourceNotFoundError
            If there is no such configuration
        ConfigurationError
            If the configuration cannot be parsed
        """
        ...

    @abstractmethod
    def resource_config_names(self, resource_type: str) -> list[str]:
        """List the resource configurations available for a resource type tag."""
        ...

    @abstractmethod
    def resource_config(self, resource_type: str, name: str) -> dict[str, Any]:
        """Return one resource configuration.

        Raises
        ------
        ResourceNotFoundError
            If there is no such configuration
        ConfigurationError
            If the configuration cannot be parsed
        """
        ...

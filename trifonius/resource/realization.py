"""Behaviour every resource realization provides."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trifonius.kernel.identifiers import PipelineId, ResourceId
    from trifonius.kernel.target import EngineTarget
    from trifonius.resource.instance import ResourceInstance
    from trifonius.resource.models import ResourceDescriptor, ResourceIdentifier, ResourceType


class ResourceRealization(ABC):
    """One concrete platform resource, resolved for the engine's tenant."""

    @property
    @abstractmethod
    def identifier(self) -> ResourceIdentifier: ...

    @property
    def id(self) -> ResourceId:
        return self.identifier.id

    @property
    def resource_type(self) -> ResourceType:
        return self.identifier.resource_type

    @property
    @abstractmethod
    def label(self) -> str: ...

    @property
    @abstractmethod
    def descriptor(self) -> ResourceDescriptor:
        """Resolved descriptor of this resource."""

    @abstractmethod
    def resource_instance(
        self, pipeline_id: PipelineId | None, target: EngineTarget
    ) -> ResourceInstance:
        """Create a runtime handle on this resource."""

    def __str__(self) -> str:
        return f"{self.identifier} ({self.label})"

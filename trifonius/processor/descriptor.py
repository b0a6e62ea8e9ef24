"""Read-only, template-resolved descriptions of processors for presentation."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from trifonius.kernel.identifiers import JunctionId, ParameterId, ProcessorRealizationId, ProfileId
from trifonius.processor.models import JunctionDirection, ProcessorTechnology
from trifonius.resource.models import ResourceType

if TYPE_CHECKING:
    from trifonius.processor.config import ParameterType


@dataclass(frozen=True, slots=True)
class JunctionDescriptor:
    id: JunctionId
    direction: JunctionDirection
    label: str
    description: str
    allowed_resource_types: tuple[ResourceType, ...]
    required: bool = True

    def allows(self, resource_type: ResourceType) -> bool:
        return resource_type in self.allowed_resource_types


@dataclass(frozen=True, slots=True)
class DeploymentParameterDescriptor:
    id: ParameterId
    type: ParameterType
    label: str
    description: str
    optional: bool
    default: str | None = None
    options: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class ProfileDescriptor:
    id: ProfileId
    label: str
    description: str
    cpus: float
    mem: int
    instances: int
    is_default: bool = False


@dataclass(frozen=True, slots=True)
class ProcessorDescriptor:
    """Everything a user needs to pick, bind and deploy a processor.

    All lists are sorted by id and every template has been resolved against
    the tenant's mapping.
    """

    technology: ProcessorTechnology
    id: ProcessorRealizationId
    label: str
    description: str
    version: str | None
    metadata: tuple[tuple[str, str], ...]
    inbound_junctions: tuple[JunctionDescriptor, ...]
    outbound_junctions: tuple[JunctionDescriptor, ...]
    deployment_parameters: tuple[DeploymentParameterDescriptor, ...]
    profiles: tuple[ProfileDescriptor, ...]
    more_info_url: str | None = None
    metrics_url: str | None = None
    viewer_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

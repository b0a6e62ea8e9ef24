"""Resource types, identifiers, descriptors and status."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from trifonius.kernel.exceptions import ValidationError
from trifonius.kernel.identifiers import ResourceId


class ResourceType(StrEnum):
    """Closed set of resource technologies."""

    DSH_TOPIC = "dsh-topic"

    @property
    def label(self) -> str:
        match self:
            case ResourceType.DSH_TOPIC:
                return "DSH Topic"

    @property
    def description(self) -> str:
        match self:
            case ResourceType.DSH_TOPIC:
                return "Kafka topic managed by the DSH platform"


@dataclass(frozen=True, slots=True, order=True)
class ResourceIdentifier:
    """Global key of a resource: its type plus its id.

    Rendered as ``<id>:<type>``.
    """

    resource_type: ResourceType
    id: ResourceId

    def __post_init__(self) -> None:
        object.__setattr__(self, "resource_type", ResourceType(self.resource_type))
        object.__setattr__(self, "id", ResourceId(self.id))

    @classmethod
    def parse(cls, text: str) -> ResourceIdentifier:
        """Parse ``<id>:<type>``.

        Raises
        ------
        ValidationError
            If the text is malformed or names an unknown type
        """
        resource_id, sep, resource_type = text.rpartition(":")
        if not sep:
            raise ValidationError("resource identifier", "expected '<id>:<type>'", text)
        try:
            return cls(ResourceType(resource_type), ResourceId(resource_id))
        except ValueError:
            raise ValidationError(
                "resource type", "is not a known resource type", resource_type
            ) from None

    def __str__(self) -> str:
        return f"{self.id}:{self.resource_type}"


@dataclass(frozen=True, slots=True)
class DshTopicDescriptor:
    """Topic-specific part of a resource descriptor."""

    topic: str
    partitions: int
    replication_factor: int


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    """Resolved, read-only description of one resource for presentation."""

    resource_type: ResourceType
    id: ResourceId
    label: str
    description: str
    version: str | None = None
    dsh_topic: DshTopicDescriptor | None = None

    @property
    def identifier(self) -> ResourceIdentifier:
        return ResourceIdentifier(self.resource_type, self.id)


@dataclass(frozen=True, slots=True)
class ResourceTypeDescriptor:
    """Presentation data for a resource type."""

    resource_type: ResourceType
    label: str
    description: str

    @classmethod
    def of(cls, resource_type: ResourceType) -> ResourceTypeDescriptor:
        return cls(resource_type, resource_type.label, resource_type.description)


@dataclass(frozen=True, slots=True)
class ResourceStatus:
    """Allocation status of a resource as reported by the platform."""

    up: bool

    def __str__(self) -> str:
        return "up" if self.up else "down"

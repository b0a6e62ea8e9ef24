"""Resources: realizations, instances and the resource registry."""

from trifonius.resource.instance import ResourceInstance
from trifonius.resource.models import (
    DshTopicDescriptor,
    ResourceDescriptor,
    ResourceIdentifier,
    ResourceStatus,
    ResourceType,
    ResourceTypeDescriptor,
)
from trifonius.resource.realization import ResourceRealization
from trifonius.resource.registry import ResourceRegistry

__all__ = [
    "DshTopicDescriptor",
    "ResourceDescriptor",
    "ResourceIdentifier",
    "ResourceInstance",
    "ResourceRealization",
    "ResourceRegistry",
    "ResourceStatus",
    "ResourceType",
    "ResourceTypeDescriptor",
]

"""Registry of resource realizations across all resource types."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from trifonius.kernel.exceptions import ResourceNotFoundError
from trifonius.resource.dshtopic import DshTopicRealization, DshTopicRegistry, topic_status
from trifonius.resource.models import (
    ResourceIdentifier,
    ResourceStatus,
    ResourceType,
    ResourceTypeDescriptor,
)

if TYPE_CHECKING:
    from trifonius.kernel.identifiers import ResourceId
    from trifonius.kernel.ports import ConfigSource, PlatformClient
    from trifonius.kernel.target import EngineTarget
    from trifonius.resource.models import ResourceDescriptor
    from trifonius.resource.realization import ResourceRealization

DescriptorWithStatus = tuple["ResourceDescriptor", "ResourceStatus | None"]


class ResourceRegistry:
    """All resources known to the engine, one sub-registry per resource type.

    Templates in the resource configurations are resolved once, at
    construction, against the target's tenant. The registry is read-only
    afterwards.

    Parameters
    ----------
    config_source : ConfigSource
        Where the resource configurations come from
    target : EngineTarget
        Tenant whose template mapping resolves the configurations

    Raises
    ------
    ConfigurationError
        If any resource configuration is invalid
    """

    def __init__(self, config_source: ConfigSource, target: EngineTarget) -> None:
        mapping = target.template_mapping()
        self._dsh_topics = DshTopicRegistry(config_source, mapping)

    def resource_realization(
        self, resource_type: ResourceType, resource_id: ResourceId | str
    ) -> ResourceRealization:
        """Look up a realization.

        Raises
        ------
        ResourceNotFoundError
            If there is no resource with this type and id
        """
        match resource_type:
            case ResourceType.DSH_TOPIC:
                return self._dsh_topics.realization(resource_id)

    def resource_realization_by_identifier(
        self, identifier: ResourceIdentifier
    ) -> ResourceRealization:
        return self.resource_realization(identifier.resource_type, identifier.id)

    def resource_descriptor(
        self, resource_type: ResourceType, resource_id: ResourceId | str
    ) -> ResourceDescriptor:
        return self.resource_realization(resource_type, resource_id).descriptor

    def resource_descriptor_by_identifier(
        self, identifier: ResourceIdentifier
    ) -> ResourceDescriptor:
        return self.resource_realization_by_identifier(identifier).descriptor

    def resource_realizations_by_type(
        self, resource_type: ResourceType
    ) -> list[ResourceRealization]:
        match resource_type:
            case ResourceType.DSH_TOPIC:
                return list(self._dsh_topics.realizations())

    def resource_descriptors(self) -> list[ResourceDescriptor]:
        """Descriptors of all resources, sorted by identifier."""
        return [
            descriptor
            for resource_type in ResourceType
            for descriptor in self.resource_descriptors_by_type(resource_type)
        ]

    def resource_descriptors_by_type(self, resource_type: ResourceType) -> list[ResourceDescriptor]:
        return [r.descriptor for r in self.resource_realizations_by_type(resource_type)]

    def resource_identifiers(self) -> list[ResourceIdentifier]:
        return [descriptor.identifier for descriptor in self.resource_descriptors()]

    def resource_identifiers_by_type(self, resource_type: ResourceType) -> list[ResourceIdentifier]:
        return [r.identifier for r in self.resource_realizations_by_type(resource_type)]

    def resource_types(self) -> list[ResourceTypeDescriptor]:
        return [ResourceTypeDescriptor.of(resource_type) for resource_type in ResourceType]

    async def resource_descriptors_with_status(
        self, client: PlatformClient
    ) -> list[DescriptorWithStatus]:
        """Descriptors of all resources with their platform status.

        Status queries run concurrently. A resource the platform does not
        know gets status None.

        Raises
        ------
        RemoteError
            If any status query fails for another reason
        """
        realizations = [
            realization
            for resource_type in ResourceType
            for realization in self.resource_realizations_by_type(resource_type)
        ]
        return await self._with_status(realizations, client)

    async def resource_descriptors_by_type_with_status(
        self, resource_type: ResourceType, client: PlatformClient
    ) -> list[DescriptorWithStatus]:
        return await self._with_status(self.resource_realizations_by_type(resource_type), client)

    async def _with_status(
        self, realizations: list[ResourceRealization], client: PlatformClient
    ) -> list[DescriptorWithStatus]:
        statuses = await asyncio.gather(*(self._status(r, client) for r in realizations))
        return [(r.descriptor, status) for r, status in zip(realizations, statuses, strict=True)]

    @staticmethod
    async def _status(
        realization: ResourceRealization, client: PlatformClient
    ) -> ResourceStatus | None:
        match realization:
            case DshTopicRealization():
                try:
                    return await topic_status(realization, client)
                except ResourceNotFoundError:
                    return None

    def __len__(self) -> int:
        return len(self._dsh_topics)

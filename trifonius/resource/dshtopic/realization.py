"""DSH topic resource realization."""

from __future__ import annotations

from typing import TYPE_CHECKING

from trifonius.kernel.placeholder import resolve_template
from trifonius.resource.dshtopic.instance import DshTopicInstance
from trifonius.resource.models import (
    DshTopicDescriptor,
    ResourceDescriptor,
    ResourceIdentifier,
    ResourceType,
)
from trifonius.resource.realization import ResourceRealization

if TYPE_CHECKING:
    from trifonius.kernel.identifiers import PipelineId
    from trifonius.kernel.placeholder import TemplateMapping
    from trifonius.kernel.target import EngineTarget
    from trifonius.resource.dshtopic.config import DshTopicConfig


class DshTopicRealization(ResourceRealization):
    """A DSH topic with its templates resolved for one tenant.

    Raises
    ------
    PlaceholderError
        If a template in ``config`` cannot be resolved against ``mapping``
    """

    def __init__(self, config: DshTopicConfig, mapping: TemplateMapping) -> None:
        self._identifier = ResourceIdentifier(ResourceType.DSH_TOPIC, config.id)
        self._descriptor = ResourceDescriptor(
            resource_type=ResourceType.DSH_TOPIC,
            id=config.id,
            label=resolve_template(config.label, mapping),
            description=resolve_template(config.description, mapping),
            version=config.version,
            dsh_topic=DshTopicDescriptor(
                topic=resolve_template(config.topic, mapping),
                partitions=config.partitions,
                replication_factor=config.replication_factor,
            ),
        )

    @property
    def identifier(self) -> ResourceIdentifier:
        return self._identifier

    @property
    def label(self) -> str:
        return self._descriptor.label

    @property
    def descriptor(self) -> ResourceDescriptor:
        return self._descriptor

    @property
    def topic(self) -> str:
        assert self._descriptor.dsh_topic is not None
        return self._descriptor.dsh_topic.topic

    def resource_instance(
        self, pipeline_id: PipelineId | None, target: EngineTarget
    ) -> DshTopicInstance:
        return DshTopicInstance(pipeline_id, self, target)

"""DSH service processor realization."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from trifonius.kernel.exceptions import ConfigurationError
from trifonius.kernel.logging import get_logger
from trifonius.kernel.placeholder import resolve_template
from trifonius.processor.descriptor import ProcessorDescriptor, ProfileDescriptor
from trifonius.processor.dshservice.config import DshServiceConfig
from trifonius.processor.dshservice.instance import DshServiceInstance
from trifonius.processor.models import JunctionDirection, ProcessorIdentifier, ProcessorTechnology
from trifonius.processor.realization import ProcessorRealization

if TYPE_CHECKING:
    from trifonius.kernel.identifiers import PipelineId, ProcessorId
    from trifonius.kernel.placeholder import TemplateMapping
    from trifonius.kernel.target import EngineTarget
    from trifonius.processor.descriptor import JunctionDescriptor
    from trifonius.resource.registry import ResourceRegistry

logger = get_logger(__name__)


class DshServiceRealization(ProcessorRealization):
    """Processor realization backed by a DSH service configuration."""

    def __init__(self, config: DshServiceConfig, resource_registry: ResourceRegistry) -> None:
        if config.processor.technology not in (None, ProcessorTechnology.DSH_SERVICE):
            raise ConfigurationError(
                f"processor '{config.processor.id}'",
                f"technology is '{config.processor.technology}', expected "
                f"'{ProcessorTechnology.DSH_SERVICE}'",
            )
        self._config = config
        self._resource_registry = resource_registry
        self._identifier = ProcessorIdentifier(ProcessorTechnology.DSH_SERVICE, config.processor.id)

    @classmethod
    def from_config(
        cls, raw: dict[str, Any], resource_registry: ResourceRegistry, source: str = "<config>"
    ) -> DshServiceRealization:
        """Parse a raw configuration mapping.

        Raises
        ------
        ConfigurationError
            If the configuration does not validate
        """
        try:
            config = DshServiceConfig.model_validate(raw)
        except PydanticValidationError as e:
            raise ConfigurationError(f"dsh service config {source}", str(e)) from e
        return cls(config, resource_registry)

    @property
    def config(self) -> DshServiceConfig:
        return self._config

    @property
    def resource_registry(self) -> ResourceRegistry:
        return self._resource_registry

    @property
    def identifier(self) -> ProcessorIdentifier:
        return self._identifier

    @property
    def label(self) -> str:
        return self._config.processor.label

    def descriptor(self, target: EngineTarget) -> ProcessorDescriptor:
        mapping = target.template_mapping()
        section = self._config.processor
        profiles = self._config.dshservice.profiles
        return ProcessorDescriptor(
            technology=self.technology,
            id=self.id,
            label=resolve_template(section.label, mapping),
            description=resolve_template(section.description, mapping),
            version=section.version,
            metadata=tuple(
                (key, resolve_template(value, mapping)) for key, value in section.metadata
            ),
            inbound_junctions=tuple(self._junction_descriptors(JunctionDirection.INBOUND, mapping)),
            outbound_junctions=tuple(
                self._junction_descriptors(JunctionDirection.OUTBOUND, mapping)
            ),
            deployment_parameters=tuple(
                config.to_descriptor(parameter_id, mapping)
                for parameter_id, config in sorted(self._config.deploy.parameters.items())
            ),
            profiles=tuple(
                ProfileDescriptor(
                    id=profile_id,
                    label=resolve_template(profile.label, mapping),
                    description=resolve_template(profile.description, mapping),
                    cpus=profile.cpus,
                    mem=profile.mem,
                    instances=profile.instances,
                    is_default=profile.default,
                )
                for profile_id, profile in sorted(profiles.items())
            ),
            more_info_url=section.more_info_url,
            metrics_url=section.metrics_url,
            viewer_url=section.viewer_url,
        )

    def inbound_junction_descriptors(self, target: EngineTarget) -> list[JunctionDescriptor]:
        return self._junction_descriptors(JunctionDirection.INBOUND, target.template_mapping())

    def outbound_junction_descriptors(self, target: EngineTarget) -> list[JunctionDescriptor]:
        return self._junction_descriptors(JunctionDirection.OUTBOUND, target.template_mapping())

    def _junction_descriptors(
        self, direction: JunctionDirection, mapping: TemplateMapping
    ) -> list[JunctionDescriptor]:
        return [
            junction.to_descriptor(junction_id, direction, mapping)
            for junction_id, junction in sorted(self._config.junctions(direction).items())
        ]

    def processor_instance(
        self,
        pipeline_id: PipelineId | None,
        processor_id: ProcessorId,
        target: EngineTarget,
    ) -> DshServiceInstance:
        logger.debug(
            "Creating instance {processor_id} of {realization} (pipeline {pipeline_id})",
            processor_id=processor_id,
            realization=self.identifier,
            pipeline_id=pipeline_id,
        )
        return DshServiceInstance(pipeline_id, processor_id, self, target)

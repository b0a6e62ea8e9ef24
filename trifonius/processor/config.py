"""Static processor configuration models.

Processor configurations are YAML documents with kebab-case keys. The
technology-independent sections (``processor``, junctions and deployment
parameters) are modelled here; technology sections live with their
technology (see :mod:`trifonius.processor.dshservice.config`).

Example::

    processor:
      id: greenbox-consent-filter
      label: Consent filter
      description: Filters messages on consent for ${TENANT}
    inbound-junctions:
      inbound-kafka-topic:
        label: Inbound topic
        description: Topic to read from
        allowed-resource-types: [dsh-topic]
    deploy:
      parameters:
        mitigation-strategy:
          type: selection
          label: Mitigation strategy
          description: What to do with non-consented messages
          options: [block, anonymize]
          default: block
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Self

from pydantic import Field, model_validator

from trifonius.kernel.identifiers import JunctionId, ParameterId, ProcessorRealizationId
from trifonius.kernel.placeholder import resolve_template
from trifonius.kernel.schema import KebabModel
from trifonius.processor.descriptor import DeploymentParameterDescriptor, JunctionDescriptor
from trifonius.processor.models import JunctionDirection, ProcessorTechnology
from trifonius.resource.models import ResourceType


class ProcessorSection(KebabModel):
    """The ``processor`` section common to all technologies."""

    technology: ProcessorTechnology | None = None
    id: ProcessorRealizationId
    label: str
    description: str
    version: str | None = None
    metadata: list[tuple[str, str]] = Field(default_factory=list)
    more_info_url: str | None = None
    metrics_url: str | None = None
    viewer_url: str | None = None


class JunctionConfig(KebabModel):
    """One inbound or outbound junction declaration."""

    label: str
    description: str
    allowed_resource_types: list[ResourceType] = Field(min_length=1)
    required: bool = True

    def to_descriptor(
        self, junction_id: JunctionId, direction: JunctionDirection, mapping: dict
    ) -> JunctionDescriptor:
        return JunctionDescriptor(
            id=junction_id,
            direction=direction,
            label=resolve_template(self.label, mapping),
            description=resolve_template(self.description, mapping),
            allowed_resource_types=tuple(self.allowed_resource_types),
            required=self.required,
        )


class ParameterType(StrEnum):
    BOOLEAN = "boolean"
    FREE_TEXT = "free-text"
    SELECTION = "selection"


class DeploymentParameterConfig(KebabModel):
    """One deployment parameter declaration."""

    type: ParameterType
    label: str
    description: str
    optional: bool = False
    default: str | None = None
    options: list[str] | None = None

    @model_validator(mode="before")
    @classmethod
    def _stringify_default(cls, data: Any) -> Any:
        # YAML turns `default: true` into a bool
        if isinstance(data, dict) and isinstance(data.get("default"), bool):
            data = {**data, "default": "true" if data["default"] else "false"}
        return data

    @model_validator(mode="after")
    def _check_options(self) -> Self:
        if self.type is ParameterType.SELECTION:
            if not self.options:
                raise ValueError("selection parameter requires 'options'")
            if self.default is not None and self.default not in self.options:
                raise ValueError(f"default '{self.default}' is not one of the options")
        elif self.options is not None:
            raise ValueError(f"'options' is only allowed for selection parameters, not {self.type}")
        if self.type is ParameterType.BOOLEAN and self.default not in (None, "true", "false"):
            raise ValueError(f"boolean default must be 'true' or 'false', not '{self.default}'")
        return self

    def to_descriptor(
        self, parameter_id: ParameterId, mapping: dict
    ) -> DeploymentParameterDescriptor:
        return DeploymentParameterDescriptor(
            id=parameter_id,
            type=self.type,
            label=resolve_template(self.label, mapping),
            description=resolve_template(self.description, mapping),
            optional=self.optional,
            default=resolve_template(self.default, mapping) if self.default is not None else None,
            options=tuple(self.options) if self.options else None,
        )


class DeploySection(KebabModel):
    parameters: dict[ParameterId, DeploymentParameterConfig] = Field(default_factory=dict)


class ProcessorConfig(KebabModel):
    """Technology-independent part of a processor configuration.

    Technology configs extend this model with their own section.
    """

    processor: ProcessorSection
    inbound_junctions: dict[JunctionId, JunctionConfig] = Field(default_factory=dict)
    outbound_junctions: dict[JunctionId, JunctionConfig] = Field(default_factory=dict)
    deploy: DeploySection = Field(default_factory=DeploySection)

    @model_validator(mode="after")
    def _check_junction_ids(self) -> Self:
        shared = set(self.inbound_junctions) & set(self.outbound_junctions)
        if shared:
            raise ValueError(f"junction ids used in both directions: {', '.join(sorted(shared))}")
        return self

    def junctions(self, direction: JunctionDirection) -> dict[JunctionId, JunctionConfig]:
        match direction:
            case JunctionDirection.INBOUND:
                return self.inbound_junctions
            case JunctionDirection.OUTBOUND:
                return self.outbound_junctions

"""Processor technologies, identifiers, deployment requests and status."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from trifonius.kernel.exceptions import ValidationError
from trifonius.kernel.identifiers import (
    JunctionId,
    ParameterId,
    PipelineId,
    ProcessorId,
    ProcessorRealizationId,
    ProfileId,
    ServiceName,
)
from trifonius.resource.models import ResourceIdentifier


class ProcessorTechnology(StrEnum):
    """Closed set of processor technologies."""

    DSH_SERVICE = "dsh-service"

    @property
    def label(self) -> str:
        match self:
            case ProcessorTechnology.DSH_SERVICE:
                return "DSH Service"

    @property
    def description(self) -> str:
        match self:
            case ProcessorTechnology.DSH_SERVICE:
                return "DSH service managed by the DSH platform"


class JunctionDirection(StrEnum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


@dataclass(frozen=True, slots=True, order=True)
class ProcessorIdentifier:
    """Global key of a processor realization, rendered ``<id>:<technology>``."""

    technology: ProcessorTechnology
    id: ProcessorRealizationId

    def __post_init__(self) -> None:
        object.__setattr__(self, "technology", ProcessorTechnology(self.technology))
        object.__setattr__(self, "id", ProcessorRealizationId(self.id))

    @classmethod
    def parse(cls, text: str) -> ProcessorIdentifier:
        """Parse ``<id>:<technology>``.

        Raises
        ------
        ValidationError
            If the text is malformed or names an unknown technology
        """
        realization_id, sep, technology = text.rpartition(":")
        if not sep:
            raise ValidationError("processor identifier", "expected '<id>:<technology>'", text)
        try:
            return cls(ProcessorTechnology(technology), ProcessorRealizationId(realization_id))
        except ValueError:
            raise ValidationError(
                "processor technology", "is not a known processor technology", technology
            ) from None

    def __str__(self) -> str:
        return f"{self.id}:{self.technology}"


@dataclass(frozen=True, slots=True)
class ProcessorStatus:
    """Up/down flag of a deployed processor, as reported by the platform."""

    up: bool

    def __str__(self) -> str:
        return "up" if self.up else "down"


JunctionBindings = dict[JunctionId, list[ResourceIdentifier]]


@dataclass(frozen=True, slots=True)
class DeploymentRequest:
    """Everything the caller supplies for one deployment."""

    service_name: ServiceName
    inbound_junctions: JunctionBindings = field(default_factory=dict)
    outbound_junctions: JunctionBindings = field(default_factory=dict)
    parameters: dict[ParameterId, str] = field(default_factory=dict)
    profile_id: ProfileId | None = None


def service_name(pipeline_id: PipelineId | None, processor_id: ProcessorId) -> ServiceName:
    """Compose the platform service name of a processor instance.

    ``<pipeline>-<processor>`` inside a pipeline, ``<processor>`` otherwise.
    """
    if pipeline_id is None:
        return ServiceName(str(processor_id))
    return ServiceName(f"{pipeline_id}-{processor_id}")

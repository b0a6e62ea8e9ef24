"""Behaviour every processor realization provides."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trifonius.kernel.identifiers import PipelineId, ProcessorId, ProcessorRealizationId
    from trifonius.kernel.target import EngineTarget
    from trifonius.processor.descriptor import JunctionDescriptor, ProcessorDescriptor
    from trifonius.processor.instance import ProcessorInstance
    from trifonius.processor.models import ProcessorIdentifier, ProcessorTechnology


class ProcessorRealization(ABC):
    """Immutable description of one processor kind, and factory for its instances."""

    @property
    @abstractmethod
    def identifier(self) -> ProcessorIdentifier:
        """Registry key of this realization."""

    @property
    def id(self) -> ProcessorRealizationId:
        return self.identifier.id

    @property
    def technology(self) -> ProcessorTechnology:
        return self.identifier.technology

    @property
    @abstractmethod
    def label(self) -> str:
        """Human label used to present this realization."""

    @abstractmethod
    def descriptor(self, target: EngineTarget) -> ProcessorDescriptor:
        """Describe this realization with all templates resolved for the target's tenant.

        Raises
        ------
        PlaceholderError
            If any template cannot be resolved. No partial descriptor is returned.
        """

    @abstractmethod
    def inbound_junction_descriptors(self, target: EngineTarget) -> list[JunctionDescriptor]:
        """Inbound junctions, sorted by id."""

    @abstractmethod
    def outbound_junction_descriptors(self, target: EngineTarget) -> list[JunctionDescriptor]:
        """Outbound junctions, sorted by id."""

    @abstractmethod
    def processor_instance(
        self,
        pipeline_id: PipelineId | None,
        processor_id: ProcessorId,
        target: EngineTarget,
    ) -> ProcessorInstance:
        """Create an instance bound to one deployment identity.

        Parameters
        ----------
        pipeline_id : PipelineId | None
            Pipeline the instance is part of, or None for a standalone processor
        processor_id : ProcessorId
            Name of the instance inside its pipeline
        target : EngineTarget
            Platform and tenant to deploy to

        Raises
        ------
        IdentifierError
            If pipeline and processor id do not form a valid service name
        """

    def __str__(self) -> str:
        return f"{self.identifier} ({self.label})"

"""Behaviour every processor instance provides.

A :class:`ProcessorInstance` is a handle on one deployment identity
(``pipeline id`` + ``processor id``). It keeps no deployment state: the
platform is the only source of truth, and every operation asks it again.

Lifecycle, as observed through these operations::

    Undeployed --deploy--> Deployed --start--> Running
    Running --stop--> Deployed --undeploy--> Undeployed

All transitions are idempotent at this layer and are never retried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from trifonius.kernel.identifiers import (
        JunctionId,
        ParameterId,
        PipelineId,
        ProcessorId,
        ProfileId,
        ServiceName,
    )
    from trifonius.kernel.target import EngineTarget
    from trifonius.processor.models import ProcessorStatus
    from trifonius.processor.realization import ProcessorRealization
    from trifonius.resource.models import ResourceIdentifier

    Bindings = Mapping[JunctionId, list[ResourceIdentifier]]


class ProcessorInstance(ABC):
    """Runtime handle that executes the deployment protocol for one processor."""

    @property
    @abstractmethod
    def pipeline_id(self) -> PipelineId | None: ...

    @property
    @abstractmethod
    def processor_id(self) -> ProcessorId: ...

    @property
    @abstractmethod
    def service_name(self) -> ServiceName:
        """Platform service name of this instance."""

    @property
    @abstractmethod
    def processor_realization(self) -> ProcessorRealization: ...

    @property
    @abstractmethod
    def target(self) -> EngineTarget: ...

    @abstractmethod
    async def compatible_resources(self, junction_id: JunctionId) -> list[ResourceIdentifier]:
        """Resources that can be bound to a junction.

        Returns every known resource whose type the junction allows, sorted.
        An unknown junction yields an empty list.
        """

    @abstractmethod
    async def deploy(
        self,
        inbound_junctions: Bindings,
        outbound_junctions: Bindings,
        parameters: Mapping[ParameterId, str],
        profile_id: ProfileId | None = None,
    ) -> None:
        """Validate, resolve and submit a deployment.

        Returns once the platform has accepted the request; it does not
        wait for the service to become healthy.

        Raises
        ------
        ValidationError
            On undeclared junctions, incompatible or unknown resources,
            bad parameters or an undeclared profile. Raised before any
            call to the platform.
        ResourceNotFoundError
            If a bound resource is unknown
        RemoteError
            If the platform rejects the request or cannot be reached
        """

    @abstractmethod
    async def deploy_dry_run(
        self,
        inbound_junctions: Bindings,
        outbound_junctions: Bindings,
        parameters: Mapping[ParameterId, str],
        profile_id: ProfileId | None = None,
    ) -> dict[str, Any]:
        """Do everything :meth:`deploy` does except submitting.

        Returns
        -------
        dict[str, Any]
            The configuration :meth:`deploy` would send
        """

    @abstractmethod
    async def start(self, service_name: ServiceName | None = None) -> bool:
        """Start the deployed service.

        Returns False when there is no such deployed service.
        """

    @abstractmethod
    async def stop(self, service_name: ServiceName | None = None) -> bool:
        """Stop the deployed service.

        Returns False when there is no such deployed service.
        """

    @abstractmethod
    async def undeploy(self, service_name: ServiceName | None = None) -> bool:
        """Remove the deployed service.

        Returns False when there is no such deployed service.
        """

    @abstractmethod
    async def status(self, service_name: ServiceName | None = None) -> ProcessorStatus:
        """Report whether the deployed service is up.

        Raises
        ------
        ServiceNotFoundError
            If there is no such deployed service
        """

    def __str__(self) -> str:
        return f"{self.service_name} ({self.processor_realization.identifier})"

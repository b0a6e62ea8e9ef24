"""Behaviour every resource instance provides."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trifonius.kernel.identifiers import PipelineId
    from trifonius.kernel.target import EngineTarget
    from trifonius.resource.models import ResourceStatus
    from trifonius.resource.realization import ResourceRealization


class ResourceInstance(ABC):
    """Runtime handle on one resource, used by one pipeline (or none)."""

    @property
    @abstractmethod
    def pipeline_id(self) -> PipelineId | None: ...

    @property
    @abstractmethod
    def resource_realization(self) -> ResourceRealization: ...

    @property
    @abstractmethod
    def target(self) -> EngineTarget: ...

    @abstractmethod
    async def status(self) -> ResourceStatus:
        """Ask the platform for the allocation status of this resource.

        Raises
        ------
        ResourceNotFoundError
            If the platform does not know the resource
        RemoteError
            If the platform cannot be queried
        """

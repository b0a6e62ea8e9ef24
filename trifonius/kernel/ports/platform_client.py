"""Port interface for the platform control-plane API.

The engine never talks HTTP itself. Every call that reaches the platform goes
through a :class:`PlatformClient` obtained from a
:class:`PlatformClientFactory`. Implementations report a missing service or
topic by raising :class:`~trifonius.kernel.exceptions.PlatformNotFoundError`
and any other failure by raising
:class:`~trifonius.kernel.exceptions.RemoteError`.
"""

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from trifonius.kernel.platform import Tenant


@runtime_checkable
class PlatformClient(Protocol):
    """Authenticated client for one tenant on one platform."""

    @abstractmethod
    async def deploy_service(self, service_name: str, configuration: dict[str, Any]) -> None:
        """Create or replace a service with the given configuration.

        Returns once the platform has accepted the request. Deploying the
        same configuration twice is not an error.
        """
        ...

    @abstractmethod
    async def start_service(self, service_name: str) -> None:
        """Start a deployed service.

        Raises
        ------
        PlatformNotFoundError
            If the service is not deployed
        """
        ...

    @abstractmethod
    async def stop_service(self, service_name: str) -> None:
        """Stop a deployed service without removing it.

        Raises
        ------
        PlatformNotFoundError
            If the service is not deployed
        """
        ...

    @abstractmethod
    async def undeploy_service(self, service_name: str) -> None:
        """Remove a deployed service.

        Raises
        ------
        PlatformNotFoundError
            If the service is not deployed
        """
        ...

    @abstractmethod
    async def service_status(self, service_name: str) -> dict[str, Any]:
        """Return the allocation status of a service (``{"provisioned": bool, ...}``).

        Raises
        ------
        PlatformNotFoundError
            If the service is not deployed
        """
        ...

    @abstractmethod
    async def topic_status(self, topic_id: str) -> dict[str, Any]:
        """Return the allocation status of a topic (``{"provisioned": bool, ...}``).

        Raises
        ------
        PlatformNotFoundError
            If the topic does not exist
        """
        ...


@runtime_checkable
class PlatformClientFactory(Protocol):
    """Creates authenticated :class:`PlatformClient` instances for a tenant."""

    tenant: "Tenant"

    @abstractmethod
    async def client(self) -> PlatformClient:
        """Return an authenticated client.

        Raises
        ------
        RemoteError
            If authentication or token acquisition fails
        """
        ...

    @abstractmethod
    async def aclose(self) -> None:
        """Release connections held by the factory.

        The factory stays usable; connections are opened again on next use.
        """
        ...

"""In-memory platform client for tests and offline runs."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from trifonius.kernel.exceptions import PlatformNotFoundError, RemoteError
from trifonius.kernel.ports.platform_client import PlatformClient

if TYPE_CHECKING:
    from trifonius.kernel.platform import Tenant


@dataclass
class RecordedCall:
    """A recorded platform call for test assertions."""

    operation: str
    name: str
    configuration: dict[str, Any] | None = None


@dataclass
class MockService:
    configuration: dict[str, Any]
    running: bool = False


@dataclass
class MockPlatformState:
    """Shared state of a mock platform: deployed services and existing topics."""

    services: dict[str, MockService] = field(default_factory=dict)
    topics: dict[str, bool] = field(default_factory=dict)


class MockPlatformClient(PlatformClient):
    """Mock :class:`PlatformClient` that keeps services and topics in memory.

    Deployed services start stopped when their configuration has zero
    instances and running otherwise. Calls on unknown services or topics
    raise :class:`PlatformNotFoundError`, like the real client.

    Parameters
    ----------
    state : MockPlatformState | None
        Platform state, shared between clients of one factory
    fail_with : RemoteError | None
        When set, every call raises this error instead

    Examples
    --------
    Basic usage::

        client = MockPlatformClient()
        client.add_topic("stream.consent.greenbox-dev")
        await client.deploy_service("pipeline-filter", {"instances": 1})
        assert (await client.service_status("pipeline-filter"))["provisioned"]
        assert client.calls[0].operation == "deploy"
    """

    def __init__(
        self, state: MockPlatformState | None = None, fail_with: RemoteError | None = None
    ) -> None:
        self.state = state if state is not None else MockPlatformState()
        self.fail_with = fail_with
        self.calls: list[RecordedCall] = []

    def add_topic(self, topic: str, provisioned: bool = True) -> None:
        self.state.topics[topic] = provisioned

    def _record(
        self, operation: str, name: str, configuration: dict[str, Any] | None = None
    ) -> None:
        self.calls.append(RecordedCall(operation, name, copy.deepcopy(configuration)))
        if self.fail_with is not None:
            raise self.fail_with

    def _service(self, operation: str, name: str) -> MockService:
        try:
            return self.state.services[name]
        except KeyError:
            raise PlatformNotFoundError(f"{operation} service", name) from None

    async def deploy_service(self, service_name: str, configuration: dict[str, Any]) -> None:
        self._record("deploy", service_name, configuration)
        self.state.services[service_name] = MockService(
            configuration=copy.deepcopy(configuration),
            running=configuration.get("instances", 1) > 0,
        )

    async def start_service(self, service_name: str) -> None:
        self._record("start", service_name)
        self._service("start", service_name).running = True

    async def stop_service(self, service_name: str) -> None:
        self._record("stop", service_name)
        self._service("stop", service_name).running = False

    async def undeploy_service(self, service_name: str) -> None:
        self._record("undeploy", service_name)
        self._service("undeploy", service_name)
        del self.state.services[service_name]

    async def service_status(self, service_name: str) -> dict[str, Any]:
        self._record("service_status", service_name)
        service = self._service("status", service_name)
        return {"provisioned": service.running}

    async def topic_status(self, topic_id: str) -> dict[str, Any]:
        self._record("topic_status", topic_id)
        if topic_id not in self.state.topics:
            raise PlatformNotFoundError("topic status", topic_id)
        return {"provisioned": self.state.topics[topic_id]}

    def reset(self) -> None:
        """Reset recorded calls and platform state for reuse across tests."""
        self.calls.clear()
        self.state.services.clear()
        self.state.topics.clear()


class MockPlatformClientFactory:
    """Factory that hands out :class:`MockPlatformClient` instances sharing one state.

    Parameters
    ----------
    tenant : Tenant
        Tenant the clients act for
    client : MockPlatformClient | None
        Client to hand out; a new one is created when omitted
    auth_error : RemoteError | None
        When set, :meth:`client` raises this error, as a failed token fetch would
    """

    def __init__(
        self,
        tenant: Tenant,
        client: MockPlatformClient | None = None,
        auth_error: RemoteError | None = None,
    ) -> None:
        self.tenant = tenant
        self.mock_client = client if client is not None else MockPlatformClient()
        self.auth_error = auth_error
        self.client_count = 0
        self.close_count = 0

    async def client(self) -> MockPlatformClient:
        self.client_count += 1
        if self.auth_error is not None:
            raise self.auth_error
        return self.mock_client

    async def aclose(self) -> None:
        self.close_count += 1

"""Tests for the in-memory platform client."""

import pytest

from trifonius.kernel.exceptions import PlatformNotFoundError, RemoteError
from trifonius.kernel.platform import Tenant
from trifonius.kernel.ports import PlatformClient
from trifonius.stdlib.adapters.mock import (
    MockPlatformClient,
    MockPlatformClientFactory,
    RecordedCall,
)


@pytest.fixture
def client() -> MockPlatformClient:
    return MockPlatformClient()


def test_is_a_platform_client(client: MockPlatformClient) -> None:
    assert isinstance(client, PlatformClient)


@pytest.mark.asyncio
async def test_service_lifecycle(client: MockPlatformClient) -> None:
    await client.deploy_service("pipeline-filter", {"image": "x", "instances": 2})
    assert await client.service_status("pipeline-filter") == {"provisioned": True}

    await client.stop_service("pipeline-filter")
    assert await client.service_status("pipeline-filter") == {"provisioned": False}

    await client.start_service("pipeline-filter")
    await client.undeploy_service("pipeline-filter")

    assert "pipeline-filter" not in client.state.services
    assert [call.operation for call in client.calls] == [
        "deploy",
        "service_status",
        "stop",
        "service_status",
        "start",
        "undeploy",
    ]


@pytest.mark.asyncio
async def test_zero_instances_deploys_stopped(client: MockPlatformClient) -> None:
    await client.deploy_service("pipeline-filter", {"instances": 0})

    assert await client.service_status("pipeline-filter") == {"provisioned": False}


@pytest.mark.asyncio
async def test_configuration_is_copied(client: MockPlatformClient) -> None:
    configuration = {"env": {"A": "1"}}

    await client.deploy_service("pipeline-filter", configuration)
    configuration["env"]["A"] = "2"

    assert client.calls == [RecordedCall("deploy", "pipeline-filter", {"env": {"A": "1"}})]
    assert client.state.services["pipeline-filter"].configuration == {"env": {"A": "1"}}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "operation", ["start_service", "stop_service", "undeploy_service", "service_status"]
)
async def test_unknown_service(client: MockPlatformClient, operation: str) -> None:
    with pytest.raises(PlatformNotFoundError) as exc_info:
        await getattr(client, operation)("pipeline-filter")
    assert exc_info.value.target == "pipeline-filter"


@pytest.mark.asyncio
async def test_topic_status(client: MockPlatformClient) -> None:
    client.add_topic("stream.consent.greenbox-dev")
    client.add_topic("scratch.audit.greenbox-dev", provisioned=False)

    assert await client.topic_status("stream.consent.greenbox-dev") == {"provisioned": True}
    assert await client.topic_status("scratch.audit.greenbox-dev") == {"provisioned": False}
    with pytest.raises(PlatformNotFoundError):
        await client.topic_status("scratch.missing.greenbox-dev")


@pytest.mark.asyncio
async def test_fail_with_records_then_raises() -> None:
    error = RemoteError("deploy service", "HTTP 503", 503)
    client = MockPlatformClient(fail_with=error)

    with pytest.raises(RemoteError) as exc_info:
        await client.deploy_service("pipeline-filter", {})

    assert exc_info.value is error
    assert [call.operation for call in client.calls] == ["deploy"]
    assert client.state.services == {}


@pytest.mark.asyncio
async def test_reset(client: MockPlatformClient) -> None:
    client.add_topic("stream.consent.greenbox-dev")
    await client.deploy_service("pipeline-filter", {})

    client.reset()

    assert client.calls == []
    assert client.state.services == {}
    assert client.state.topics == {}


class TestFactory:
    @pytest.mark.asyncio
    async def test_hands_out_shared_client(self, tenant: Tenant) -> None:
        factory = MockPlatformClientFactory(tenant)

        first = await factory.client()
        second = await factory.client()

        assert first is second is factory.mock_client
        assert factory.client_count == 2
        assert factory.tenant is tenant

    @pytest.mark.asyncio
    async def test_auth_error(self, tenant: Tenant) -> None:
        factory = MockPlatformClientFactory(
            tenant, auth_error=RemoteError("fetch access token", "HTTP 401", 401)
        )

        with pytest.raises(RemoteError, match="HTTP 401"):
            await factory.client()
        assert factory.client_count == 1

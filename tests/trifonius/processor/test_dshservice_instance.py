"""Tests for DshServiceInstance: the deployment protocol against a mock platform."""

from typing import Any

import pytest

from trifonius.engine import Engine
from trifonius.kernel.exceptions import (
    IdentifierError,
    JunctionBindingError,
    ParameterError,
    ProfileError,
    RemoteError,
    ResourceNotFoundError,
    ServiceNotFoundError,
    ValidationError,
)
from trifonius.processor.dshservice import DshServiceInstance
from trifonius.processor.models import DeploymentRequest, ProcessorStatus
from trifonius.resource.models import ResourceIdentifier, ResourceType
from trifonius.stdlib.adapters.mock import MockPlatformClient, MockPlatformClientFactory

REALIZATION = "greenbox-consent-filter:dsh-service"


def topic(resource_id: str) -> ResourceIdentifier:
    return ResourceIdentifier(ResourceType.DSH_TOPIC, resource_id)


INBOUND = {"inbound-topic": [topic("consent-events")]}
OUTBOUND = {"outbound-topic": [topic("filtered-events")]}
PARAMETERS = {"identifier-field": "customer-id"}


@pytest.fixture
def instance(engine: Engine) -> DshServiceInstance:
    instance = engine.processor_instance(REALIZATION, "pipeline", "filter")
    assert isinstance(instance, DshServiceInstance)
    return instance


class TestIdentity:
    def test_service_name(self, instance: DshServiceInstance) -> None:
        assert instance.pipeline_id == "pipeline"
        assert instance.processor_id == "filter"
        assert instance.service_name == "pipeline-filter"
        assert str(instance) == "pipeline-filter (greenbox-consent-filter:dsh-service)"

    def test_standalone(self, engine: Engine) -> None:
        assert engine.processor_instance(REALIZATION, None, "filter").service_name == "filter"

    def test_invalid_processor_id(self, engine: Engine) -> None:
        with pytest.raises(IdentifierError):
            engine.processor_instance(REALIZATION, "pipeline", "consent-filter")

    @pytest.mark.asyncio
    async def test_compatible_resources(self, instance: DshServiceInstance) -> None:
        compatible = await instance.compatible_resources("outbound-topic")

        assert [str(r) for r in compatible] == [
            "audit-events:dsh-topic",
            "consent-events:dsh-topic",
            "filtered-events:dsh-topic",
        ]
        assert await instance.compatible_resources("nope") == []


class TestDryRun:
    @pytest.mark.asyncio
    async def test_default_profile(
        self, instance: DshServiceInstance, mock_client: MockPlatformClient
    ) -> None:
        configuration = await instance.deploy_dry_run(INBOUND, OUTBOUND, PARAMETERS)

        env = configuration.pop("env")
        assert configuration == {
            "image": "registry.cp.kpn-dsh.com/greenbox-dev/consentfilter:0.0.2",
            "cpus": 0.1,
            "mem": 256,
            "instances": 1,
            "user": "1903:1903",
            "needsToken": True,
            "singleInstance": False,
            "exposedPorts": {},
            "readableStreams": ["stream.consent.greenbox-dev"],
            "writableStreams": ["scratch.filtered.greenbox-dev"],
            "topics": ["scratch.filtered.greenbox-dev", "stream.consent.greenbox-dev"],
            "secrets": [],
            "volumes": {},
            "metrics": {"port": 9095, "path": "/metrics"},
        }
        assert list(env) == sorted(env)
        assert {k: v for k, v in env.items() if not k.startswith("INSTANCE_")} == {
            "ENRICH": "false",
            "INBOUND_TOPICS": "stream.consent.greenbox-dev",
            "LOG_LEVEL": "warn",
            "MITIGATION": "block",
            "OUTBOUND_TOPIC": "scratch.filtered.greenbox-dev",
        }
        assert mock_client.calls == []

    @pytest.mark.asyncio
    async def test_random_is_consistent_within_one_deployment(
        self, instance: DshServiceInstance
    ) -> None:
        first = (await instance.deploy_dry_run(INBOUND, OUTBOUND, PARAMETERS))["env"]
        second = (await instance.deploy_dry_run(INBOUND, OUTBOUND, PARAMETERS))["env"]

        assert first["INSTANCE_ID"] == first["INSTANCE_TAG"]
        assert second["INSTANCE_ID"] == second["INSTANCE_TAG"]
        assert len(first["INSTANCE_ID"]) == 8

    @pytest.mark.asyncio
    async def test_explicit_profile(self, instance: DshServiceInstance) -> None:
        configuration = await instance.deploy_dry_run(INBOUND, OUTBOUND, PARAMETERS, "large")

        assert (configuration["cpus"], configuration["mem"], configuration["instances"]) == (
            1.0,
            2048,
            3,
        )
        assert configuration["env"]["LOG_LEVEL"] == "info"

    @pytest.mark.asyncio
    async def test_parameters_and_multiple_topics(self, instance: DshServiceInstance) -> None:
        inbound = {"inbound-topic": [topic("filtered-events"), topic("consent-events")]}
        outbound = {**OUTBOUND, "audit-topic": [topic("audit-events")]}
        parameters = {
            **PARAMETERS,
            "mitigation-strategy": "anonymize",
            "enrich": "true",
            "comment": "hello",
        }

        configuration = await instance.deploy_dry_run(inbound, outbound, parameters)

        env = configuration["env"]
        assert env["INBOUND_TOPICS"] == "scratch.filtered.greenbox-dev,stream.consent.greenbox-dev"
        assert env["MITIGATION"] == "anonymize"
        assert env["ENRICH"] == "true"
        assert env["COMMENT"] == "hello"
        assert configuration["writableStreams"] == [
            "scratch.audit.greenbox-dev",
            "scratch.filtered.greenbox-dev",
        ]
        assert configuration["topics"] == [
            "scratch.audit.greenbox-dev",
            "scratch.filtered.greenbox-dev",
            "stream.consent.greenbox-dev",
        ]

    def test_service_configuration_from_request(self, instance: DshServiceInstance) -> None:
        request = DeploymentRequest(
            service_name=instance.service_name,
            inbound_junctions=INBOUND,
            outbound_junctions=OUTBOUND,
            parameters=PARAMETERS,
        )

        assert instance.service_configuration(request)["instances"] == 1


class TestValidationBeforeRemoteCalls:
    @pytest.mark.parametrize(
        ("inbound", "outbound", "parameters", "profile", "error"),
        [
            ({}, OUTBOUND, PARAMETERS, None, JunctionBindingError),
            (INBOUND, {}, PARAMETERS, None, JunctionBindingError),
            ({**INBOUND, "other": [topic("audit-events")]}, OUTBOUND, PARAMETERS, None,
             JunctionBindingError),
            ({"inbound-topic": [topic("missing")]}, OUTBOUND, PARAMETERS, None,
             ResourceNotFoundError),
            (INBOUND, OUTBOUND, {}, None, ParameterError),
            (INBOUND, OUTBOUND, {**PARAMETERS, "mitigation-strategy": "drop"}, None,
             ParameterError),
            (INBOUND, OUTBOUND, {**PARAMETERS, "unknown": "x"}, None, ParameterError),
            (INBOUND, OUTBOUND, PARAMETERS, "huge", ProfileError),
        ],
        ids=[
            "missing-inbound",
            "missing-outbound",
            "undeclared-junction",
            "unknown-resource",
            "missing-parameter",
            "bad-selection",
            "unknown-parameter",
            "unknown-profile",
        ],
    )
    @pytest.mark.asyncio
    async def test_deploy_rejected(
        self,
        instance: DshServiceInstance,
        mock_client: MockPlatformClient,
        client_factory: MockPlatformClientFactory,
        inbound: dict[str, Any],
        outbound: dict[str, Any],
        parameters: dict[str, str],
        profile: str | None,
        error: type[Exception],
    ) -> None:
        with pytest.raises(error):
            await instance.deploy(inbound, outbound, parameters, profile)

        assert mock_client.calls == []
        assert client_factory.client_count == 0

    @pytest.mark.asyncio
    async def test_validation_errors_share_a_family(self, instance: DshServiceInstance) -> None:
        with pytest.raises(ValidationError):
            await instance.deploy(INBOUND, OUTBOUND, PARAMETERS, "huge")


class TestDeploy:
    @pytest.mark.asyncio
    async def test_deploy_submits_configuration(
        self, instance: DshServiceInstance, mock_client: MockPlatformClient
    ) -> None:
        await instance.deploy(INBOUND, OUTBOUND, PARAMETERS)

        [call] = mock_client.calls
        assert call.operation == "deploy"
        assert call.name == "pipeline-filter"
        assert call.configuration is not None
        assert call.configuration["image"].endswith("/greenbox-dev/consentfilter:0.0.2")
        assert await instance.status() == ProcessorStatus(up=True)

    @pytest.mark.asyncio
    async def test_deploy_twice_is_not_an_error(
        self, instance: DshServiceInstance, mock_client: MockPlatformClient
    ) -> None:
        await instance.deploy(INBOUND, OUTBOUND, PARAMETERS)
        await instance.deploy(INBOUND, OUTBOUND, PARAMETERS, "large")

        assert [c.operation for c in mock_client.calls] == ["deploy", "deploy"]
        assert mock_client.state.services["pipeline-filter"].configuration["instances"] == 3

    @pytest.mark.asyncio
    async def test_remote_failure(
        self, instance: DshServiceInstance, mock_client: MockPlatformClient
    ) -> None:
        mock_client.fail_with = RemoteError("deploy service", "HTTP 500: boom", 500)

        with pytest.raises(RemoteError) as exc_info:
            await instance.deploy(INBOUND, OUTBOUND, PARAMETERS)
        assert exc_info.value.operation == "deploy service 'pipeline-filter'"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_authentication_failure(
        self, instance: DshServiceInstance, client_factory: MockPlatformClientFactory
    ) -> None:
        client_factory.auth_error = RemoteError("fetch access token", "HTTP 401", 401)

        with pytest.raises(RemoteError, match="fetch access token"):
            await instance.deploy(INBOUND, OUTBOUND, PARAMETERS)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_full_lifecycle(
        self, instance: DshServiceInstance, mock_client: MockPlatformClient
    ) -> None:
        await instance.deploy(INBOUND, OUTBOUND, PARAMETERS)

        assert await instance.stop()
        assert await instance.status() == ProcessorStatus(up=False)
        assert await instance.start()
        assert await instance.status() == ProcessorStatus(up=True)
        assert await instance.undeploy()
        with pytest.raises(ServiceNotFoundError):
            await instance.status()

        assert [c.operation for c in mock_client.calls] == [
            "deploy",
            "stop",
            "service_status",
            "start",
            "service_status",
            "undeploy",
            "service_status",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["start", "stop", "undeploy"])
    async def test_not_deployed_returns_false(
        self, instance: DshServiceInstance, operation: str
    ) -> None:
        assert await getattr(instance, operation)() is False

    @pytest.mark.asyncio
    async def test_explicit_service_name(
        self, instance: DshServiceInstance, mock_client: MockPlatformClient
    ) -> None:
        await mock_client.deploy_service("other", {"instances": 0})

        assert await instance.start("other")
        assert mock_client.calls[-1].name == "other"
        assert await instance.status("other") == ProcessorStatus(up=True)

    @pytest.mark.asyncio
    async def test_invalid_explicit_service_name(self, instance: DshServiceInstance) -> None:
        with pytest.raises(IdentifierError):
            await instance.stop("Not_A_Service")

    @pytest.mark.asyncio
    async def test_lifecycle_remote_failure(
        self, instance: DshServiceInstance, mock_client: MockPlatformClient
    ) -> None:
        mock_client.fail_with = RemoteError("stop service", "HTTP 503", 503)

        with pytest.raises(RemoteError) as exc_info:
            await instance.stop()
        assert exc_info.value.operation == "stop service 'pipeline-filter'"

    @pytest.mark.asyncio
    async def test_status_without_provisioned_field(
        self, instance: DshServiceInstance, mock_client: MockPlatformClient, monkeypatch
    ) -> None:
        async def service_status(service_name: str) -> dict[str, Any]:
            return {"instances": 1}

        monkeypatch.setattr(mock_client, "service_status", service_status)

        with pytest.raises(RemoteError, match="provisioned"):
            await instance.status()

"""Tests for ResourceRegistry and the DSH topic resource technology."""

from pathlib import Path

import pytest

from trifonius.compiler.yaml_config_source import YamlConfigSource
from trifonius.kernel.exceptions import (
    ConfigurationError,
    RemoteError,
    ResourceNotFoundError,
    ValidationError,
)
from trifonius.kernel.platform import Tenant
from trifonius.kernel.target import EngineTarget
from trifonius.resource.dshtopic import DshTopicInstance
from trifonius.resource.models import (
    DshTopicDescriptor,
    ResourceIdentifier,
    ResourceStatus,
    ResourceType,
)
from trifonius.resource.registry import ResourceRegistry
from trifonius.stdlib.adapters.mock import MockPlatformClient, MockPlatformClientFactory

CONSENT_EVENTS = ResourceIdentifier(ResourceType.DSH_TOPIC, "consent-events")


class StatuslessClient(MockPlatformClient):
    """Answers topic status queries without a 'provisioned' field."""

    async def topic_status(self, topic_id: str) -> dict:
        return {"partitions": 3}


@pytest.fixture
def registry(config_source: YamlConfigSource, target: EngineTarget) -> ResourceRegistry:
    return ResourceRegistry(config_source, target)


class TestResourceIdentifier:
    def test_parse_and_str(self) -> None:
        identifier = ResourceIdentifier.parse("consent-events:dsh-topic")

        assert identifier == CONSENT_EVENTS
        assert str(identifier) == "consent-events:dsh-topic"

    def test_parse_rejects_unknown_type(self) -> None:
        with pytest.raises(ValidationError, match="resource type"):
            ResourceIdentifier.parse("consent-events:kafka")

    def test_parse_rejects_missing_separator(self) -> None:
        with pytest.raises(ValidationError):
            ResourceIdentifier.parse("consent-events")

    def test_ordering(self) -> None:
        other = ResourceIdentifier(ResourceType.DSH_TOPIC, "audit-events")
        assert sorted([CONSENT_EVENTS, other]) == [other, CONSENT_EVENTS]


class TestLookups:
    def test_len_and_identifiers(self, registry: ResourceRegistry) -> None:
        assert len(registry) == 3
        assert [str(i) for i in registry.resource_identifiers()] == [
            "audit-events:dsh-topic",
            "consent-events:dsh-topic",
            "filtered-events:dsh-topic",
        ]
        assert registry.resource_identifiers_by_type(ResourceType.DSH_TOPIC) == (
            registry.resource_identifiers()
        )

    def test_descriptor_templates_are_resolved(self, registry: ResourceRegistry) -> None:
        descriptor = registry.resource_descriptor(ResourceType.DSH_TOPIC, "consent-events")

        assert descriptor.identifier == CONSENT_EVENTS
        assert descriptor.label == "Consent events"
        assert descriptor.description == "Consent updates for greenbox-dev"
        assert descriptor.dsh_topic == DshTopicDescriptor(
            topic="stream.consent.greenbox-dev", partitions=3, replication_factor=3
        )

    def test_defaults(self, registry: ResourceRegistry) -> None:
        descriptor = registry.resource_descriptor_by_identifier(
            ResourceIdentifier(ResourceType.DSH_TOPIC, "filtered-events")
        )

        assert descriptor.version is None
        assert descriptor.dsh_topic is not None
        assert descriptor.dsh_topic.partitions == 1
        assert descriptor.dsh_topic.replication_factor == 1

    def test_realization_lookup(self, registry: ResourceRegistry) -> None:
        realization = registry.resource_realization_by_identifier(CONSENT_EVENTS)

        assert realization.identifier == CONSENT_EVENTS
        assert realization.id == "consent-events"
        assert realization.resource_type is ResourceType.DSH_TOPIC
        assert realization.label == "Consent events"

    def test_unknown_resource(self, registry: ResourceRegistry) -> None:
        with pytest.raises(ResourceNotFoundError) as exc_info:
            registry.resource_descriptor(ResourceType.DSH_TOPIC, "nope")
        assert exc_info.value.resource_id == "nope"
        assert exc_info.value.available == ["audit-events", "consent-events", "filtered-events"]

    def test_descriptors_sorted(self, registry: ResourceRegistry) -> None:
        ids = [d.id for d in registry.resource_descriptors()]
        assert ids == sorted(ids)
        assert registry.resource_descriptors_by_type(ResourceType.DSH_TOPIC) == (
            registry.resource_descriptors()
        )

    def test_resource_types(self, registry: ResourceRegistry) -> None:
        [topic_type] = registry.resource_types()

        assert topic_type.resource_type is ResourceType.DSH_TOPIC
        assert topic_type.label == "DSH Topic"

    def test_empty_config_dir(self, tmp_path: Path, target: EngineTarget) -> None:
        registry = ResourceRegistry(YamlConfigSource(tmp_path), target)

        assert len(registry) == 0
        assert registry.resource_descriptors() == []


class TestInvalidConfigurations:
    def test_duplicate_resource_id(
        self, config_dir: Path, target: EngineTarget, yaml_writer, topic_configs
    ) -> None:
        yaml_writer(
            config_dir / "resources" / "dsh-topic" / "copy.yaml", topic_configs["consent-events"]
        )

        with pytest.raises(ConfigurationError, match="duplicate resource id 'consent-events'"):
            ResourceRegistry(YamlConfigSource(config_dir), target)

    def test_unknown_placeholder(
        self, config_dir: Path, target: EngineTarget, yaml_writer, topic_configs
    ) -> None:
        broken = dict(topic_configs["audit-events"], topic="scratch.audit.${NOPE}")
        yaml_writer(config_dir / "resources" / "dsh-topic" / "audit-events.yaml", broken)

        with pytest.raises(ConfigurationError, match="NOPE"):
            ResourceRegistry(YamlConfigSource(config_dir), target)

    def test_missing_field(
        self, config_dir: Path, target: EngineTarget, yaml_writer, topic_configs
    ) -> None:
        broken = dict(topic_configs["audit-events"])
        del broken["topic"]
        yaml_writer(config_dir / "resources" / "dsh-topic" / "audit-events.yaml", broken)

        with pytest.raises(ConfigurationError, match="dsh-topic/audit-events"):
            ResourceRegistry(YamlConfigSource(config_dir), target)

    def test_invalid_resource_id(
        self, config_dir: Path, target: EngineTarget, yaml_writer, topic_configs
    ) -> None:
        broken = dict(topic_configs["audit-events"], id="Audit_Events")
        yaml_writer(config_dir / "resources" / "dsh-topic" / "audit-events.yaml", broken)

        with pytest.raises(ConfigurationError, match="not a valid resource identifier"):
            ResourceRegistry(YamlConfigSource(config_dir), target)

    def test_unknown_key(
        self, config_dir: Path, target: EngineTarget, yaml_writer, topic_configs
    ) -> None:
        broken = dict(topic_configs["audit-events"], retention="7d")
        yaml_writer(config_dir / "resources" / "dsh-topic" / "audit-events.yaml", broken)

        with pytest.raises(ConfigurationError):
            ResourceRegistry(YamlConfigSource(config_dir), target)


class TestStatus:
    @pytest.mark.asyncio
    async def test_descriptors_with_status(
        self, registry: ResourceRegistry, mock_client: MockPlatformClient
    ) -> None:
        mock_client.add_topic("scratch.filtered.greenbox-dev", provisioned=False)

        result = await registry.resource_descriptors_with_status(mock_client)

        assert [(d.id, s) for d, s in result] == [
            ("audit-events", None),
            ("consent-events", ResourceStatus(up=True)),
            ("filtered-events", ResourceStatus(up=False)),
        ]
        assert sorted(call.name for call in mock_client.calls) == [
            "scratch.audit.greenbox-dev",
            "scratch.filtered.greenbox-dev",
            "stream.consent.greenbox-dev",
        ]

    @pytest.mark.asyncio
    async def test_descriptors_by_type_with_status(
        self, registry: ResourceRegistry, mock_client: MockPlatformClient
    ) -> None:
        result = await registry.resource_descriptors_by_type_with_status(
            ResourceType.DSH_TOPIC, mock_client
        )

        assert len(result) == 3

    @pytest.mark.asyncio
    async def test_remote_error_propagates(
        self, registry: ResourceRegistry, mock_client: MockPlatformClient
    ) -> None:
        mock_client.fail_with = RemoteError("topic status", "HTTP 500", 500)

        with pytest.raises(RemoteError) as exc_info:
            await registry.resource_descriptors_with_status(mock_client)
        assert exc_info.value.operation.startswith("status of topic '")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_status_without_provisioned_field(self, registry: ResourceRegistry) -> None:
        with pytest.raises(RemoteError, match="no 'provisioned' field"):
            await registry.resource_descriptors_with_status(StatuslessClient())


class TestTopicInstance:
    @pytest.mark.asyncio
    async def test_status_up(self, registry: ResourceRegistry, target: EngineTarget) -> None:
        realization = registry.resource_realization_by_identifier(CONSENT_EVENTS)
        instance = realization.resource_instance("pipeline", target)

        assert isinstance(instance, DshTopicInstance)
        assert instance.pipeline_id == "pipeline"
        assert instance.resource_realization is realization
        assert await instance.status() == ResourceStatus(up=True)

    @pytest.mark.asyncio
    async def test_status_of_missing_topic(
        self, registry: ResourceRegistry, target: EngineTarget
    ) -> None:
        realization = registry.resource_realization(ResourceType.DSH_TOPIC, "audit-events")

        with pytest.raises(ResourceNotFoundError) as exc_info:
            await realization.resource_instance(None, target).status()
        assert exc_info.value.resource_id == "audit-events"

    @pytest.mark.asyncio
    async def test_status_remote_error(
        self,
        registry: ResourceRegistry,
        target: EngineTarget,
        mock_client: MockPlatformClient,
    ) -> None:
        mock_client.fail_with = RemoteError("topic status", "HTTP 503", 503)
        realization = registry.resource_realization_by_identifier(CONSENT_EVENTS)

        with pytest.raises(RemoteError) as exc_info:
            await realization.resource_instance(None, target).status()
        assert exc_info.value.operation == "status of topic 'stream.consent.greenbox-dev'"
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_status_without_provisioned_field(
        self, registry: ResourceRegistry, tenant: Tenant
    ) -> None:
        target = EngineTarget(MockPlatformClientFactory(tenant, StatuslessClient()))
        realization = registry.resource_realization_by_identifier(CONSENT_EVENTS)

        with pytest.raises(RemoteError) as exc_info:
            await realization.resource_instance(None, target).status()
        assert exc_info.value.operation == "status of topic 'stream.consent.greenbox-dev'"

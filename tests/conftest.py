"""Shared fixtures for the Trifonius test suite.

- ``tenant`` / ``target``: the ``greenbox-dev`` tenant on the ``nplz`` platform,
  wired to an in-memory :class:`MockPlatformClient`
- ``config_dir``: a configuration directory with one DSH service processor
  and three DSH topics, written to ``tmp_path``
- ``engine``: an :class:`Engine` built from ``config_dir`` and the mock client
"""

import copy
from pathlib import Path
from typing import Any

import pytest
import yaml

from trifonius.compiler.yaml_config_source import YamlConfigSource
from trifonius.engine import Engine, reset_default_engine
from trifonius.kernel.identifiers import TenantName
from trifonius.kernel.platform import Tenant, platform
from trifonius.kernel.target import EngineTarget
from trifonius.stdlib.adapters.mock import MockPlatformClient, MockPlatformClientFactory

CONSENT_FILTER: dict[str, Any] = {
    "processor": {
        "id": "greenbox-consent-filter",
        "label": "Consent filter",
        "description": "Filters messages on consent for ${TENANT}",
        "version": "0.0.2",
        "metadata": [["owner", "greenbox"], ["console", "${CONSOLE_URL}"]],
        "more-info-url": "https://www.kpn.com/dsh",
    },
    "inbound-junctions": {
        "inbound-topic": {
            "label": "Inbound topic",
            "description": "Topic to read messages from",
            "allowed-resource-types": ["dsh-topic"],
        },
    },
    "outbound-junctions": {
        "outbound-topic": {
            "label": "Outbound topic",
            "description": "Topic to write consented messages to",
            "allowed-resource-types": ["dsh-topic"],
        },
        "audit-topic": {
            "label": "Audit topic",
            "description": "Optional audit trail",
            "allowed-resource-types": ["dsh-topic"],
            "required": False,
        },
    },
    "deploy": {
        "parameters": {
            "mitigation-strategy": {
                "type": "selection",
                "label": "Mitigation strategy",
                "description": "What to do with non-consented messages",
                "options": ["block", "anonymize"],
                "default": "block",
            },
            "enrich": {
                "type": "boolean",
                "label": "Enrich",
                "description": "Enrich messages with consent details",
                "default": False,
            },
            "identifier-field": {
                "type": "free-text",
                "label": "Identifier field",
                "description": "Field that holds the subject id",
            },
            "comment": {
                "type": "free-text",
                "label": "Comment",
                "description": "Free comment",
                "optional": True,
            },
        },
    },
    "dshservice": {
        "image": "registry.cp.kpn-dsh.com/${TENANT}/consentfilter:0.0.2",
        "environment": {
            "LOG_LEVEL": "info",
            "INSTANCE_ID": "${RANDOM}",
            "INSTANCE_TAG": "${RANDOM}",
            "INBOUND_TOPICS": {"inbound-junction": "inbound-topic"},
            "OUTBOUND_TOPIC": {"outbound-junction": "outbound-topic"},
            "MITIGATION": {"parameter": "mitigation-strategy"},
            "ENRICH": {"parameter": "enrich"},
            "COMMENT": {"parameter": "comment"},
        },
        "metrics": {"port": 9095},
        "profiles": {
            "large": {
                "label": "Large",
                "description": "Three large instances",
                "cpus": 1.0,
                "mem": 2048,
                "instances": 3,
            },
            "minimal": {
                "label": "Minimal",
                "description": "One small instance",
                "cpus": 0.1,
                "mem": 256,
                "default": True,
                "environment": {"LOG_LEVEL": "warn"},
            },
        },
    },
}

TOPICS: dict[str, dict[str, Any]] = {
    "consent-events": {
        "id": "consent-events",
        "label": "Consent events",
        "description": "Consent updates for ${TENANT}",
        "topic": "stream.consent.${TENANT}",
        "partitions": 3,
        "replication-factor": 3,
    },
    "filtered-events": {
        "id": "filtered-events",
        "label": "Filtered events",
        "description": "Consented messages",
        "topic": "scratch.filtered.${TENANT}",
    },
    "audit-events": {
        "id": "audit-events",
        "label": "Audit events",
        "description": "Audit trail",
        "topic": "scratch.audit.${TENANT}",
    },
}


def write_yaml(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_default_engine():
    yield
    reset_default_engine()


@pytest.fixture
def tenant() -> Tenant:
    return Tenant(TenantName("greenbox-dev"), platform("nplz"), user="1903:1903")


@pytest.fixture
def mock_client() -> MockPlatformClient:
    client = MockPlatformClient()
    for topic in ("stream.consent.greenbox-dev", "scratch.filtered.greenbox-dev"):
        client.add_topic(topic)
    return client


@pytest.fixture
def client_factory(tenant: Tenant, mock_client: MockPlatformClient) -> MockPlatformClientFactory:
    return MockPlatformClientFactory(tenant, mock_client)


@pytest.fixture
def target(client_factory: MockPlatformClientFactory) -> EngineTarget:
    return EngineTarget(client_factory)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    root = tmp_path / "config"
    write_yaml(root / "processors" / "dsh-service" / "greenbox-consent-filter.yaml", CONSENT_FILTER)
    for name, topic in TOPICS.items():
        write_yaml(root / "resources" / "dsh-topic" / f"{name}.yaml", topic)
    return root


@pytest.fixture
def config_source(config_dir: Path) -> YamlConfigSource:
    return YamlConfigSource(config_dir)


@pytest.fixture
def engine(config_source: YamlConfigSource, client_factory: MockPlatformClientFactory) -> Engine:
    return Engine.create(config_source, client_factory)


@pytest.fixture
def consent_filter() -> dict[str, Any]:
    """A fresh copy of the consent filter processor configuration."""
    return copy.deepcopy(CONSENT_FILTER)


@pytest.fixture
def topic_configs() -> dict[str, dict[str, Any]]:
    return copy.deepcopy(TOPICS)


@pytest.fixture
def yaml_writer():
    return write_yaml

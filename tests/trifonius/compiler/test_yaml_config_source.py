"""Tests for YamlConfigSource."""

from pathlib import Path

import pytest

from trifonius.compiler.yaml_config_source import YamlConfigSource
from trifonius.kernel.exceptions import ConfigurationError, ResourceNotFoundError
from trifonius.kernel.ports import ConfigSource


def test_is_a_config_source(config_source: YamlConfigSource) -> None:
    assert isinstance(config_source, ConfigSource)


def test_names_are_sorted_stems(config_source: YamlConfigSource) -> None:
    assert config_source.processor_config_names("dsh-service") == ["greenbox-consent-filter"]
    assert config_source.resource_config_names("dsh-topic") == [
        "audit-events",
        "consent-events",
        "filtered-events",
    ]


def test_missing_directories_have_no_names(tmp_path: Path) -> None:
    source = YamlConfigSource(tmp_path / "nowhere")

    assert source.processor_config_names("dsh-service") == []
    assert source.resource_config_names("dsh-topic") == []


def test_non_yaml_files_are_ignored(config_dir: Path) -> None:
    (config_dir / "resources" / "dsh-topic" / "README.md").write_text("notes")

    assert "README" not in YamlConfigSource(config_dir).resource_config_names("dsh-topic")


def test_load_resource_config(config_source: YamlConfigSource) -> None:
    data = config_source.resource_config("dsh-topic", "consent-events")

    assert data["topic"] == "stream.consent.${TENANT}"
    assert data["replication-factor"] == 3


def test_yml_suffix_is_accepted(config_dir: Path, yaml_writer) -> None:
    yaml_writer(config_dir / "resources" / "dsh-topic" / "extra.yml", {"id": "extra"})

    source = YamlConfigSource(config_dir)

    assert "extra" in source.resource_config_names("dsh-topic")
    assert source.resource_config("dsh-topic", "extra") == {"id": "extra"}


def test_missing_config(config_source: YamlConfigSource) -> None:
    with pytest.raises(ResourceNotFoundError) as exc_info:
        config_source.processor_config("dsh-service", "nope")
    assert "greenbox-consent-filter" in str(exc_info.value)


def test_invalid_yaml(config_dir: Path) -> None:
    (config_dir / "resources" / "dsh-topic" / "broken.yaml").write_text("id: [unclosed\n")

    with pytest.raises(ConfigurationError, match="broken.yaml"):
        YamlConfigSource(config_dir).resource_config("dsh-topic", "broken")


def test_non_mapping(config_dir: Path) -> None:
    (config_dir / "resources" / "dsh-topic" / "list.yaml").write_text("- a\n- b\n")

    with pytest.raises(ConfigurationError, match="expected a mapping"):
        YamlConfigSource(config_dir).resource_config("dsh-topic", "list")

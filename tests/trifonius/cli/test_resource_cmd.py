"""Tests for the ``trifonius resource`` commands."""

import json

import pytest
from typer.testing import CliRunner

from trifonius.cli.main import app
from trifonius.engine import Engine


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, engine: Engine):
    def _invoke(*args: str):
        return runner.invoke(app, list(args), obj={"engine": engine})

    return _invoke


def test_list_json(invoke) -> None:
    result = invoke("--json", "resource", "list")

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [entry["identifier"] for entry in data] == [
        "audit-events:dsh-topic",
        "consent-events:dsh-topic",
        "filtered-events:dsh-topic",
    ]
    assert data[1]["topic"] == "stream.consent.greenbox-dev"
    assert "status" not in data[0]


def test_list_with_status(invoke) -> None:
    result = invoke("--json", "resource", "list", "--status")

    assert result.exit_code == 0
    assert [entry["status"] for entry in json.loads(result.output)] == ["not found", "up", "up"]


def test_list_by_type_with_status(invoke) -> None:
    result = invoke("--json", "resource", "list", "--type", "dsh-topic", "--status")

    assert result.exit_code == 0
    assert len(json.loads(result.output)) == 3


def test_list_unknown_type(invoke) -> None:
    result = invoke("resource", "list", "--type", "kafka")

    assert result.exit_code != 0


def test_list_table(invoke) -> None:
    result = invoke("resource", "list", "--status")

    assert result.exit_code == 0
    assert "consent-events" in result.output


def test_list_yaml(invoke) -> None:
    result = invoke("--yaml", "resource", "list")

    assert result.exit_code == 0
    assert "identifier: audit-events:dsh-topic" in result.output


def test_types(invoke) -> None:
    result = invoke("--json", "resource", "types")

    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {
            "type": "dsh-topic",
            "label": "DSH Topic",
            "description": "Kafka topic managed by the DSH platform",
        }
    ]

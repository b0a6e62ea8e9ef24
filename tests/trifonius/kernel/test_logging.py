"""Tests for trifonius.kernel.logging."""

import json
from pathlib import Path

import pytest

from trifonius.kernel import logging as trifonius_logging
from trifonius.kernel.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure_logging(level="WARNING", format="structured", force_reconfigure=True)


def test_get_logger_is_cached() -> None:
    assert get_logger("trifonius.example") is get_logger("trifonius.example")


def test_configure_logging_is_idempotent() -> None:
    configure_logging(level="INFO", format="console", force_reconfigure=True)
    handler_ids = list(trifonius_logging._HANDLER_IDS)

    configure_logging(level="INFO", format="console")

    assert trifonius_logging._HANDLER_IDS == handler_ids


def test_reconfigure_replaces_handlers() -> None:
    configure_logging(level="INFO", format="console", force_reconfigure=True)
    configure_logging(level="DEBUG", format="json")

    assert len(trifonius_logging._HANDLER_IDS) == 1
    assert trifonius_logging._CURRENT_CONFIG is not None
    assert trifonius_logging._CURRENT_CONFIG["level"] == "DEBUG"


def test_output_file_receives_json_records(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "trifonius.log"
    configure_logging(level="INFO", format="console", output_file=log_file, force_reconfigure=True)

    get_logger("trifonius.tests").info("Deployed {service}", service="pipeline-filter")
    # closes the file sink
    configure_logging(level="WARNING", format="console", force_reconfigure=True)

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert records[-1]["record"]["message"] == "Deployed pipeline-filter"
    assert records[-1]["record"]["extra"]["service"] == "pipeline-filter"

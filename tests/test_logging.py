"""Tests for structlog configuration."""

from __future__ import annotations

import json

import pytest

from framecheck.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


def _last_json_line(text: str) -> dict:
    lines = [line for line in text.splitlines() if line.strip()]
    return json.loads(lines[-1])


class TestConfigureLogging:
    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="LOUD")

    def test_json_to_stderr(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        get_logger("framecheck.test").info("file_linted", diagnostics=3)

        captured = capsys.readouterr()
        assert captured.out == ""
        event = _last_json_line(captured.err)
        assert event["event"] == "file_linted"
        assert event["diagnostics"] == 3
        assert event["level"] == "info"
        assert event["logger"] == "framecheck.test"
        assert event["service"] == "framecheck"
        assert "timestamp" in event

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        log = get_logger("framecheck.test")
        log.info("hidden")
        log.warning("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert _last_json_line(err)["event"] == "shown"

    def test_no_timestamp(self, capsys):
        configure_logging(level="INFO", json_format=True, add_timestamp=False)
        get_logger().info("plain")
        event = _last_json_line(capsys.readouterr().err)
        assert "timestamp" not in event
        assert event["logger"] == "framecheck"


class TestContext:
    def test_bind_and_unbind(self, capsys):
        configure_logging(level="INFO", json_format=True)
        log = get_logger("framecheck.test")

        bind_context(path="etl/orders.py", run="r1")
        log.info("with_context")
        unbind_context("run")
        log.info("partial_context")

        lines = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.strip()]
        assert lines[-2]["path"] == "etl/orders.py"
        assert lines[-2]["run"] == "r1"
        assert "run" not in lines[-1]
        assert lines[-1]["path"] == "etl/orders.py"

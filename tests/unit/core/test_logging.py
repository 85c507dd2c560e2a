"""
Tests for the logging setup.
"""

import json
import logging

import pytest
import structlog

from rapidgen.core.logging import configure_logging, generation_context, get_logger


@pytest.fixture
def restore_logging():
    yield
    configure_logging()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level(self, restore_logging):
        """Test that the level name is applied to the root logger."""
        configure_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level(self, restore_logging):
        """Test that unknown level names fall back to INFO."""
        configure_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_json_file(self, temp_dir, restore_logging):
        """Test JSON lines written to a log file."""
        path = temp_dir / "rapidgen.log"
        configure_logging(level="DEBUG", json_output=True, log_file=str(path))
        get_logger("rapidgen.tests").info("robot_created", robot="IRB140")

        event = json.loads(path.read_text().strip().splitlines()[-1])
        assert event["event"] == "robot_created"
        assert event["robot"] == "IRB140"
        assert event["level"] == "info"
        assert "timestamp" in event


class TestGenerationContext:
    """Tests for generation_context."""

    def test_binds_and_unbinds(self):
        """Test that the names are bound only inside the block."""
        with generation_context("Weld", "IRB140"):
            bound = structlog.contextvars.get_contextvars()
            assert bound["module"] == "Weld"
            assert bound["robot"] == "IRB140"
        assert "module" not in structlog.contextvars.get_contextvars()

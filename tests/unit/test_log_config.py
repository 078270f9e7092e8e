"""Unit tests for structured logging setup."""

import json
from typing import Iterator

import pytest
import structlog

from blob_text_extractor.log_config import configure_logging


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_lines_carry_service_and_bound_event(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging("INFO", "extractor-test")

        with structlog.contextvars.bound_contextvars(event_id="831e1650"):
            structlog.get_logger().info("blob_uploaded", blob_name="photo.json")

        line = json.loads(capsys.readouterr().out.strip())
        assert line["event"] == "blob_uploaded"
        assert line["service"] == "extractor-test"
        assert line["event_id"] == "831e1650"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_level_filters_lower_messages(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("warning")

        logger = structlog.get_logger()
        logger.info("not_shown")
        logger.warning("warning_shown")

        out = capsys.readouterr().out
        assert "not_shown" not in out
        assert "warning_shown" in out

    def test_unknown_level_defaults_to_info(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("chatty")

        logger = structlog.get_logger()
        logger.debug("debug_hidden")
        logger.info("info_shown")

        out = capsys.readouterr().out
        assert "debug_hidden" not in out
        assert "info_shown" in out

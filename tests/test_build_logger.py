"""Tests for the counting build logger."""

import logging

import pytest

from symdoc.build_logger import BuildLogger


def test_report_without_warnings(caplog: pytest.LogCaptureFixture) -> None:
    """Verify the success summary when nothing was warned about."""
    logger = BuildLogger()
    logger.info("Module: %s", "core")

    with caplog.at_level(logging.INFO, logger="symdoc"):
        summary = logger.report()

    assert summary == "Generation completed successfully"
    assert "Generation completed successfully" in caplog.text


def test_report_counts_warnings(caplog: pytest.LogCaptureFixture) -> None:
    """Verify warnings are counted and reported in the summary."""
    logger = BuildLogger()
    with caplog.at_level(logging.INFO, logger="symdoc"):
        logger.warn("first %s", "problem")
        logger.warn("second")
        logger.error("errors are not counted")
        summary = logger.report()

    assert logger.warning_count == 2
    assert summary == "Generation completed with 2 warnings"
    assert "first problem" in caplog.text


def test_wraps_given_logger() -> None:
    """Verify messages go to the wrapped logger."""
    log = logging.getLogger("symdoc.test")
    logger = BuildLogger(log)
    assert logger.log is log

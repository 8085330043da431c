"""Tests for package logging configuration."""

import io
import logging

import pytest

from paytrack import logging_setup
from paytrack.logging_setup import configure_logging, get_logger


@pytest.fixture
def pkg_logger(monkeypatch):
    """Give each test an unconfigured package logger and restore it afterwards."""
    logger = logging.getLogger("paytrack")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    monkeypatch.delenv("PAYTRACK_LOG_LEVEL", raising=False)
    logger.handlers = []

    yield logger

    logger.handlers, level, logger.propagate = saved
    logger.setLevel(level)


def test_get_logger_adds_null_handler(pkg_logger):
    get_logger("paytrack.database")
    assert any(isinstance(h, logging.NullHandler) for h in pkg_logger.handlers)


def test_configure_logging_writes_to_stream(pkg_logger):
    stream = io.StringIO()
    configure_logging("info", stream=stream, fmt="%(levelname)s %(message)s")

    get_logger("paytrack.domain.tracker").info("Session established")

    assert stream.getvalue() == "INFO Session established\n"
    assert not any(isinstance(h, logging.NullHandler) for h in pkg_logger.handlers)


def test_default_level_is_warning(pkg_logger):
    configure_logging(stream=io.StringIO())
    assert pkg_logger.level == logging.WARNING


def test_level_from_environment(pkg_logger, monkeypatch):
    monkeypatch.setenv("PAYTRACK_LOG_LEVEL", "debug")
    configure_logging(stream=io.StringIO())
    assert pkg_logger.level == logging.DEBUG


def test_invalid_level_falls_back_to_warning(pkg_logger):
    configure_logging("chatty", stream=io.StringIO())
    assert pkg_logger.level == logging.WARNING


def test_second_call_only_changes_level(pkg_logger):
    configure_logging("warning", stream=io.StringIO())
    configure_logging("debug", stream=io.StringIO())

    assert len(pkg_logger.handlers) == 1
    assert pkg_logger.level == logging.DEBUG

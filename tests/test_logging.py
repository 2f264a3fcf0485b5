"""Tests for the package logger setup."""

import logging

from vaultflow._logging import PACKAGE_LOGGER, configure_logging, set_quiet_mode


def test_configure_once():
    configure_logging()
    configure_logging()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    assert len(package_logger.handlers) == 1
    assert package_logger.propagate is False
    assert package_logger.level == logging.INFO


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("VAULTFLOW_LOG_LEVEL", "debug")
    configure_logging()
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("VAULTFLOW_LOG_LEVEL", "chatty")
    configure_logging()
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO


def test_quiet_mode_round_trip():
    configure_logging()
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    set_quiet_mode(True)
    assert package_logger.level == logging.ERROR
    assert package_logger.handlers[0].level == logging.ERROR

    set_quiet_mode(False)
    assert package_logger.level == logging.INFO

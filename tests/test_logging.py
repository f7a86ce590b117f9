"""Tests for logging setup."""

import logging
from pathlib import Path

import pytest

from moonraker_fleet.logging import NETWORK_LOGGERS, configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    network_levels = {name: logging.getLogger(name).level for name in NETWORK_LOGGERS}

    yield

    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    for name, network_level in network_levels.items():
        logging.getLogger(name).setLevel(network_level)
    logging.captureWarnings(False)


def test_file_handler_receives_records(tmp_path: Path, restore_logging) -> None:
    log_path = tmp_path / "logs" / "fleet.log"

    configure_logging("debug", log_path=log_path)
    logging.getLogger("moonraker_fleet.test").debug("derived 3 printers")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert logging.getLogger().level == logging.DEBUG
    text = log_path.read_text(encoding="utf-8")
    assert "DEBUG | moonraker_fleet.test | derived 3 printers" in text


def test_network_loggers_quiet_by_default(restore_logging) -> None:
    configure_logging("INFO")

    for name in NETWORK_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_network_logging_opt_in(restore_logging) -> None:
    configure_logging("INFO", log_network=True)

    for name in NETWORK_LOGGERS:
        assert logging.getLogger(name).level == logging.NOTSET


def test_unknown_level_falls_back_to_info(restore_logging) -> None:
    configure_logging("chatty")

    assert logging.getLogger().level == logging.INFO

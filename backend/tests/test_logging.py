import logging

import pytest
import structlog

from rps_dashboard.logging import build_renderer, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_production_renders_json():
    assert isinstance(build_renderer("production"), structlog.processors.JSONRenderer)
    assert isinstance(build_renderer("development"), structlog.dev.ConsoleRenderer)


def test_configure_installs_single_handler(restore_root_logger):
    configure_logging("development", "debug")
    handler = configure_logging("development", "warning")

    assert restore_root_logger.handlers == [handler]
    assert restore_root_logger.level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_unknown_level_falls_back_to_info(restore_root_logger):
    configure_logging("development", "chatty")
    assert restore_root_logger.level == logging.INFO

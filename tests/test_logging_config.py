import logging

import pytest

from ranged_combat.logging_config import configure_logging


@pytest.fixture()
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_configure_logging_honours_env(monkeypatch, root_logger):
    monkeypatch.setenv("RANGED_COMBAT_LOG_LEVEL", "debug")
    configure_logging()

    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1


def test_configure_logging_default_level(monkeypatch, root_logger):
    monkeypatch.delenv("RANGED_COMBAT_LOG_LEVEL", raising=False)
    configure_logging(logging.WARNING)
    assert root_logger.level == logging.WARNING

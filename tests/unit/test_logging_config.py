from __future__ import annotations

import logging
import sys

import pytest

from kill_dev import logging_config


@pytest.fixture
def clean_root():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    for handler in saved_handlers:
        root.removeHandler(handler)

    yield root

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_setup_logging_default_console_is_user_friendly(clean_root):
    logging_config.setup_logging()

    assert len(clean_root.handlers) == 1
    console = clean_root.handlers[0]
    assert console.stream is sys.stderr
    assert console.level == logging.WARNING
    assert console.formatter._fmt == "%(message)s"
    assert clean_root.level == logging.WARNING


def test_setup_logging_debug_uses_technical_format(clean_root):
    logging_config.setup_logging(logging.DEBUG)

    console = clean_root.handlers[0]
    assert console.level == logging.DEBUG
    assert console.formatter._fmt == logging_config.TECHNICAL_FORMAT


def test_setup_logging_accepts_level_names(clean_root):
    logging_config.setup_logging("info")

    assert clean_root.level == logging.INFO


def test_setup_logging_rejects_unknown_level(clean_root):
    with pytest.raises(ValueError):
        logging_config.setup_logging("chatty")


def test_setup_logging_adds_file_handler(clean_root, tmp_path):
    log_path = tmp_path / "logs" / "kill-dev.log"

    logging_config.setup_logging("WARNING", log_file=log_path)

    file_handlers = [handler for handler in clean_root.handlers if isinstance(handler, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].level == logging.INFO
    assert clean_root.level == logging.INFO
    assert log_path.parent.is_dir()


def test_setup_logging_replaces_previous_handlers(clean_root):
    logging_config.setup_logging()
    logging_config.setup_logging()

    assert len(clean_root.handlers) == 1


def test_setup_logging_quiets_third_parties(clean_root):
    logging_config.setup_logging(logging.DEBUG)

    assert logging.getLogger("asyncio").level == logging.WARNING
    assert logging.getLogger("prompt_toolkit").level == logging.WARNING

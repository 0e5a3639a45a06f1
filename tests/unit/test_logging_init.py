from __future__ import annotations

import logging
from io import StringIO

from flowsheet.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    enable_debug,
    log_summary,
    setup_logging,
)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == "flowsheet"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    assert setup_logging() is setup_logging()
    assert len(logging.getLogger(LOGGER_NAME).handlers) == 1


def test_labeled_prefixes():
    captured = StringIO()
    logger = logging.getLogger("test_flowsheet_labels")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    logger.info("info message")
    logger.warning("warning message")
    logger.error("error message")
    logger.log(SUMMARY_LEVEL, "records=1")

    assert captured.getvalue().splitlines() == [
        "INFO info message",
        "WARN warning message",
        "ERROR error message",
        "SUMMARY records=1",
    ]


def test_log_summary_and_module_loggers_reach_stdout(capsys):
    setup_logging()
    logging.getLogger("flowsheet.services.orchestrator").info("child message")
    logging.getLogger("flowsheet.services.orchestrator").debug("hidden")
    log_summary("records=0")
    out = capsys.readouterr().out
    assert "INFO child message" in out
    assert "SUMMARY records=0" in out
    assert "hidden" not in out


def test_enable_debug(capsys):
    enable_debug()
    logger = logging.getLogger(LOGGER_NAME)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    logging.getLogger("flowsheet.services.content_parser").debug("child debug")
    out = capsys.readouterr().out
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG child debug" in out

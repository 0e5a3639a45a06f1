from __future__ import annotations

import logging
import sys

"""CLI log output.

One stdout line per record: a level label (INFO|WARN|ERROR|SUMMARY), then the
message. Modules log through `logging.getLogger(__name__)`; everything under
the "flowsheet" logger ends up on the handler installed here.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "enable_debug",
    "log_summary",
    "setup_logging",
]

LOGGER_NAME = "flowsheet"

# Between INFO (20) and WARNING (30) so it survives the default level
SUMMARY_LEVEL = 25
logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")


class LabeledFormatter(logging.Formatter):
    LABELS = {logging.WARNING: "WARN"}

    def format(self, record: logging.LogRecord) -> str:
        return f"{self.LABELS.get(record.levelno, record.levelname)} {record.getMessage()}"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Route the "flowsheet" logger to stdout with labeled lines.

    Calling it again keeps the existing handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    if not any(isinstance(h.formatter, LabeledFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(LabeledFormatter())
        logger.addHandler(handler)
    return logger


def enable_debug() -> None:
    setup_logging(logging.DEBUG).debug("debug mode enabled")


def log_summary(message: str) -> None:
    logging.getLogger(LOGGER_NAME).log(SUMMARY_LEVEL, message)

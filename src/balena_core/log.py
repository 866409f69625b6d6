from __future__ import annotations

import logging
import sys
from typing import Any

from .ports import LoggerPort

LOGGER_NAME = "balena"


class StdLogger(LoggerPort):
    """
    LoggerPort backed by the standard `logging` module.
    Contextual fields are appended to the message as key=value pairs.
    """

    def __init__(self, name: str = LOGGER_NAME) -> None:
        self._logger = logging.getLogger(name)

    @staticmethod
    def _format(msg: str, fields: dict[str, Any]) -> str:
        if not fields:
            return msg
        extras = " ".join(f"{k}={v!r}" for k, v in fields.items())
        return f"{msg} {extras}"

    def debug(self, msg: str, **fields: Any) -> None:
        self._logger.debug(self._format(msg, fields))

    def info(self, msg: str, **fields: Any) -> None:
        self._logger.info(self._format(msg, fields))

    def warning(self, msg: str, **fields: Any) -> None:
        self._logger.warning(self._format(msg, fields))

    def error(self, msg: str, **fields: Any) -> None:
        self._logger.error(self._format(msg, fields))


def configure_logging(debug: bool = False) -> logging.Logger:
    """
    Install a single handler on the CLI logger.
    With debug on, everything from DEBUG up goes to stdout prefixed with
    "[DEBUG]"; otherwise only warnings reach stderr.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if debug:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.setLevel(logging.DEBUG)
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.setLevel(logging.WARNING)
    logger.addHandler(handler)
    logger.propagate = False
    return logger

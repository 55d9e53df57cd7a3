"""Logging configuration for clonetrack using loguru.

Records go to ``stderr`` so that they never mix with the progress and report
output the CLI writes to ``stdout``. ``LOG_LEVEL`` selects the threshold and
``LOG_FORMAT=json`` switches to serialized records. Standard library
``logging`` records, such as the ones GitPython emits, are intercepted and
routed through the same sink.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from loguru import logger

from clonetrack.config import LOG_FORMAT, LOG_LEVEL

if TYPE_CHECKING:
    from loguru import Logger, Record

_HUMAN_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>{extra[context]}"
)

# GitPython logs the advice git prints while fetching as warnings, shown only at these levels
_VERBOSE_LEVELS = frozenset({"TRACE", "DEBUG", "INFO"})


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a record through loguru, keeping the caller's frame information.

        Parameters
        ----------
        record : logging.LogRecord
            The record produced by a standard library logger.

        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _flatten_extra(record: Record) -> None:
    """Render the ``extra={...}`` keyword of a logging call as ``key=value`` pairs."""
    record["extra"].setdefault("name", record["name"])
    fields = record["extra"].get("extra") or {}
    record["extra"]["context"] = "".join(f" {key}={value}" for key, value in fields.items())


def configure_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    """Install the clonetrack sink and intercept standard library logging.

    GitPython records below ``ERROR`` are dropped unless ``level`` is ``INFO`` or lower.

    Parameters
    ----------
    level : str
        Minimum level of the records to emit (default: ``LOG_LEVEL`` environment variable or ``WARNING``).
    fmt : str
        ``"json"`` for serialized records, anything else for the human readable format.

    """
    logger.remove()
    logger.configure(patcher=_flatten_extra)
    if fmt.lower() == "json":
        logger.add(sys.stderr, level=level.upper(), serialize=True, backtrace=False, diagnose=False)
    else:
        logger.add(sys.stderr, level=level.upper(), format=_HUMAN_FORMAT, backtrace=False, diagnose=False)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger("git").setLevel(logging.NOTSET if level.upper() in _VERBOSE_LEVELS else logging.ERROR)


def get_logger(name: str | None = None) -> Logger:
    """Return a loguru logger bound to ``name``.

    Parameters
    ----------
    name : str | None
        Usually the ``__name__`` of the calling module.

    Returns
    -------
    Logger
        The bound logger.

    """
    if name is None:
        return logger
    return logger.bind(name=name)


configure_logging()

# File: src/mstair/stringify/xlogging/logger_factory.py
"""
Factory for CoreLogger instances.

Loggers are created through logging.getLogger() so they join the standard
hierarchy (parents, propagation, caplog) while still being CoreLoggers.
"""

import logging
import sys
from pathlib import Path

from mstair.stringify.xlogging.core_logger import CoreLogger


__all__ = ["create_logger"]


def create_logger(name: str | None, *, level: int | str | None = None) -> CoreLogger:
    """
    Return the CoreLogger called `name`, creating or replacing it as needed.

    `__main__` and empty names are replaced by the running script's stem.

    :param name: Logger name, usually `__name__`.
    :param level: Explicit level; otherwise the environment decides (see LogLevelConfig).
    :raises TypeError: If the logging module hands back something else.
    :return CoreLogger: The logger.
    """
    logger_name = name or ""
    if not logger_name or logger_name == "__main__":
        arg0 = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
        logger_name = arg0.stem if arg0 and arg0.stem else "embedded_main"

    existing = logging.Logger.manager.loggerDict.get(logger_name)
    if isinstance(existing, CoreLogger):
        logger = existing
    else:
        if isinstance(existing, logging.Logger):
            # A plain Logger of this name exists already; replace it.
            del logging.Logger.manager.loggerDict[logger_name]
        logger = _get_core_logger_from_logging(logger_name)

    if level is not None:
        logger.setLevel(level)
    return logger


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create a CoreLogger through logging.getLogger().

    Temporarily sets CoreLogger as the logger class so the new logger gets its
    parent and placeholder fix-ups from the logging manager.
    """
    logging_class = logging.getLoggerClass()
    logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


# End of file: src/mstair/stringify/xlogging/logger_factory.py

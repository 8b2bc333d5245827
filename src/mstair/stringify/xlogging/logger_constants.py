# File: src/mstair/stringify/xlogging/logger_constants.py

import logging


TRACE = logging.DEBUG - 1  # (9) LOG.trace() will not output at DEBUG level
SUPPRESS = -1  # Never shown; for messages kept only for internal bookkeeping


_logging_constants_initialized = False


def initialize_logger_constants() -> None:
    """Register the custom level names once per process."""
    global _logging_constants_initialized
    if _logging_constants_initialized:
        return
    _logging_constants_initialized = True
    for key, value in {
        "TRACE": TRACE,
        "SUPPRESS": SUPPRESS,
    }.items():
        if key not in logging.getLevelNamesMapping():
            logging.addLevelName(value, key)


# End of file: src/mstair/stringify/xlogging/logger_constants.py

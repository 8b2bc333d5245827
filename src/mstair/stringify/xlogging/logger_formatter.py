# File: src/mstair/stringify/xlogging/logger_formatter.py
"""
Log record formatting for CoreLogger output on stderr.

Adds `levelName` (coloured), `fileAndLine` (relative to the working directory)
and timezone-aware timestamps to each record, then re-indents continuation
lines so multi-line dumps and tracebacks stay visually attached to their
record.
"""

import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

import pytz
from colorama import Fore

import mstair.stringify.base.config as cfg
from mstair.stringify.nodes import text
from mstair.stringify.stringify_api import stringify


__all__ = ["CoreFormatter", "get_color_code", "rgb_code"]

K_LOG_TZ = "LOG_TZ"
K_COLOR = "color"

DEFAULT_FORMAT = r"%(levelName)s %(asctime)s %(fileAndLine)s %(funcName)s() %(message)s"
DEFAULT_DATEFMT = "%-I:%M%p"
CONTINUATION_INDENT = "    "

FormatStyle = Literal["%", "{", "$"]


def rgb_code(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to an ANSI escape code for terminal colour output.

    :param r: Red component (0-255)
    :param g: Green component (0-255)
    :param b: Blue component (0-255)
    :return str: ANSI escape code for the specified colour.
    """
    return f"\033[38;2;{max(0, min(255, r))};{max(0, min(255, g))};{max(0, min(255, b))}m"


COLOR_MAP: dict[str | None, str] = {
    "fileAndLine": rgb_code(4 << 4, 8 << 4, 10 << 4),
    "TRACE": rgb_code(96, 0, 64),
    "DEBUG": rgb_code(128, 128, 128),
    "INFO": rgb_code(184, 184, 216),
    "WARNING": rgb_code(192, 176, 0),
    "ERROR": rgb_code(224, 128, 0),
    "CRITICAL": rgb_code(255, 64, 64),
    None: Fore.RESET,
}


def get_color_code(key: Any = None) -> str:
    """
    Return the escape code for a level name, field name, `#rrggbb` or colorama
    colour name; empty when use_color() says no.
    """
    if not cfg.use_color():
        return ""
    if key in {"", "RESET"} or key is None:
        return Fore.RESET
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    if isinstance(key, str) and re.fullmatch(r"#[0-9A-Fa-f]{6}", key):
        return rgb_code(*[int(key[i : i + 2], 16) for i in (1, 3, 5)])
    _clean_key = str(key).upper()
    if "LIGHT" in _clean_key and not _clean_key.endswith("_EX"):
        _clean_key += "_EX"
    return getattr(Fore, _clean_key, Fore.RESET)


def _timezone_from_environment() -> Any:
    name = os.environ.get(K_LOG_TZ, "UTC").strip() or "UTC"
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logging.getLogger(__name__).warning("Unknown %s=%r, using UTC", K_LOG_TZ, name)
        return pytz.utc


class CoreFormatter(logging.Formatter):
    """
    Formatter installed on the root stderr handler by initialize_root().
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: FormatStyle = "%",
        validate: bool = True,
        *,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            fmt=fmt or DEFAULT_FORMAT,
            datefmt=datefmt,
            style=style,
            validate=validate,
            defaults=defaults,
        )
        self.tz = _timezone_from_environment()

    def format(self, record: logging.LogRecord) -> str:
        record.fileAndLine = self.format_fileAndLine(record.pathname, record.lineno)
        record.levelName = get_color_code(record.levelname) + record.levelname + get_color_code()
        message = super().format(record)
        message = self.indent_continuation_lines(message)
        color_key = getattr(record, K_COLOR, record.levelname)
        return get_color_code(color_key) + message + get_color_code()

    @staticmethod
    def indent_continuation_lines(message: str) -> str:
        """Shift every line after the first so its common indent becomes CONTINUATION_INDENT."""
        if "\n" not in message:
            return message
        return stringify(
            text(message.rstrip("\n")),
            wrap_width=None,
            indent_increment="",
            base_indent=CONTINUATION_INDENT,
        )

    @staticmethod
    def format_file(file: str) -> str:
        """Path relative to the working directory when possible, always posix."""
        if not file:
            return "<unknown file>"
        path = Path(file)
        try:
            return path.resolve().relative_to(Path.cwd().resolve()).as_posix()
        except (OSError, ValueError):
            return path.as_posix()

    def format_fileAndLine(self, file: str, lineno: int) -> str:
        fileAndLine = f"{self.format_file(file)}:{lineno}"
        return get_color_code("fileAndLine") + fileAndLine + get_color_code()

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        _datetime = datetime.fromtimestamp(record.created, self.tz)
        datefmt = datefmt or os.environ.get("LOG_DATEFMT", DEFAULT_DATEFMT)
        if "%" not in datefmt:
            return _datetime.isoformat()
        # "%-I" is not portable; strip the flag and the leading zero instead.
        _result = _datetime.strftime(datefmt.replace("%-", "%"))
        return _result.replace("AM", "am").replace("PM", "pm").lstrip("0")


# End of file: src/mstair/stringify/xlogging/logger_formatter.py

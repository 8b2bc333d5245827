# File: src/mstair/stringify/xlogging/core_logger.py
"""
Application logger whose arguments are laid out with stringify().

Example:
    >>> from mstair.stringify.xlogging import create_logger
    >>> LOG = create_logger(__name__)
    >>> LOG.info("Loaded %s", {"rows": 3, "columns": ["id", "name"]})
    >>> LOG.dump(config, label="config")
    >>>
    >>> with LOG.prefix_with("[import]"):
    ...     LOG.debug("Reading %s", path)

Design:
- Only the root logger owns handlers; CoreLogger instances propagate.
- Levels come from the environment through LogLevelConfig, never lower than root's.
- initialize_root() is the one entry point for handler setup.
"""

from __future__ import annotations

import contextvars
import logging
import os
import re
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TextIO

from mstair.stringify.base.types import PRIMITIVE_TYPES
from mstair.stringify.stringify_api import stringify
from mstair.stringify.xlogging.logger_constants import TRACE, initialize_logger_constants
from mstair.stringify.xlogging.logger_formatter import DEFAULT_FORMAT, CoreFormatter
from mstair.stringify.xlogging.logger_util import LogLevelConfig


__all__: list[str] = [
    "CoreLogger",
    "initialize_root",
]

_LOG_KWARGS_FORBIDDEN: set[str] = {"filename", "lineno", "msg", "args", "levelname", "levelno"}
_LOG_KWARGS_STANDARD: set[str] = {"exc_info", "stack_info", "stacklevel", "extra"}
_LOG_ROOT_ATTR_NAME = "_mstair_stringify_corelogger_initialized"

# Frames between the caller and Logger.log(): _emit() and the public method.
_INTERNAL_FRAME_OFFSET = 2

_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("log_prefix", default="")


class CoreLogger(logging.Logger):
    """
    logging.Logger with a TRACE level, a `dump()` method, scoped message
    prefixes and stringify() rendering of non-primitive arguments.
    """

    def __init__(self, name: str, level: int | str = logging.NOTSET) -> None:
        initialize_logger_constants()
        if level in {logging.NOTSET, "NOTSET", ""}:
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

        root_level = logging.getLogger().getEffectiveLevel()
        if self.level < root_level:
            self.setLevel(root_level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{self.__class__.__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def _emit(self, level: int, msg: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        initialize_root()
        if not self.isEnabledFor(level):
            return

        _move_kwargs_to_extra(kwargs)
        stacklevel: int = kwargs.pop("stacklevel", 1) + _INTERNAL_FRAME_OFFSET
        msg, *rest = _normalize_unsupported_args((msg, *args), kwargs.get("extra") or {})

        prefix = _log_prefix.get()
        if prefix:
            msg = f"{prefix}{msg}"

        super().log(level, msg, *rest, stacklevel=stacklevel, **kwargs)

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._emit(level, msg, args, kwargs)

    def trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self._emit(TRACE, msg, args, kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._emit(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._emit(logging.INFO, msg, args, kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._emit(logging.WARNING, msg, args, kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._emit(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        """Log at CRITICAL level, with a stack trace unless told otherwise."""
        kwargs.setdefault("stack_info", True)
        self._emit(logging.CRITICAL, msg, args, kwargs)

    def exception(self, msg: Any, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        kwargs.setdefault("exc_info", True)
        self._emit(logging.ERROR, msg, args, kwargs)

    def dump(
        self,
        value: Any,
        *,
        label: str | None = None,
        level: int = logging.DEBUG,
        stacklevel: int = 1,
        **options: Any,
    ) -> None:
        """
        Log the stringify() layout of `value`.

        :param value: Anything stringify() accepts.
        :param label: Written as `label = ` before the dump.
        :param level: Log level, DEBUG by default.
        :param options: Passed to stringify(), e.g. wrap_width or max_depth.
        """
        if not self.isEnabledFor(level):
            return
        rendered = stringify(value, **options)
        msg = "%s = %s" if label else "%s%s"
        self._emit(level, msg, (label or "", rendered), {"stacklevel": stacklevel})

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Prefix every message logged in this context with `prefix > `.

        Nested prefixes accumulate. State lives in a contextvar, so threads and
        tasks do not see each other's prefixes.
        """
        formatted = f"{prefix} > "
        current = _log_prefix.get()
        token = _log_prefix.set(current + formatted)
        try:
            yield
        finally:
            _log_prefix.reset(token)


def initialize_root(
    fmt: str | None = None,
    datefmt: str | None = None,
    level: int | str | None = None,
    force: bool = False,
) -> None:
    """
    Idempotently give the root logger one stderr handler using CoreFormatter.

    State is tracked as an attribute on the root logger. Handlers that do not
    write to stderr belong to the host application and are left alone.

    :param fmt: Format string; defaults to LOG_FORMAT or the CoreFormatter default.
    :param datefmt: Date format; defaults to LOG_DATEFMT. Without `%` directives
        the timestamp is removed from the format.
    :param level: Root level (int or name). If None and root is NOTSET, WARNING is used.
    :param force: Re-create the stderr handler even if already initialized.
    """
    root = logging.getLogger()
    if getattr(root, _LOG_ROOT_ATTR_NAME, False) and not force:
        return
    setattr(root, _LOG_ROOT_ATTR_NAME, True)
    initialize_logger_constants()

    fmt = fmt or os.environ.get("LOG_FORMAT") or None
    datefmt = os.environ.get("LOG_DATEFMT") if datefmt is None else datefmt
    if datefmt is not None and "%" not in datefmt:
        fmt = re.sub(r"\s*%\(asctime\)s\s*", " ", fmt or DEFAULT_FORMAT)
        datefmt = None

    stderr_handlers: list[logging.StreamHandler[TextIO]] = [
        h for h in root.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]
    if force:
        root.handlers = [h for h in root.handlers if h not in stderr_handlers]
        stderr_handlers = []

    if not stderr_handlers:
        handler: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
        handler.setFormatter(CoreFormatter(fmt, datefmt))
        root.addHandler(handler)
    elif not any(isinstance(h.formatter, CoreFormatter) for h in stderr_handlers):
        stderr_handlers[0].setFormatter(CoreFormatter(fmt, datefmt))

    if level is not None:
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
        root.setLevel(level)
    elif root.level == logging.NOTSET:
        root.setLevel(logging.WARNING)


def _move_kwargs_to_extra(kwargs: dict[str, Any]) -> None:
    """
    Move non-standard keyword arguments into `extra`.

    :raises ValueError: If a keyword would overwrite a LogRecord attribute.
    """
    for key in list(kwargs):
        if key in _LOG_KWARGS_FORBIDDEN:
            raise ValueError(f"Invalid keyword argument {key!r} for a log call")
        if key not in _LOG_KWARGS_STANDARD:
            kwargs.setdefault("extra", {})[key] = kwargs.pop(key)


def _normalize_unsupported_args(args: tuple[Any, ...], extra: Mapping[str, Any]) -> tuple[Any, ...]:
    """
    Replace non-primitive arguments with their stringify() layout.

    `wrap_width`, `indent_increment` and `max_depth` in `extra` are passed on.
    """
    options = {k: extra[k] for k in ("wrap_width", "indent_increment", "max_depth") if k in extra}
    normalized: list[Any] = []
    for arg in args:
        if isinstance(arg, PRIMITIVE_TYPES):
            normalized.append(arg)
            continue
        try:
            normalized.append(stringify(arg, **options))
        except Exception as e:
            normalized.append(f"<unserializable: {type(arg).__name__}: {e}>")
    return tuple(normalized)


# End of file: src/mstair/stringify/xlogging/core_logger.py

# File: src/mstair/stringify/config.py
"""
Option defaults and environment overrides for stringify().

Precedence (first match wins):
1. The keyword argument passed to stringify().
2. STRINGIFY_WRAP_WIDTH / STRINGIFY_INDENT from the environment (a .env file
   is loaded once, without overriding variables that are already set).
3. DEFAULT_WRAP_WIDTH / DEFAULT_INDENT.

Unset arguments arrive as the CALCULATE sentinel.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from functools import cache
from typing import Any, Final

from mstair.stringify.base import fs_helpers
from mstair.stringify.base.types import CALCULATE, Calculate


__all__ = [
    "DEFAULT_INDENT",
    "DEFAULT_WRAP_WIDTH",
    "K_STRINGIFY_INDENT",
    "K_STRINGIFY_WRAP_WIDTH",
    "StringifyOptions",
    "resolve_options",
]

DEFAULT_WRAP_WIDTH: Final[int] = 120
DEFAULT_INDENT: Final[int] = 2

K_STRINGIFY_WRAP_WIDTH: Final[str] = "STRINGIFY_WRAP_WIDTH"
K_STRINGIFY_INDENT: Final[str] = "STRINGIFY_INDENT"

_UNLIMITED_WORDS: Final[frozenset[str]] = frozenset({"inf", "infinity", "none", "unlimited"})

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class StringifyOptions:
    """Fully resolved layout options for one stringify() call."""

    wrap_width: float
    """Preferred maximum line length, or math.inf."""

    indent_increment: str
    """Text added per block level."""

    base_indent: str
    """Indentation of the root level (the first line is positioned by the caller)."""

    max_depth: int
    """Composite nesting shown before values are replaced by `...`; -1 means unlimited."""


@cache
def _load_dotenv_once() -> bool:
    return fs_helpers.fs_load_dotenv()


def _wrap_width_from_environment() -> float | None:
    raw = os.environ.get(K_STRINGIFY_WRAP_WIDTH, "").strip().strip("\"'")
    if not raw:
        return None
    if raw.lower() in _UNLIMITED_WORDS:
        return math.inf
    if raw.isdigit():
        return int(raw)
    LOG.warning("Ignoring %s=%r: expected a non-negative integer or 'inf'", K_STRINGIFY_WRAP_WIDTH, raw)
    return None


def _indent_from_environment() -> str | None:
    raw = os.environ.get(K_STRINGIFY_INDENT, "").strip().strip("\"'")
    if not raw:
        return None
    if raw.lower() == "tab":
        return "\t"
    if raw.isdigit():
        return " " * int(raw)
    LOG.warning("Ignoring %s=%r: expected a number of spaces or 'tab'", K_STRINGIFY_INDENT, raw)
    return None


def _as_indent(name: str, value: Any) -> str:
    """Normalize an int (count of spaces) or str indent option."""
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an int or str, got bool")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")
        return " " * value
    if isinstance(value, str):
        return value
    raise TypeError(f"{name} must be an int or str, got {type(value).__name__}")


def _as_wrap_width(value: Any) -> float:
    if value is None:
        return math.inf
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"wrap_width must be a number, got {type(value).__name__}")
    if math.isnan(value) or value < 0:
        raise ValueError(f"wrap_width must be >= 0, got {value}")
    return value


def resolve_options(
    *,
    wrap_width: float | Calculate | None = CALCULATE,
    indent_increment: int | str | Calculate = CALCULATE,
    base_indent: int | str = "",
    max_depth: int = -1,
) -> StringifyOptions:
    """
    Apply defaults and environment overrides, then validate.

    :param wrap_width: Line width; 0 wraps everything, None or math.inf never wraps for width.
    :param indent_increment: Spaces (int) or text (str) added per level.
    :param base_indent: Spaces (int) or text (str) for the root level.
    :param max_depth: Composite nesting limit, -1 to disable.
    :raises ValueError: On negative widths or indents.
    :raises TypeError: On options of the wrong type.
    :return StringifyOptions: The resolved options.
    """
    if isinstance(wrap_width, Calculate) or isinstance(indent_increment, Calculate):
        _load_dotenv_once()

    if isinstance(wrap_width, Calculate):
        env_width = _wrap_width_from_environment()
        _wrap_width: float = DEFAULT_WRAP_WIDTH if env_width is None else env_width
    else:
        _wrap_width = _as_wrap_width(wrap_width)

    if isinstance(indent_increment, Calculate):
        env_indent = _indent_from_environment()
        _indent_increment = " " * DEFAULT_INDENT if env_indent is None else env_indent
    else:
        _indent_increment = _as_indent("indent_increment", indent_increment)

    if isinstance(max_depth, bool) or not isinstance(max_depth, int):
        raise TypeError(f"max_depth must be an int, got {type(max_depth).__name__}")

    return StringifyOptions(
        wrap_width=_wrap_width,
        indent_increment=_indent_increment,
        base_indent=_as_indent("base_indent", base_indent),
        max_depth=max_depth,
    )


# End of file: src/mstair/stringify/config.py

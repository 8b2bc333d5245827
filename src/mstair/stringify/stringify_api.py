# File: src/mstair/stringify/stringify_api.py
"""
Entry point: lay out any value as a diagnostic dump.

`stringify()` resolves values that are not nodes through a formatter, guards
against reference cycles and renders the resulting tree in one bottom-up pass.

Example:
    >>> stringify({"a": [1, 2], "b": None})
    '{ a: [1, 2], b: null }'
    >>> print(stringify({"a": [1, 2], "b": None}, wrap_width=0))
    {
      a: [
        1,
        2
      ],
      b: null
    }
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final

from mstair.stringify.base.types import ATOMIC_TYPES, CALCULATE, Calculate
from mstair.stringify.config import resolve_options
from mstair.stringify.formatter import default_formatter
from mstair.stringify.nodes import (
    RenderContext,
    RenderResult,
    Stringifiable,
    is_stringifiable,
    text,
)


__all__ = [
    "CIRCULAR",
    "TRUNCATED",
    "stringify",
]

LOG = logging.getLogger(__name__)

CIRCULAR: Final = text("<circular>")
"""Rendered in place of a value that is already being rendered further up the path."""

TRUNCATED: Final = text("...")
"""Rendered in place of a composite value nested deeper than `max_depth`."""


def _resolve(formatter: Callable[[Any], Stringifiable], value: Any) -> Stringifiable:
    """Return `value` itself if it is a node, else the formatter's node for it."""
    if is_stringifiable(value):
        return value
    node = formatter(value)
    if not is_stringifiable(node):
        raise TypeError(
            f"Formatter {getattr(formatter, '__qualname__', type(formatter).__name__)} returned "
            f"{type(node).__name__} for a {type(value).__name__} value; expected a node"
        )
    return node


def stringify(
    value: Any,
    *,
    wrap_width: float | Calculate | None = CALCULATE,
    indent_increment: int | str | Calculate = CALCULATE,
    base_indent: int | str = "",
    formatter: Callable[[Any], Stringifiable] | None = None,
    max_depth: int = -1,
) -> str:
    """
    Render `value` as a human-readable, width-aware dump.

    :param value: Any value or node.
    :param wrap_width: Preferred maximum line length. 0 wraps every block; None or
        math.inf only wraps where content already spans several lines. Defaults to
        STRINGIFY_WRAP_WIDTH or 120.
    :param indent_increment: Spaces (int) or text (str) per nesting level. Defaults to
        STRINGIFY_INDENT or two spaces.
    :param base_indent: Indentation of the root level, used after every line break
        at the outermost level. The first line is never indented.
    :param formatter: Maps values that are not nodes to nodes; `default_formatter`
        when None.
    :param max_depth: Composite values below this many composite ancestors render
        as `...`; -1 disables the limit.
    :raises TypeError: If the formatter returns something that is not a node, or an
        option has the wrong type.
    :raises ValueError: On invalid option values or malformed nodes.
    :return str: The rendered text.
    """
    options = resolve_options(
        wrap_width=wrap_width,
        indent_increment=indent_increment,
        base_indent=base_indent,
        max_depth=max_depth,
    )
    _formatter = default_formatter if formatter is None else formatter

    # Both live for this call only; every entry is removed on the way back up.
    ancestry: set[int] = set()
    value_depth = 0

    def render(value: Any, context: RenderContext) -> RenderResult:
        nonlocal value_depth
        if isinstance(value, ATOMIC_TYPES):
            return _resolve(_formatter, value).__stringify__(context)

        key = id(value)
        if key in ancestry:
            LOG.debug("Circular reference to %s at indent %r", type(value).__name__, context.indent)
            return CIRCULAR.__stringify__(context)

        is_node = is_stringifiable(value)
        if not is_node and 0 <= options.max_depth < value_depth:
            LOG.debug("Depth limit %d reached at %s", options.max_depth, type(value).__name__)
            return TRUNCATED.__stringify__(context)

        ancestry.add(key)
        if not is_node:
            value_depth += 1
        try:
            return _resolve(_formatter, value).__stringify__(context)
        finally:
            ancestry.discard(key)
            if not is_node:
                value_depth -= 1

    root_context = RenderContext(
        wrap_width=options.wrap_width,
        indent=options.base_indent,
        indent_increment=options.indent_increment,
        render=render,
    )
    return render(value, root_context).content


# End of file: src/mstair/stringify/stringify_api.py

# File: src/mstair/stringify/nodes.py
"""
Layout nodes for diagnostic dumps.

A node knows how to lay itself out for a given RenderContext and reports
whether the result spans several lines. Four primitives cover the common
shapes:

- `text()`: preformatted content, re-indented if it spans several lines.
- `block()`: a parent wrapping children; the only node that adds a level.
- `inline()`: a sequence of children with no level and no breaks of its own.
- `list_()`: siblings joined by a separator, optionally sorted by rendered text.

Rendering is a single bottom-up pass: every child decides its own layout
first, and a parent only wraps if a child already did or if its own
single-line form would not fit in `wrap_width` after `indent`.

Any object whose type defines `__stringify__(context)` is a node, so custom
syntax can be embedded anywhere a value is expected.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Any, Final, Protocol, runtime_checkable


__all__ = [
    "BlockNode",
    "InlineNode",
    "ListNode",
    "Node",
    "RenderContext",
    "RenderFunction",
    "RenderResult",
    "Stringifiable",
    "TextNode",
    "block",
    "inline",
    "is_stringifiable",
    "list_",
    "text",
]

_LINE_BREAK_RX: Final[re.Pattern[str]] = re.compile(r"\r?\n")

type RenderFunction = Callable[[Any, RenderContext], RenderResult]
"""Driver callback that resolves any value (node or not) and renders it."""


@dataclass(frozen=True, slots=True)
class RenderResult:
    """The outcome of laying out one node."""

    is_multiline: bool
    """True if `content` spans more than one line."""

    content: str
    """Rendered text, without the caller's indentation before the first character."""

    def __post_init__(self) -> None:
        if not self.is_multiline and "\n" in self.content:
            raise ValueError(f"Single-line render result contains a line break: {self.content!r}")


_ELLIPSIS_RESULT: Final[RenderResult] = RenderResult(False, "...")
"""Stands in for the entries a limited list does not show."""


@dataclass(frozen=True, slots=True, kw_only=True)
class RenderContext:
    """Layout parameters handed down the node tree."""

    wrap_width: float
    """Preferred maximum line length; `math.inf` disables width-driven wrapping."""

    indent: str = ""
    """Prefix placed after every line break emitted at this level."""

    indent_increment: str = "  "
    """Appended to `indent` each time a block descends one level."""

    render: RenderFunction
    """Resolves and renders a child value through the driver (cycle checks, formatter)."""

    def nested(self) -> RenderContext:
        """Return the context for the children of a block."""
        return replace(self, indent=self.indent + self.indent_increment)

    def render_child(self, value: Any, context: RenderContext | None = None) -> RenderResult:
        """Render `value` through the driver, by default at this context's level."""
        return self.render(value, context or self)


@runtime_checkable
class Stringifiable(Protocol):
    """The node capability: anything that can lay itself out."""

    def __stringify__(self, context: RenderContext) -> RenderResult: ...


def is_stringifiable(value: Any) -> bool:
    """Return True if `value` is a node instance (classes defining the hook are not)."""
    return not isinstance(value, type) and callable(getattr(type(value), "__stringify__", None))


class Node(ABC):
    """Base class for the built-in nodes. Instances are immutable and reentrant."""

    __slots__ = ()

    @abstractmethod
    def __stringify__(self, context: RenderContext) -> RenderResult: ...

    def to_string(self, **options: Any) -> str:
        """Render this node on its own; see `stringify()` for the options."""
        from mstair.stringify.stringify_api import stringify  # noqa: PLC0415

        return stringify(self, **options)

    def __str__(self) -> str:
        return self.to_string()


def _interpolate(fragments: Sequence[str], values: Sequence[str]) -> str:
    """Interleave fragments and values: f0 v0 f1 v1 ... fN."""
    chunks: list[str] = [fragments[0]]
    for value, fragment in zip(values, fragments[1:], strict=True):
        chunks.append(value)
        chunks.append(fragment)
    return "".join(chunks)


def _normalize_template(
    kind: str, fragments: str | Sequence[str] | Any, children: tuple[Any, ...]
) -> tuple[tuple[str, ...], tuple[Any, ...]]:
    """
    Accept the three template shapes and check the fragment/child arity.

    - a plain string: one fragment, no children
    - a sequence of fragments followed by the children
    - a template object exposing `strings` and `values` (PEP 750 t-strings)
    """
    if isinstance(fragments, str):
        _fragments: tuple[str, ...] = (fragments,)
    elif hasattr(fragments, "strings") and hasattr(fragments, "values") and not children:
        _fragments = tuple(fragments.strings)
        children = tuple(fragments.values)
    else:
        _fragments = tuple(fragments)
    if not all(isinstance(f, str) for f in _fragments):
        raise TypeError(f"{kind}() fragments must be strings, got {_fragments!r}")
    if len(_fragments) != len(children) + 1:
        raise ValueError(
            f"{kind}() expects exactly one more fragment than children "
            f"(got {len(_fragments)} fragments, {len(children)} children)"
        )
    return _fragments, children


class _TemplateNode(Node):
    """Shared shape of text, block and inline: fragments interleaved with children."""

    __slots__ = ("fragments", "children")

    fragments: tuple[str, ...]
    children: tuple[Any, ...]

    def __init__(self, fragments: str | Sequence[str] | Any, *children: Any) -> None:
        kind = type(self).__name__.removesuffix("Node").lower()
        self.fragments, self.children = _normalize_template(kind, fragments, children)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fragments={self.fragments!r}, children={len(self.children)})"

    def _fits(self, context: RenderContext, rendered: Sequence[RenderResult]) -> bool:
        """Single-line test shared by block and inline."""
        if any(r.is_multiline for r in rendered):
            return False
        if any("\n" in f for f in self.fragments):
            return False
        length = sum(map(len, self.fragments)) + sum(len(r.content) for r in rendered)
        return len(context.indent) + length <= context.wrap_width


class TextNode(_TemplateNode):
    """Preformatted content. Children are converted with str() before layout."""

    __slots__ = ()

    def __stringify__(self, context: RenderContext) -> RenderResult:
        content = _interpolate(self.fragments, [str(c) for c in self.children])
        lines = _LINE_BREAK_RX.split(content)
        if len(lines) == 1:
            return RenderResult(False, content)

        # The first line is positioned by the caller; only the rest are re-indented.
        first_line, *rest_lines = lines
        non_blank = [line for line in rest_lines if line.strip()]
        min_indent = min((len(line) - len(line.lstrip(" ")) for line in non_blank), default=0)
        common = " " * min_indent
        reindented = [
            context.indent + line[min_indent:] if line.startswith(common) else line
            for line in rest_lines
        ]
        return RenderResult(True, "\n".join([first_line, *reindented]))


class BlockNode(_TemplateNode):
    """
    A parent/child relationship such as delimiters around contents.

    Children render one level deeper. When the block wraps, each child moves to
    its own line at the child indent and each non-empty fragment after the first
    starts a line at the block's indent.
    """

    __slots__ = ()

    def __stringify__(self, context: RenderContext) -> RenderResult:
        child_context = context.nested()
        rendered = [context.render(child, child_context) for child in self.children]

        if self._fits(context, rendered):
            return RenderResult(False, _interpolate(self.fragments, [r.content for r in rendered]))

        # Every child gets its own line, even an empty one: `[` + `\n  ` + `\n]`.
        chunks: list[str] = []
        for i, fragment in enumerate(self.fragments):
            fragment = fragment.strip()
            if i == 0:
                chunks.append(fragment)
            elif fragment:
                chunks.append(f"\n{context.indent}{fragment}")
            if i < len(rendered):
                chunks.append(f"\n{child_context.indent}{rendered[i].content.strip()}")
        return RenderResult(True, "".join(chunks))


class InlineNode(_TemplateNode):
    """
    Children in sequence with no level change and no break points of its own.

    The multiline flag only tells ancestors that this run already contains breaks.
    """

    __slots__ = ()

    def __stringify__(self, context: RenderContext) -> RenderResult:
        rendered = [context.render(child, context) for child in self.children]
        content = _interpolate(self.fragments, [r.content for r in rendered])
        return RenderResult(not self._fits(context, rendered), content)


class ListNode(Node):
    """Sibling values joined by `separator`, at the list's own level."""

    __slots__ = ("separator", "items", "sort", "limit")

    separator: str
    items: tuple[Any, ...]
    sort: bool
    limit: int

    def __init__(
        self, separator: str, items: Iterable[Any], *, sort: bool = False, limit: int = -1
    ) -> None:
        if not isinstance(separator, str):
            raise TypeError(f"list_() separator must be a string, got {type(separator).__name__}")
        self.separator = separator
        self.items = tuple(items)
        self.sort = sort
        self.limit = limit

    def __repr__(self) -> str:
        return (
            f"ListNode(separator={self.separator!r}, items={len(self.items)}, "
            f"sort={self.sort}, limit={self.limit})"
        )

    def __stringify__(self, context: RenderContext) -> RenderResult:
        rendered = [context.render(item, context) for item in self.items]
        if self.sort:
            # Unordered sources get a canonical order from their final text.
            rendered.sort(key=lambda r: r.content)
        if 0 <= self.limit < len(rendered):
            # Cut after sorting so the shown entries do not depend on iteration order.
            rendered = [*rendered[: self.limit], _ELLIPSIS_RESULT]

        length = sum(len(r.content) for r in rendered)
        length += len(self.separator) * max(len(rendered) - 1, 0)
        is_multiline = (
            any(r.is_multiline for r in rendered)
            or "\n" in self.separator
            or len(context.indent) + length > context.wrap_width
        )
        joiner = f"{self.separator.rstrip()}\n{context.indent}" if is_multiline else self.separator
        return RenderResult(is_multiline, joiner.join(r.content for r in rendered))


def text(fragments: str | Sequence[str] | Any, *children: Any) -> TextNode:
    """Build a text node, e.g. `text(("Hello ", "!"), name)`."""
    return TextNode(fragments, *children)


def block(fragments: str | Sequence[str] | Any, *children: Any) -> BlockNode:
    """Build a block node, e.g. `block(("{ ", " }"), contents)`."""
    return BlockNode(fragments, *children)


def inline(fragments: str | Sequence[str] | Any, *children: Any) -> InlineNode:
    """Build an inline node, e.g. `inline(("", ": ", ""), key, value)`."""
    return InlineNode(fragments, *children)


def list_(separator: str, items: Iterable[Any], *, sort: bool = False, limit: int = -1) -> ListNode:
    """
    Build a list node joining `items` with `separator`.

    With `limit >= 0`, only the first `limit` entries (after sorting) are shown,
    followed by `...`.
    """
    return ListNode(separator, items, sort=sort, limit=limit)


# End of file: src/mstair/stringify/nodes.py

# File: src/mstair/stringify/formatter.py
"""
Default mapping from Python values to layout nodes.

Values are sorted into a closed set of kinds by `classify()`, once per value,
and each kind has exactly one node shape:

- scalars become `text()` nodes (strings quoted and escaped)
- sequences become `[a, b]` blocks, tuples `(a, b)`
- sets become `Set [a, b]` blocks sorted by rendered text
- dicts become `{ key: value }` blocks in insertion order
- other mappings become `Map { key: value }`, sorted
- dataclasses, exceptions and plain objects become `Name { attr: value }`

Customizers run first and can replace the node for any value.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence, Set
from collections import UserString, deque
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum, auto
from fractions import Fraction
from itertools import islice
from pathlib import PurePath
from typing import Any, Final

from mstair.stringify.base.types import Missing, Sentinel
from mstair.stringify.escaping import ESCAPE_SUBSTITUTES, escape_string_literal, is_identifier
from mstair.stringify.nodes import (
    ListNode,
    Stringifiable,
    block,
    inline,
    is_stringifiable,
    list_,
    text,
)


__all__ = [
    "Customizer",
    "DefaultFormatter",
    "RawString",
    "ValueKind",
    "classify",
    "default_formatter",
]

LOG = logging.getLogger(__name__)

type Customizer = Callable[[Any], Stringifiable | str | None]
"""
Consulted before the default mapping.

:param value: The value about to be formatted.
:return: A node to use as-is, a `str` rendered as raw text, or None to defer.
"""

type _AtomRendererFunction = Callable[[Any], str]


class RawString(str):
    """A string rendered as-is: no quotes and no escaping, as a value or as a key."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({super().__repr__()})"


class ValueKind(Enum):
    """Every value falls into exactly one of these kinds."""

    MISSING = auto()
    NONE = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    STRING = auto()
    BYTES = auto()
    ATOM = auto()
    TYPE = auto()
    ROUTINE = auto()
    SEQUENCE = auto()
    SET = auto()
    DICT = auto()
    MAPPING = auto()
    DATACLASS = auto()
    EXCEPTION = auto()
    OBJECT = auto()


def _atom_render_timedelta(obj: timedelta) -> str:
    """Render a timedelta object as a human-readable string."""
    seconds = int(obj.total_seconds())
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    chunks: list[str] = []
    if days:
        chunks.append(f"{days}d:")
    if hours or chunks:
        chunks.append(f"{hours}h:")
    if minutes or chunks:
        chunks.append(f"{minutes:02}m:")
    chunks.append(f"{seconds:02}s")
    return "".join(chunks)


def _atom_render_decimal(obj: Decimal) -> str:
    """Integral decimals drop their exponent; others keep their exact digits."""
    if obj.is_finite() and obj == obj.to_integral_value():
        return str(int(obj))
    return str(obj)


def _atom_render_unknown(x: Any) -> str:
    """Render an object that offers nothing but its str()."""
    t = type(x)
    try:
        return t.__name__ + "<" + str(x) + ">"
    except Exception as e:
        return f"<unrenderable {t.__name__}: {e}>"


_ATOMIC_RENDERERS: Final[dict[type, _AtomRendererFunction]] = {
    Decimal: _atom_render_decimal,
    Fraction: lambda x: f"{x.numerator}/{x.denominator}",
    timedelta: _atom_render_timedelta,
    date: lambda x: x.isoformat(),
    time: lambda x: x.isoformat(),
    Enum: lambda x: f"{type(x).__name__}.{x.name}",
    Sentinel: str,
}


def _atom_renderer(value: Any) -> _AtomRendererFunction | None:
    return next(
        (_ATOMIC_RENDERERS[_mro] for _mro in type(value).__mro__ if _mro in _ATOMIC_RENDERERS),
        None,
    )


def classify(value: Any) -> ValueKind:
    """
    Return the kind of `value`.

    Order matters: MISSING before other sentinels, enums before bool/int
    (IntEnum), bool before int, dict before other mappings.
    """
    if isinstance(value, Missing):
        return ValueKind.MISSING
    if value is None:
        return ValueKind.NONE
    if isinstance(value, (Enum, Sentinel, PurePath)):
        return ValueKind.ATOM
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, complex)):
        return ValueKind.NUMBER
    if isinstance(value, (str, UserString)):
        return ValueKind.STRING
    if isinstance(value, (bytes, bytearray)):
        return ValueKind.BYTES
    if _atom_renderer(value) is not None:
        return ValueKind.ATOM
    if isinstance(value, type):
        return ValueKind.TYPE
    if inspect.isroutine(value) or isinstance(value, functools.partial):
        return ValueKind.ROUTINE
    if isinstance(value, dict):
        return ValueKind.DICT
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (Sequence, deque)):
        return ValueKind.SEQUENCE
    if isinstance(value, Set):
        return ValueKind.SET
    if isinstance(value, BaseException):
        return ValueKind.EXCEPTION
    if dataclasses.is_dataclass(value):
        return ValueKind.DATACLASS
    return ValueKind.OBJECT


def _routine_name(value: Any) -> str:
    if isinstance(value, functools.partial):
        value = value.func
    return getattr(value, "__qualname__", None) or getattr(value, "__name__", None) or "?"


def _object_attributes(value: Any) -> list[tuple[str, Any]]:
    """Instance attributes from __dict__ and __slots__, in definition order."""
    pairs: list[tuple[str, Any]] = []
    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, dict):
        pairs.extend(instance_dict.items())
    seen = {name for name, _ in pairs}
    for klass in reversed(type(value).__mro__):
        slots = klass.__dict__.get("__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            if name in seen or name in ("__dict__", "__weakref__") or not hasattr(value, name):
                continue
            seen.add(name)
            pairs.append((name, getattr(value, name)))
    return pairs


ELLIPSIS: Final = text("...")
"""Stands in for the entries hidden by `max_width`."""


@dataclass(frozen=True, kw_only=True)
class DefaultFormatter:
    """
    Turns values that are not nodes into nodes.

    Instances are immutable and can be shared between threads and calls.
    """

    literals: tuple[str, str, str] = ("null", "true", "false")
    """Spellings of None, True and False."""

    escapes: Mapping[str, str] = field(default_factory=lambda: ESCAPE_SUBSTITUTES)
    """Single-character substitutions used inside quoted strings."""

    max_width: int = -1
    """Entries shown per container before `...`; -1 shows everything."""

    customizers: tuple[Customizer, ...] = ()
    """Consulted in order before the default mapping."""

    def __call__(self, value: Any) -> Stringifiable:
        customized = self._customize(value)
        if customized is not None:
            return customized
        return self.format_value(value)

    def quote(self, s: str) -> str:
        """Quote and escape a string with this formatter's table."""
        return escape_string_literal(s, self.escapes)

    def format_value(self, value: Any) -> Stringifiable:
        """Apply the default mapping, ignoring customizers."""
        kind = classify(value)
        match kind:
            case ValueKind.MISSING:
                return text("undefined")
            case ValueKind.NONE:
                return text(self.literals[0])
            case ValueKind.BOOLEAN:
                return text(self.literals[1] if value else self.literals[2])
            case ValueKind.NUMBER:
                return text(str(value))
            case ValueKind.STRING:
                return text(str(value) if isinstance(value, RawString) else self.quote(str(value)))
            case ValueKind.BYTES:
                return text(repr(bytes(value)))
            case ValueKind.ATOM:
                return text(self._atom_text(value))
            case ValueKind.TYPE:
                return text(f"<type:{value.__name__}>")
            case ValueKind.ROUTINE:
                return text(f"<function {_routine_name(value)}>")
            case ValueKind.SEQUENCE:
                open_, close = ("(", ")") if isinstance(value, tuple) else ("[", "]")
                return block((open_, close), self._list_node(value))
            case ValueKind.SET:
                return block(("Set [", "]"), self._list_node(value, sort=True))
            case ValueKind.DICT:
                return self._object_like(value.items())
            case ValueKind.MAPPING:
                return inline(("Map ", ""), self._object_like(value.items(), sort=True))
            case ValueKind.DATACLASS:
                return self._named(value, self._dataclass_fields(value))
            case ValueKind.EXCEPTION:
                return self._named(value, [("message", str(value)), ("args", value.args)])
            case ValueKind.OBJECT:
                attributes = _object_attributes(value)
                if not attributes:
                    return text(_atom_render_unknown(value))
                return self._named(value, attributes)
            case _:
                raise AssertionError(f"Unhandled value kind {kind} for {type(value).__name__}")

    def render_key(self, key: Any) -> str:
        """Spell a mapping key: bare identifiers, quoted strings, bracketed everything else."""
        match classify(key):
            case ValueKind.STRING:
                if isinstance(key, RawString) or is_identifier(str(key)):
                    return str(key)
                return self.quote(str(key))
            case ValueKind.NONE:
                return self.literals[0]
            case ValueKind.BOOLEAN:
                return f"[{self.literals[1] if key else self.literals[2]}]"
            case ValueKind.NUMBER:
                return f"[{key}]"
            case ValueKind.MISSING:
                return "[undefined]"
            case ValueKind.ATOM:
                return f"[{self._atom_text(key)}]"
            case ValueKind.BYTES:
                return f"[{bytes(key)!r}]"
            case ValueKind.ROUTINE | ValueKind.TYPE:
                return "[<function>]"
            case _:
                return "[<object>]"

    def _atom_text(self, value: Any) -> str:
        if isinstance(value, PurePath):
            return self.quote(value.as_posix())
        renderer = _atom_renderer(value)
        return renderer(value) if renderer is not None else _atom_render_unknown(value)

    def _customize(self, value: Any) -> Stringifiable | None:
        for customizer in self.customizers:
            try:
                result = customizer(value)
            except Exception:
                LOG.exception(
                    "Customizer %s raised for a %s value; skipping it",
                    getattr(customizer, "__qualname__", customizer),
                    type(value).__name__,
                )
                continue
            if result is None:
                continue
            if isinstance(result, str):
                return text(result)
            if is_stringifiable(result):
                return result
            raise TypeError(
                f"Customizer {getattr(customizer, '__qualname__', customizer)!s} returned "
                f"{type(result).__name__}; expected a node, str or None"
            )
        return None

    def _list_node(self, items: Iterable[Any], *, sort: bool = False) -> ListNode:
        """Join items with ', ', truncating after `max_width` entries."""
        if self.max_width < 0:
            return list_(", ", items, sort=sort)
        if sort:
            # Every entry is rendered and sorted before the cut.
            return list_(", ", items, sort=True, limit=self.max_width)
        shown = list(islice(items, self.max_width + 1))
        if len(shown) <= self.max_width:
            return list_(", ", shown)
        return list_(", ", [*shown[: self.max_width], ELLIPSIS])

    def _object_like(self, pairs: Iterable[tuple[Any, Any]], *, sort: bool = False) -> Stringifiable:
        """`{ key: value, ... }` with one inline entry per pair."""
        entries = (inline(("", ": ", ""), text(self.render_key(k)), v) for k, v in pairs)
        return block(("{ ", " }"), self._list_node(entries, sort=sort))

    def _named(self, value: Any, pairs: Iterable[tuple[Any, Any]]) -> Stringifiable:
        """`TypeName { attr: value, ... }`"""
        return inline((f"{type(value).__name__} ", ""), self._object_like(pairs))

    @staticmethod
    def _dataclass_fields(value: Any) -> list[tuple[str, Any]]:
        """Fields with repr=True; fields not yet initialized are skipped."""
        pairs: list[tuple[str, Any]] = []
        for orig_field in dataclasses.fields(value):
            if not orig_field.repr:
                continue
            if not hasattr(value, orig_field.name):
                LOG.warning(
                    "Skipping uninitialized field %s.%s", type(value).__name__, orig_field.name
                )
                continue
            pairs.append((orig_field.name, getattr(value, orig_field.name)))
        return pairs


default_formatter: Final[DefaultFormatter] = DefaultFormatter()
"""The formatter stringify() uses when none is given."""


# End of file: src/mstair/stringify/formatter.py

# File: src/mstair/stringify/escaping.py
"""
String-literal escaping and mapping-key spelling.

Strings are dumped single-quoted with control characters, backslash and the
quote itself escaped. The substitution table is data, not code: callers that
need a different treatment of a character pass their own table.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import cache
from types import MappingProxyType
from typing import Final


__all__ = [
    "ESCAPE_SUBSTITUTES",
    "escape_string_literal",
    "is_identifier",
]

ESCAPE_SUBSTITUTES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "\0": "\\0",
        "\b": "\\b",
        "\f": "\\f",
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
        "\v": "\\v",
        "\\": "\\\\",
        "'": "\\'",
    }
)
"""Default single-character substitutions applied inside single-quoted literals."""

_IDENTIFIER_RX: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@cache
def _translation_table(substitutes: tuple[tuple[str, str], ...]) -> dict[int, str]:
    for char, _ in substitutes:
        if len(char) != 1:
            raise ValueError(f"Escape table keys must be single characters, got {char!r}")
    return {ord(char): replacement for char, replacement in substitutes}


def escape_string_literal(s: str, substitutes: Mapping[str, str] = ESCAPE_SUBSTITUTES) -> str:
    """
    Return `s` as a single-quoted literal with `substitutes` applied.

    :param s: The raw string.
    :param substitutes: Single character -> replacement text.
    :return str: The quoted, escaped literal.
    """
    table = _translation_table(tuple(substitutes.items()))
    return "'" + s.translate(table) + "'"


def is_identifier(name: str) -> bool:
    """Return True if `name` can be shown as a bare (unquoted) key."""
    return _IDENTIFIER_RX.fullmatch(name) is not None


# End of file: src/mstair/stringify/escaping.py

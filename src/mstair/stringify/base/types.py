# File: src/mstair/stringify/base/types.py
"""
Sentinels and type tuples shared by the layout engine and its formatter.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Final, Self


__all__ = [
    "ATOMIC_TYPES",
    "CALCULATE",
    "Calculate",
    "MISSING",
    "Missing",
    "PRIMITIVE_TYPES",
    "Sentinel",
]


class Sentinel:
    """
    Singleton base class for marker objects such as MISSING and CALCULATE.

    A sentinel is falsy, compares equal only to itself and survives copy/pickle
    as the same instance.
    """

    __slots__ = ()

    _repr_name: str = "SENTINEL"

    def __new__(cls) -> Self:
        if "_instance" not in cls.__dict__:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return self._repr_name

    def __str__(self) -> str:
        return self._repr_name

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __reduce__(self) -> tuple[type, tuple[()]]:
        return (type(self), ())

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, _memo: dict[int, object]) -> Self:
        return self


class Missing(Sentinel):
    """A value that was never set. Dumps render it as `undefined`."""

    _repr_name = "MISSING"


MISSING: Final[Missing] = Missing()


class Calculate(Sentinel):
    """An option left for the library to work out (environment or built-in default)."""

    _repr_name = "CALCULATE"


CALCULATE: Final[Calculate] = Calculate()


PRIMITIVE_TYPES: Final[tuple[type, ...]] = (
    int,
    float,
    complex,
    bool,
    str,
    bytes,
    Decimal,
    Fraction,
    type(None),
)
"""Values a logger can hand to %-formatting without serializing them first."""

ATOMIC_TYPES: Final[tuple[type, ...]] = (*PRIMITIVE_TYPES, bytearray, Enum, Sentinel)
"""Values that can never contain a reference back to an ancestor."""


# End of file: src/mstair/stringify/base/types.py

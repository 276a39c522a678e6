"""Declared types for the semantic interpreter.

A declaration names one of the scalar kinds and may add a fixed array
length, e.g. `integer[3]`. Types are only checked when a value is produced
or converted, never ahead of execution.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Optional

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1


class SemanticType(enum.Enum):
    INTEGER = 'integer'
    REAL = 'real'
    BOOLEAN = 'boolean'
    STRING = 'string'


@dataclass(frozen=True)
class TypeSpec:
    """Represents a declared type.

    `kind` is the scalar kind. When `length` is set the declaration is a
    fixed-size array of that many `kind` elements.
    """
    kind: SemanticType
    length: Optional[int] = None

    def __repr__(self) -> str:
        if self.length is None:
            return self.kind.value
        return f"{self.kind.value}[{self.length}]"

    @property
    def is_array(self) -> bool:
        return self.length is not None

    def element(self) -> 'TypeSpec':
        return TypeSpec(self.kind)

    # Convenience constructors
    @staticmethod
    def integer() -> 'TypeSpec':
        return TypeSpec(SemanticType.INTEGER)

    @staticmethod
    def real() -> 'TypeSpec':
        return TypeSpec(SemanticType.REAL)

    @staticmethod
    def boolean() -> 'TypeSpec':
        return TypeSpec(SemanticType.BOOLEAN)

    @staticmethod
    def string() -> 'TypeSpec':
        return TypeSpec(SemanticType.STRING)

    @staticmethod
    def array(kind: SemanticType, length: int) -> 'TypeSpec':
        return TypeSpec(kind, length)


def semantic_type_from_keyword(keyword: str) -> SemanticType:
    """Map a type keyword from a declaration to its kind.

    Anything that is not `integer`, `real` or `boolean` is text.
    """
    if keyword == 'integer':
        return SemanticType.INTEGER
    if keyword == 'real':
        return SemanticType.REAL
    if keyword == 'boolean':
        return SemanticType.BOOLEAN
    return SemanticType.STRING


def round_to_int_away_from_zero(x: float) -> int:
    """Round a floating point number to the nearest integer away from zero.

    Python's built-in round uses bankers rounding; halves here go away from
    zero.
    """
    return math.floor(x + 0.5) if x >= 0 else math.ceil(x - 0.5)


def fits_int32(n: int) -> bool:
    return INT32_MIN <= n <= INT32_MAX


def wrap_int32(n: int) -> int:
    """Wrap an arbitrary Python int into the signed 32-bit range."""
    return (n - INT32_MIN) % 2 ** 32 + INT32_MIN

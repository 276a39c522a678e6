"""Runtime values.

Every value carries its kind and exposes the six conversions
`as_integer`, `as_real`, `as_boolean`, `as_char`, `as_string` and
`as_array`. A conversion either returns the native Python representation
or raises `TypeConversionError`; nothing is coerced implicitly. The base
class fails every conversion, so each kind only spells out the ones it
supports.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import (
    IndexOutOfRangeError, InvalidConfigurationError, TypeConversionError,
)
from .types import (
    SemanticType, TypeSpec, fits_int32, round_to_int_away_from_zero, wrap_int32,
)


class Value:
    kind = 'value'

    def _fail(self, target: str, detail: str = ''):
        raise TypeConversionError(self.kind, target, detail)

    def as_integer(self) -> int:
        self._fail('integer')

    def as_real(self) -> float:
        self._fail('real')

    def as_boolean(self) -> bool:
        self._fail('boolean')

    def as_char(self) -> str:
        self._fail('char')

    def as_string(self) -> str:
        self._fail('string')

    def as_array(self) -> List[Optional['Value']]:
        self._fail('array')

    def __str__(self) -> str:
        return self.as_string()


@dataclass(eq=True)
class IntegerValue(Value):
    value: int
    kind = 'integer'

    def __post_init__(self):
        self.value = wrap_int32(int(self.value))

    def as_integer(self) -> int:
        return self.value

    def as_real(self) -> float:
        return float(self.value)

    def as_boolean(self) -> bool:
        return self.value != 0

    def as_string(self) -> str:
        return str(self.value)


@dataclass(eq=True)
class RealValue(Value):
    value: float
    kind = 'real'

    def as_integer(self) -> int:
        if math.isnan(self.value) or math.isinf(self.value):
            self._fail('integer', f'{self.value!r} has no integer value')
        rounded = round_to_int_away_from_zero(self.value)
        if not fits_int32(rounded):
            self._fail('integer', f'{self.value!r} is out of range')
        return rounded

    def as_real(self) -> float:
        return self.value

    def as_boolean(self) -> bool:
        return self.value != 0.0

    def as_string(self) -> str:
        return repr(self.value)


@dataclass(eq=True)
class BooleanValue(Value):
    value: bool
    kind = 'boolean'

    def as_integer(self) -> int:
        return 1 if self.value else 0

    def as_real(self) -> float:
        return 1.0 if self.value else 0.0

    def as_boolean(self) -> bool:
        return self.value

    def as_string(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(eq=True)
class StringValue(Value):
    """Character and string text share one kind."""
    value: str
    kind = 'string'

    def as_integer(self) -> int:
        text = self.value.strip()
        # int() would also accept "1_000"
        if not re.fullmatch(r"[+-]?[0-9]+", text):
            self._fail('integer', f'{self.value!r} is not a number')
        number = int(text)
        if not fits_int32(number):
            self._fail('integer', f'{self.value!r} is out of range')
        return number

    def as_real(self) -> float:
        text = self.value.strip()
        if '_' in text or ',' in text:
            self._fail('real', f'{self.value!r} is not a number')
        try:
            return float(text)
        except ValueError:
            self._fail('real', f'{self.value!r} is not a number')

    def as_boolean(self) -> bool:
        text = self.value.strip().lower()
        if text == 'true':
            return True
        if text == 'false':
            return False
        self._fail('boolean', f'{self.value!r} is neither true nor false')

    def as_char(self) -> str:
        if len(self.value) != 1:
            self._fail('char', f'{self.value!r} is not a single character')
        return self.value

    def as_string(self) -> str:
        return self.value


@dataclass(eq=True)
class ArrayValue(Value):
    """A fixed-length array of values.

    The length is set at construction and must be at least 1. Slots start
    unset (`None`) and are addressed by zero-based index.
    """
    length: int
    slots: List[Optional[Value]] = field(default_factory=list)
    kind = 'array'

    def __post_init__(self):
        if self.length <= 0:
            raise InvalidConfigurationError(f"array length must be at least 1, got {self.length}")
        if not self.slots:
            self.slots = [None] * self.length
        elif len(self.slots) != self.length:
            raise InvalidConfigurationError(
                f"array of length {self.length} given {len(self.slots)} values")

    @classmethod
    def of(cls, values: List[Value]) -> 'ArrayValue':
        return cls(len(values), list(values))

    def _check_index(self, index: int):
        if index < 0 or index >= self.length:
            raise IndexOutOfRangeError(index, self.length)

    def get(self, index: int) -> Optional[Value]:
        self._check_index(index)
        return self.slots[index]

    def set(self, index: int, value: Value):
        self._check_index(index)
        self.slots[index] = value

    def as_boolean(self) -> bool:
        # an array is true when it has slots
        return len(self.slots) != 0

    def as_string(self) -> str:
        return '[' + ', '.join('None' if item is None else item.as_string() for item in self.slots) + ']'

    def as_array(self) -> List[Optional[Value]]:
        return list(self.slots)


def default_value(spec: TypeSpec) -> Value:
    """Value a declaration without an initialiser starts with."""
    if spec.is_array:
        return ArrayValue(spec.length)
    kind = spec.kind
    if kind is SemanticType.INTEGER:
        return IntegerValue(0)
    if kind is SemanticType.REAL:
        return RealValue(0.0)
    if kind is SemanticType.BOOLEAN:
        return BooleanValue(False)
    return StringValue('')


def convert_value(value: Value, spec: TypeSpec) -> Value:
    """Convert a value to a declared type through the explicit conversions.

    Arrays only convert to arrays of the same length; their elements are
    converted to the element kind. Unset slots stay unset.
    """
    if spec.is_array:
        items = value.as_array()
        if len(items) != spec.length:
            raise TypeConversionError(value.kind, repr(spec), f'length {len(items)} does not match')
        element = spec.element()
        return ArrayValue.of([None if item is None else convert_value(item, element) for item in items])
    kind = spec.kind
    if kind is SemanticType.INTEGER:
        return IntegerValue(value.as_integer())
    if kind is SemanticType.REAL:
        return RealValue(value.as_real())
    if kind is SemanticType.BOOLEAN:
        return BooleanValue(value.as_boolean())
    return StringValue(value.as_string())

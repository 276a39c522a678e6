"""Symbol tables for variables, functions and classes.

Each table maps a unique name to its declaration. Looking up a missing
name raises `UndefinedNameError`; declaring a name twice raises
`DuplicateNameError`. Tables are owned by a module, a class or one scope
frame and are cleared explicitly when that owner's activation ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterator, Optional, TypeVar, TYPE_CHECKING

from .errors import DuplicateNameError, UndefinedNameError
from .types import TypeSpec

if TYPE_CHECKING:
    from .expressions import Expression
    from .operators import ClassDeclaration, Function

T = TypeVar('T')


@dataclass
class Variable:
    """A declared variable.

    The declared type is fixed; `rebind` on the owning storage only swaps
    the bound expression.
    """
    declared_type: TypeSpec
    name: str
    bound_expression: Optional['Expression'] = None

    def __repr__(self) -> str:
        return f"<variable {self.name}: {self.declared_type!r}>"


class SymbolTable(Generic[T]):
    item_kind = 'symbol'

    def __init__(self):
        self.items: Dict[str, T] = {}

    def __contains__(self, name: str) -> bool:
        return self.exists(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def exists(self, name: str) -> bool:
        return name in self.items

    def lookup(self, name: str) -> T:
        if name not in self.items:
            raise UndefinedNameError(self.item_kind, name)
        return self.items[name]

    def declare(self, name: str, item: T):
        if name in self.items:
            raise DuplicateNameError(self.item_kind, name)
        self.items[name] = item

    def clear(self):
        self.items.clear()


class VariableStorage(SymbolTable[Variable]):
    item_kind = 'variable'

    def rebind(self, name: str, expression: 'Expression'):
        self.lookup(name).bound_expression = expression


class FunctionStorage(SymbolTable['Function']):
    item_kind = 'function'


class ClassStorage(SymbolTable['ClassDeclaration']):
    item_kind = 'class'

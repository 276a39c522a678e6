from typing import Optional

from .errors import UndefinedNameError
from .storage import Variable, VariableStorage


class Scope:
    """One frame of the lexical scope stack.

    Reads walk outward through enclosing frames. Declarations always land in
    this frame, and a rebind changes the frame that owns the name.
    """
    def __init__(self, parent: Optional['Scope'] = None, name: str = '<scope>',
                 variables: Optional[VariableStorage] = None):
        self.parent = parent
        self.name = name
        self.variables = variables if variables is not None else VariableStorage()

    @property
    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth + 1

    def owner(self, name: str) -> Optional['Scope']:
        scope: Optional[Scope] = self
        while scope is not None:
            if scope.variables.exists(name):
                return scope
            scope = scope.parent
        return None

    def exists(self, name: str) -> bool:
        return self.owner(name) is not None

    def lookup(self, name: str) -> Variable:
        scope = self.owner(name)
        if scope is None:
            raise UndefinedNameError('variable', name)
        return scope.variables.lookup(name)

    def declare(self, name: str, variable: Variable):
        self.variables.declare(name, variable)

    def rebind(self, name: str, expression):
        scope = self.owner(name)
        if scope is None:
            raise UndefinedNameError('variable', name)
        scope.variables.rebind(name, expression)

    def clear(self):
        self.variables.clear()

    def __repr__(self) -> str:
        return f"<scope {self.name} depth={self.depth} names={sorted(self.variables)}>"

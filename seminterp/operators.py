"""Semantic operators: the statement-level nodes of the semantic tree.

Every operator has an arena `index` and two links into the same arena:
`child` (first nested statement) and `sibling` (next statement at the
same level). Those links are the only structure; there is no statement
list container.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .expressions import Expression
from .storage import ClassStorage, FunctionStorage, VariableStorage
from .types import TypeSpec


@dataclass(eq=False)
class SemanticOperator:
    """Base class for all operators."""
    index: Optional[int] = field(default=None, init=False)
    child: Optional[int] = field(default=None, init=False)
    sibling: Optional[int] = field(default=None, init=False)


@dataclass(eq=False)
class Module(SemanticOperator):
    """Container for one module's declarations and main block."""
    name: str = ''
    variables: VariableStorage = field(default_factory=VariableStorage, repr=False)
    functions: FunctionStorage = field(default_factory=FunctionStorage, repr=False)
    classes: ClassStorage = field(default_factory=ClassStorage, repr=False)


@dataclass(eq=False)
class Beginning(SemanticOperator):
    """Block marker opening a module's main statements."""
    pass


@dataclass(eq=False)
class ElseIf(SemanticOperator):
    guard: Optional[Expression] = None


@dataclass(eq=False)
class Else(SemanticOperator):
    pass


@dataclass(eq=False)
class If(SemanticOperator):
    """`child` holds the then-branch. Alternatives are arena indices."""
    guard: Optional[Expression] = None
    else_ifs: List[int] = field(default_factory=list)
    otherwise: Optional[int] = None


@dataclass(eq=False)
class While(SemanticOperator):
    guard: Optional[Expression] = None


@dataclass(eq=False)
class VariableDeclaration(SemanticOperator):
    declared_type: Optional[TypeSpec] = None
    name: str = ''
    expression: Optional[Expression] = None


@dataclass(eq=False)
class Let(SemanticOperator):
    """`let name := expr;` or, with `element` set, `let name[element] := expr;`."""
    name: str = ''
    expression: Optional[Expression] = None
    element: Optional[Expression] = None


@dataclass(eq=False)
class Input(SemanticOperator):
    name: str = ''


@dataclass(eq=False)
class Output(SemanticOperator):
    expression: Optional[Expression] = None


@dataclass(eq=False)
class Call(SemanticOperator):
    expression: Optional[Expression] = None


@dataclass(eq=False)
class Return(SemanticOperator):
    expression: Optional[Expression] = None


@dataclass
class Parameter:
    declared_type: TypeSpec
    name: str


@dataclass(eq=False)
class Function(SemanticOperator):
    """A function declaration. `child` is the first statement of its body.

    `variables` holds the names declared while parsing the body; it is only
    used for name resolution. Each call runs in a fresh scope frame.
    """
    name: str = ''
    parameters: List[Parameter] = field(default_factory=list)
    return_type: Optional[TypeSpec] = None
    module: str = ''
    variables: VariableStorage = field(default_factory=VariableStorage, repr=False)

    @property
    def qualified_name(self) -> str:
        return self.name


@dataclass(eq=False)
class MethodFunction(Function):
    class_name: str = ''

    @property
    def qualified_name(self) -> str:
        return f"{self.class_name}.{self.name}"


@dataclass(eq=False)
class ClassDeclaration(SemanticOperator):
    name: str = ''
    methods: FunctionStorage = field(default_factory=FunctionStorage, repr=False)

from typing import Iterator, List, Optional

from .errors import InvalidConfigurationError
from .operators import If, SemanticOperator


class SemanticTree:
    """Arena of operators linked by child/sibling indices.

    `insert_operator` is the only structural mutation: it places a new
    operator as a root, as the child of `previous`, or as the sibling that
    follows `previous`.
    """
    def __init__(self):
        self.nodes: List[SemanticOperator] = []
        self.roots: List[int] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> SemanticOperator:
        return self.nodes[index]

    def add(self, operator: SemanticOperator) -> int:
        if operator.index is None:
            operator.index = len(self.nodes)
            self.nodes.append(operator)
        return operator.index

    def insert_operator(self, previous: Optional[SemanticOperator], operator: SemanticOperator,
                        as_child: bool):
        index = self.add(operator)
        if previous is None:
            self.roots.append(index)
            return
        if as_child:
            if previous.child is not None:
                raise InvalidConfigurationError(f"{type(previous).__name__} already has a child")
            previous.child = index
        else:
            if previous.sibling is not None:
                raise InvalidConfigurationError(f"{type(previous).__name__} already has a sibling")
            previous.sibling = index

    def chain(self, index: Optional[int]) -> Iterator[SemanticOperator]:
        """Yield the operator at `index` and every sibling after it."""
        while index is not None:
            operator = self.nodes[index]
            yield operator
            index = operator.sibling

    def children(self, operator: SemanticOperator) -> Iterator[SemanticOperator]:
        return self.chain(operator.child)

    def modules(self) -> Iterator[SemanticOperator]:
        for index in self.roots:
            yield self.nodes[index]

    def outline(self) -> List[str]:
        """Indented one-line-per-operator view, used by the CLI and debug trace."""
        lines: List[str] = []

        def walk(operator: SemanticOperator, depth: int):
            lines.append('  ' * depth + describe(operator))
            for nested in self.children(operator):
                walk(nested, depth + 1)
            if isinstance(operator, If):
                for index in operator.else_ifs:
                    walk(self.nodes[index], depth)
                if operator.otherwise is not None:
                    walk(self.nodes[operator.otherwise], depth)

        for root in self.modules():
            walk(root, 0)
        return lines


def describe(operator: SemanticOperator) -> str:
    name = getattr(operator, 'name', '')
    label = type(operator).__name__
    return f"{label} {name}" if name else label

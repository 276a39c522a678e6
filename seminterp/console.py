"""Input and output collaborators used by `input` and `output` statements.

The interpreter only talks to these through `read` and `write`, so tests
and embedding programs can swap in their own.
"""

import builtins
from typing import Iterable, List

from .errors import ExecutionError
from .types import TypeSpec
from .values import Value


class ConsoleInput:
    def read(self, name: str, declared_type: TypeSpec) -> str:
        try:
            return builtins.input(f"{name} ({declared_type!r}): ")
        except EOFError as e:
            raise ExecutionError(f"input for {name} ended", cause=e) from e


class ScriptedInput:
    """Hands out prepared answers in order."""
    def __init__(self, answers: Iterable[str]):
        self.answers: List[str] = list(answers)

    def read(self, name: str, declared_type: TypeSpec) -> str:
        if not self.answers:
            raise ExecutionError(f"no answer left for {name}")
        return self.answers.pop(0)


class ConsoleOutput:
    def write(self, value: Value):
        print(value.as_string())


class BufferedOutput:
    def __init__(self):
        self.values: List[Value] = []

    def write(self, value: Value):
        self.values.append(value)

    @property
    def lines(self) -> List[str]:
        return [value.as_string() for value in self.values]

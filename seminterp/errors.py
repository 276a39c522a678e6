from typing import Any, Optional


class SeminterpError(Exception):
    """Base class for every error raised while parsing or executing a program."""


class ParseError(SeminterpError):
    """Unexpected or missing token while building the semantic tree."""
    def __init__(self, message: str, expected: Optional[str] = None, found: Optional[str] = None):
        if expected is not None:
            message = f"{message}: expected {expected}, found {found!r}"
        super().__init__(message)
        self.expected = expected
        self.found = found


class UndefinedNameError(SeminterpError):
    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} {name!r} is not declared")
        self.kind = kind
        self.name = name


class DuplicateNameError(SeminterpError):
    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} {name!r} is already declared")
        self.kind = kind
        self.name = name


class TypeConversionError(SeminterpError):
    def __init__(self, source: str, target: str, detail: str = ''):
        message = f"cannot convert {source} to {target}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.source = source
        self.target = target


class InvalidConfigurationError(SeminterpError):
    pass


class IndexOutOfRangeError(SeminterpError):
    def __init__(self, index: int, length: int):
        super().__init__(f"index {index} out of range for array of length {length}")
        self.index = index
        self.length = length


class UnsetValueError(SeminterpError):
    pass


class DivisionByZeroError(SeminterpError):
    pass


class ExecutionError(SeminterpError):
    """Raised when a function call fails or a statement cannot run.

    The original error is kept on ``cause`` (and on ``__cause__`` when raised
    with ``raise ... from``).
    """
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ReturnSignal(Exception):
    """Internal exception to handle return statements in functions."""
    def __init__(self, value: Any):
        super().__init__('return')
        self.value = value

# Semantic interpreter package
# This package parses and executes programs written in a structured pseudo-language.
from .errors import (
    SeminterpError, ParseError, UndefinedNameError, DuplicateNameError,
    TypeConversionError, InvalidConfigurationError, ExecutionError,
)
from .lexer import tokenize
from .parser import parse_program, parse_tokens
from .interpreter import Interpreter, run_program, run_file

__all__ = [
    'tokenize',
    'parse_program',
    'parse_tokens',
    'Interpreter',
    'run_program',
    'run_file',
    'SeminterpError',
    'ParseError',
    'UndefinedNameError',
    'DuplicateNameError',
    'TypeConversionError',
    'InvalidConfigurationError',
    'ExecutionError',
]

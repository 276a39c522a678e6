"""Token definitions shared by the lexer and both parser stages."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class TokenType(enum.Enum):
    MODULE = 'module'
    BEGINNING = 'begin'
    END = 'end'
    WHILE = 'while'
    IF = 'if'
    ELSEIF = 'elseif'
    ELSE = 'else'
    THEN = 'then'
    VARIABLE = 'variable'
    LET = 'let'
    INPUT = 'input'
    OUTPUT = 'output'
    FUNCTION = 'function'
    CLASS = 'class'
    METHOD = 'method'
    RETURN = 'return'
    CALL = 'call'
    TRUE = 'true'
    FALSE = 'false'
    WORD = 'word'
    NUMBER = 'number'
    TEXT = 'text'
    ASSIGN = ':='
    SEMICOLON = ';'
    DOT = '.'
    COMMA = ','
    COLON = ':'
    PLUS = '+'
    MINUS = '-'
    MULTIPLY = '*'
    DIVIDE = '/'
    LPAREN = '('
    RPAREN = ')'
    LBRACKET = '['
    RBRACKET = ']'
    LESS = '<'
    LESS_OR_EQUAL = '<='
    GREATER = '>'
    GREATER_OR_EQUAL = '>='
    EQUAL = '=='
    NOT_EQUAL = '!='
    AND_AND = '&&'
    OR_OR = '||'
    EOF = 'end of input'


@dataclass(frozen=True)
class Token:
    kind: TokenType
    text: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.kind in (TokenType.WORD, TokenType.NUMBER, TokenType.TEXT):
            return self.text
        return self.kind.value


EOF_TOKEN = Token(TokenType.EOF, '')


def make_token(kind: TokenType, text: Optional[str] = None) -> Token:
    """Build a token without position information."""
    if text is None:
        text = kind.value
    return Token(kind, text)

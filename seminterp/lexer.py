"""Lexer for the semantic pseudo-language.

The parser stages only ever see a finished list of `Token` objects. This
module produces that list from source text using Lark's basic lexer: the
grammar below declares one terminal per token kind and the `start` rule
exists only so Lark keeps every terminal. Keywords are plain string
terminals; Lark folds them into the WORD pattern, so `modules` stays a
WORD while `module` becomes the MODULE keyword.
"""

from __future__ import annotations

from typing import List

from lark import Lark
from lark.exceptions import UnexpectedInput

from .errors import ParseError
from .tokens import Token, TokenType


LEXER_GRAMMAR = r"""
    start: token*
    ?token: MODULE | BEGINNING | END | WHILE | IF | ELSEIF | ELSE | THEN
          | VARIABLE | LET | INPUT | OUTPUT | FUNCTION | CLASS | METHOD
          | RETURN | CALL | TRUE | FALSE
          | WORD | NUMBER | TEXT
          | ASSIGN | SEMICOLON | DOT | COMMA | COLON
          | PLUS | MINUS | MULTIPLY | DIVIDE
          | LPAREN | RPAREN | LBRACKET | RBRACKET
          | LESS | LESS_OR_EQUAL | GREATER | GREATER_OR_EQUAL
          | EQUAL | NOT_EQUAL | AND_AND | OR_OR

    MODULE: "module"
    BEGINNING: "begin"
    END: "end"
    WHILE: "while"
    IF: "if"
    ELSEIF: "elseif"
    ELSE: "else"
    THEN: "then"
    VARIABLE: "variable"
    LET: "let"
    INPUT: "input"
    OUTPUT: "output"
    FUNCTION: "function"
    CLASS: "class"
    METHOD: "method"
    RETURN: "return"
    CALL: "call"
    TRUE: "true"
    FALSE: "false"

    WORD: /[^\W\d]\w*/
    NUMBER: /\d+(\.\d+)?/
    TEXT: /"[^"\n]*"/

    ASSIGN: ":="
    SEMICOLON: ";"
    DOT: "."
    COMMA: ","
    COLON: ":"
    PLUS: "+"
    MINUS: "-"
    MULTIPLY: "*"
    DIVIDE: "/"
    LPAREN: "("
    RPAREN: ")"
    LBRACKET: "["
    RBRACKET: "]"
    LESS: "<"
    LESS_OR_EQUAL: "<="
    GREATER: ">"
    GREATER_OR_EQUAL: ">="
    EQUAL: "=="
    NOT_EQUAL: "!="
    AND_AND: "&&"
    OR_OR: "||"

    COMMENT: /\/\/[^\n]*/
    %import common.WS
    %ignore WS
    %ignore COMMENT
"""


SEMINTERP_LEXER = Lark(
    LEXER_GRAMMAR,
    parser='lalr',
    lexer='basic',
)


def tokenize(source: str) -> List[Token]:
    """Convert source text into the token list consumed by the parser.

    Text literals lose their surrounding quotes. The end-of-stream token is
    not appended; the parser's cursor supplies it.
    """
    tokens: List[Token] = []
    try:
        for lark_token in SEMINTERP_LEXER.lex(source):
            kind = TokenType[lark_token.type]
            text = str(lark_token)
            if kind is TokenType.TEXT:
                text = text[1:-1]
            tokens.append(Token(kind, text, lark_token.line, lark_token.column))
    except UnexpectedInput as e:
        raise ParseError(f"unexpected character at {e.line}:{e.column}") from e
    return tokens

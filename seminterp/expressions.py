"""Expression nodes and the precedence-climbing expression parser.

Each grammar level parses the next tighter level and folds same-level
operators into a left-leaning tree:

    or        := and ('||' and)*
    and       := equality ('&&' equality)*
    equality  := relation (('==' | '!=') relation)?
    relation  := additive (('<' | '<=' | '>' | '>=') additive)*
    additive  := term (('+' | '-') term)*
    term      := unary (('*' | '/') unary)*
    unary     := '-' primary | primary
    primary   := NUMBER | TEXT | true | false | '(' or ')'
               | WORD | WORD '[' or ']' | WORD '(' args ')'
               | WORD '.' WORD '(' args ')'

Equality is deliberately not a loop: `1 == 2 == 3` parses as `1 == 2` and
leaves the second `==` for the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TYPE_CHECKING

from .errors import ParseError, UndefinedNameError
from .tokens import EOF_TOKEN, Token, TokenType
from .types import fits_int32
from .values import BooleanValue, IntegerValue, RealValue, StringValue, Value

if TYPE_CHECKING:
    from .environment import Scope
    from .operators import Function, Module


@dataclass
class Expression:
    """Base class for all expression nodes."""
    pass


@dataclass
class ValueExpression(Expression):
    value: Value


@dataclass
class VariableExpression(Expression):
    name: str


@dataclass
class UnaryExpression(Expression):
    op: str
    operand: Expression


@dataclass
class BinaryExpression(Expression):
    """Arithmetic: `+`, `-`, `*`, `/`."""
    op: str
    left: Expression
    right: Expression


@dataclass
class ConditionalExpression(Expression):
    """Relational, equality and logical operators."""
    op: str
    left: Expression
    right: Expression


@dataclass
class IndexExpression(Expression):
    name: str
    index: Expression


@dataclass
class CallExpression(Expression):
    name: str
    function: 'Function' = field(repr=False)
    arguments: List[Expression] = field(default_factory=list)


RELATIONAL = [TokenType.LESS, TokenType.LESS_OR_EQUAL, TokenType.GREATER, TokenType.GREATER_OR_EQUAL]
EQUALITY = [TokenType.EQUAL, TokenType.NOT_EQUAL]
ADDITIVE = [TokenType.PLUS, TokenType.MINUS]
MULTIPLICATIVE = [TokenType.MULTIPLY, TokenType.DIVIDE]


class TokenCursor:
    """Position over a finished token list.

    Reading past the last token yields `EOF_TOKEN`, never `None`.
    """
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        position = self.pos + offset
        if position < len(self.tokens):
            return self.tokens[position]
        return EOF_TOKEN

    def match(self, expected) -> bool:
        token = self.peek()
        if isinstance(expected, list):
            return token.kind in expected
        return token.kind is expected

    def consume(self, expected) -> Token:
        token = self.peek()
        if not self.match(expected):
            if isinstance(expected, list):
                wanted = ' or '.join(kind.value for kind in expected)
            else:
                wanted = expected.value
            where = f" at {token.line}:{token.column}" if token.line else ''
            raise ParseError(f"syntax error{where}", wanted, str(token))
        if token.kind is not TokenType.EOF:
            self.pos += 1
        return token

    def at_end(self) -> bool:
        return self.peek().kind is TokenType.EOF


class ExpressionParser(TokenCursor):
    """Builds expression trees from tokens.

    Names are resolved while parsing: variables against `scope`, functions
    and classes against `module`. Without them every name is undefined.
    """
    def __init__(self, tokens: Sequence[Token], scope: Optional['Scope'] = None,
                 module: Optional['Module'] = None):
        super().__init__(tokens)
        self.scope = scope
        self.module = module

    def parse_expression(self) -> Expression:
        return self.parse_logical_or()

    def parse_logical_or(self) -> Expression:
        node = self.parse_logical_and()
        while self.match(TokenType.OR_OR):
            op_token = self.consume(TokenType.OR_OR)
            right = self.parse_logical_and()
            node = ConditionalExpression(op_token.kind.value, node, right)
        return node

    def parse_logical_and(self) -> Expression:
        node = self.parse_equality()
        while self.match(TokenType.AND_AND):
            op_token = self.consume(TokenType.AND_AND)
            right = self.parse_equality()
            node = ConditionalExpression(op_token.kind.value, node, right)
        return node

    def parse_equality(self) -> Expression:
        node = self.parse_relational()
        if self.match(EQUALITY):
            op_token = self.consume(EQUALITY)
            return ConditionalExpression(op_token.kind.value, node, self.parse_relational())
        return node

    def parse_relational(self) -> Expression:
        node = self.parse_additive()
        while self.match(RELATIONAL):
            op_token = self.consume(RELATIONAL)
            right = self.parse_additive()
            node = ConditionalExpression(op_token.kind.value, node, right)
        return node

    def parse_additive(self) -> Expression:
        node = self.parse_multiplicative()
        while self.match(ADDITIVE):
            op_token = self.consume(ADDITIVE)
            right = self.parse_multiplicative()
            node = BinaryExpression(op_token.kind.value, node, right)
        return node

    def parse_multiplicative(self) -> Expression:
        node = self.parse_unary()
        while self.match(MULTIPLICATIVE):
            op_token = self.consume(MULTIPLICATIVE)
            right = self.parse_unary()
            node = BinaryExpression(op_token.kind.value, node, right)
        return node

    def parse_unary(self) -> Expression:
        if self.match(TokenType.MINUS):
            self.consume(TokenType.MINUS)
            token = self.peek()
            if token.kind is TokenType.NUMBER and '.' not in token.text:
                # range checked with its sign so -2147483648 is accepted
                self.consume(TokenType.NUMBER)
                return ValueExpression(self.number_value(token, negative=True))
            return UnaryExpression('-', self.parse_primary())
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        token = self.peek()
        if token.kind is TokenType.NUMBER:
            self.consume(TokenType.NUMBER)
            return ValueExpression(self.number_value(token))
        if token.kind is TokenType.TEXT:
            self.consume(TokenType.TEXT)
            return ValueExpression(StringValue(token.text))
        if token.kind in (TokenType.TRUE, TokenType.FALSE):
            self.consume(token.kind)
            return ValueExpression(BooleanValue(token.kind is TokenType.TRUE))
        if token.kind is TokenType.WORD:
            return self.parse_name()
        if token.kind is TokenType.LPAREN:
            self.consume(TokenType.LPAREN)
            expr = self.parse_expression()
            self.consume(TokenType.RPAREN)
            return expr
        raise ParseError("expression expected", 'expression', str(token))

    def number_value(self, token: Token, negative: bool = False) -> Value:
        # '.' is the decimal point regardless of locale
        if '.' in token.text:
            return RealValue(float(token.text))
        number = -int(token.text) if negative else int(token.text)
        if not fits_int32(number):
            raise ParseError(f"integer literal {number} is out of range")
        return IntegerValue(number)

    def parse_name(self) -> Expression:
        name = self.consume(TokenType.WORD).text
        if self.match(TokenType.LPAREN):
            function = self.resolve_function(name)
            return CallExpression(name, function, self.parse_arguments())
        if (self.match(TokenType.DOT) and self.peek(1).kind is TokenType.WORD
                and self.peek(2).kind is TokenType.LPAREN):
            self.consume(TokenType.DOT)
            method_name = self.consume(TokenType.WORD).text
            method = self.resolve_method(name, method_name)
            return CallExpression(f"{name}.{method_name}", method, self.parse_arguments())
        self.resolve_variable(name)
        if self.match(TokenType.LBRACKET):
            self.consume(TokenType.LBRACKET)
            index = self.parse_expression()
            self.consume(TokenType.RBRACKET)
            return IndexExpression(name, index)
        return VariableExpression(name)

    def parse_arguments(self) -> List[Expression]:
        self.consume(TokenType.LPAREN)
        args: List[Expression] = []
        if not self.match(TokenType.RPAREN):
            args.append(self.parse_expression())
            while self.match(TokenType.COMMA):
                self.consume(TokenType.COMMA)
                args.append(self.parse_expression())
        self.consume(TokenType.RPAREN)
        return args

    def resolve_variable(self, name: str):
        if self.scope is None or not self.scope.exists(name):
            raise UndefinedNameError('variable', name)
        return self.scope.lookup(name)

    def resolve_function(self, name: str) -> 'Function':
        if self.module is None:
            raise UndefinedNameError('function', name)
        return self.module.functions.lookup(name)

    def resolve_method(self, class_name: str, method_name: str) -> 'Function':
        if self.module is None:
            raise UndefinedNameError('class', class_name)
        declaration = self.module.classes.lookup(class_name)
        return declaration.methods.lookup(method_name)

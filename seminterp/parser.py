"""Semantic tree builder.

The parser reads one operator at a time and places it with a single rule
instead of a grammar for statement lists:

* a `module` header starts a new root and opens a block;
* `begin` closes the open block and becomes its child when that block has
  no child yet, otherwise the sibling of the last operator, then opens
  itself;
* every other operator becomes the child of the open block if it has no
  child yet, otherwise the sibling of the last operator.

Bodies of loops, conditionals, functions and classes are parsed
recursively: the first operator is the owner's child and the rest follow
as siblings. A top-level `end` marks the end of the program.

Declarations are registered while parsing, so every name used in an
expression must be declared earlier in the source.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Type

from .environment import Scope
from .errors import InvalidConfigurationError, ParseError
from .expressions import CallExpression, ExpressionParser
from .lexer import tokenize
from .operators import (
    Beginning, Call, ClassDeclaration, Else, ElseIf, Function, If, Input, Let,
    MethodFunction, Module, Output, Parameter, Return, SemanticOperator,
    VariableDeclaration, While,
)
from .storage import FunctionStorage, Variable
from .tokens import Token, TokenType
from .tree import SemanticTree, describe
from .types import TypeSpec, semantic_type_from_keyword


class Parser(ExpressionParser):
    def __init__(self, tokens: Sequence[Token]):
        super().__init__(tokens)
        self.tree = SemanticTree()
        self.function: Optional[Function] = None

    def parse(self) -> SemanticTree:
        open_blocks: List[SemanticOperator] = []
        last_operator: Optional[SemanticOperator] = None
        while not self.at_end():
            if self.match(TokenType.END):
                # end-of-program marker
                self.consume(TokenType.END)
                return self.tree
            previous = last_operator
            operator = self.parse_operator()
            as_child = False
            if isinstance(operator, Module):
                open_blocks.append(operator)
                previous = None
            elif isinstance(operator, Beginning):
                as_child = open_blocks.pop().child is None
                open_blocks.append(operator)
            else:
                as_child = open_blocks[-1].child is None
            self.tree.insert_operator(previous, operator, as_child)
            last_operator = operator
        return self.tree

    def parse_operator(self) -> SemanticOperator:
        token = self.peek()
        if token.kind is TokenType.MODULE:
            return self.parse_module()
        if self.module is None:
            raise ParseError("module header expected", 'module', str(token))
        if token.kind is TokenType.BEGINNING:
            self.consume(TokenType.BEGINNING)
            return Beginning()
        if token.kind is TokenType.FUNCTION:
            self.consume(TokenType.FUNCTION)
            return self.parse_function(Function, self.module.functions)
        if token.kind is TokenType.CLASS:
            return self.parse_class()
        return self.parse_statement()

    def parse_statement(self) -> SemanticOperator:
        token = self.peek()
        if token.kind is TokenType.WHILE:
            return self.parse_while()
        if token.kind is TokenType.IF:
            return self.parse_if()
        if token.kind is TokenType.VARIABLE:
            return self.parse_variable()
        if token.kind is TokenType.LET:
            return self.parse_let()
        if token.kind is TokenType.INPUT:
            self.consume(TokenType.INPUT)
            name = self.consume(TokenType.WORD).text
            self.resolve_variable(name)
            self.consume(TokenType.SEMICOLON)
            return Input(name=name)
        if token.kind is TokenType.OUTPUT:
            self.consume(TokenType.OUTPUT)
            expression = self.parse_expression()
            self.consume(TokenType.SEMICOLON)
            return Output(expression=expression)
        if token.kind is TokenType.CALL:
            return self.parse_call()
        if token.kind is TokenType.RETURN:
            return self.parse_return()
        raise ParseError("statement expected", 'statement', str(token))

    def parse_body(self, owner: SemanticOperator, terminators: List[TokenType]):
        """Parse statements up to a terminator and hang them under `owner`."""
        previous: Optional[SemanticOperator] = None
        while not self.match(terminators):
            if self.at_end():
                raise ParseError(f"unterminated {describe(owner)}",
                                 ' or '.join(t.value for t in terminators), 'end of input')
            operator = self.parse_statement()
            if previous is None:
                self.tree.insert_operator(owner, operator, as_child=True)
            else:
                self.tree.insert_operator(previous, operator, as_child=False)
            previous = operator

    def parse_closing(self, keyword: TokenType):
        self.consume(TokenType.END)
        self.consume(keyword)
        self.consume(TokenType.DOT)

    def parse_closing_name(self, name: str):
        self.consume(TokenType.END)
        closing = self.consume(TokenType.WORD)
        if closing.text != name:
            raise ParseError("mismatched end", name, closing.text)
        self.consume(TokenType.DOT)

    def parse_module(self) -> Module:
        self.consume(TokenType.MODULE)
        name = self.consume(TokenType.WORD).text
        self.consume(TokenType.SEMICOLON)
        module = Module(name=name)
        self.module = module
        self.scope = Scope(name=name, variables=module.variables)
        return module

    def parse_type_spec(self) -> TypeSpec:
        keyword = self.consume(TokenType.WORD).text
        kind = semantic_type_from_keyword(keyword)
        if not self.match(TokenType.LBRACKET):
            return TypeSpec(kind)
        self.consume(TokenType.LBRACKET)
        size = self.consume(TokenType.NUMBER)
        self.consume(TokenType.RBRACKET)
        if '.' in size.text:
            raise ParseError("array length must be an integer", 'integer', size.text)
        length = int(size.text)
        if length <= 0:
            raise InvalidConfigurationError(f"array length must be at least 1, got {length}")
        return TypeSpec(kind, length)

    def parse_variable(self) -> VariableDeclaration:
        self.consume(TokenType.VARIABLE)
        self.consume(TokenType.MINUS)
        declared_type = self.parse_type_spec()
        name = self.consume(TokenType.WORD).text
        expression = None
        if self.match(TokenType.ASSIGN):
            self.consume(TokenType.ASSIGN)
            expression = self.parse_expression()
        self.consume(TokenType.SEMICOLON)
        self.scope.declare(name, Variable(declared_type, name, expression))
        return VariableDeclaration(declared_type=declared_type, name=name, expression=expression)

    def parse_let(self) -> Let:
        self.consume(TokenType.LET)
        name = self.consume(TokenType.WORD).text
        self.resolve_variable(name)
        element = None
        if self.match(TokenType.LBRACKET):
            self.consume(TokenType.LBRACKET)
            element = self.parse_expression()
            self.consume(TokenType.RBRACKET)
        self.consume(TokenType.ASSIGN)
        expression = self.parse_expression()
        self.consume(TokenType.SEMICOLON)
        return Let(name=name, expression=expression, element=element)

    def parse_while(self) -> While:
        self.consume(TokenType.WHILE)
        guard = self.parse_expression()
        self.consume(TokenType.THEN)
        loop = While(guard=guard)
        self.parse_body(loop, [TokenType.END])
        self.parse_closing(TokenType.WHILE)
        return loop

    def parse_if(self) -> If:
        self.consume(TokenType.IF)
        guard = self.parse_expression()
        self.consume(TokenType.THEN)
        branch = If(guard=guard)
        alternatives = [TokenType.ELSEIF, TokenType.ELSE, TokenType.END]
        self.parse_body(branch, alternatives)
        while self.match(TokenType.ELSEIF):
            self.consume(TokenType.ELSEIF)
            else_if = ElseIf(guard=self.parse_expression())
            self.consume(TokenType.THEN)
            branch.else_ifs.append(self.tree.add(else_if))
            self.parse_body(else_if, alternatives)
        if self.match(TokenType.ELSE):
            self.consume(TokenType.ELSE)
            otherwise = Else()
            branch.otherwise = self.tree.add(otherwise)
            self.parse_body(otherwise, [TokenType.END])
        self.parse_closing(TokenType.IF)
        return branch

    def parse_call(self) -> Call:
        self.consume(TokenType.CALL)
        token = self.peek()
        expression = self.parse_primary()
        if not isinstance(expression, CallExpression):
            raise ParseError("call expects a function", 'function call', str(token))
        self.consume(TokenType.SEMICOLON)
        return Call(expression=expression)

    def parse_return(self) -> Return:
        token = self.consume(TokenType.RETURN)
        if self.function is None:
            raise ParseError("return outside of a function", 'statement', str(token))
        expression = None
        if not self.match(TokenType.SEMICOLON):
            expression = self.parse_expression()
        self.consume(TokenType.SEMICOLON)
        name = self.function.qualified_name
        if self.function.return_type is not None and expression is None:
            raise ParseError(f"function {name} must return a value", 'expression', ';')
        if self.function.return_type is None and expression is not None:
            raise ParseError(f"function {name} has no return type", ';', 'expression')
        return Return(expression=expression)

    def parse_parameters(self) -> List[Parameter]:
        self.consume(TokenType.LPAREN)
        params: List[Parameter] = []
        if not self.match(TokenType.RPAREN):
            while True:
                declared_type = self.parse_type_spec()
                name = self.consume(TokenType.WORD).text
                params.append(Parameter(declared_type, name))
                if not self.match(TokenType.COMMA):
                    break
                self.consume(TokenType.COMMA)
        self.consume(TokenType.RPAREN)
        return params

    def parse_function(self, cls: Type[Function], storage: FunctionStorage, **extra) -> Function:
        """Parse a function or method after its leading keyword.

        The function is registered in `storage` before its body is parsed so
        the body can call it recursively.
        """
        name = self.consume(TokenType.WORD).text
        params = self.parse_parameters()
        return_type = None
        if self.match(TokenType.COLON):
            self.consume(TokenType.COLON)
            return_type = self.parse_type_spec()
        function = cls(name=name, parameters=params, return_type=return_type,
                       module=self.module.name, **extra)
        storage.declare(name, function)
        enclosing = self.scope
        self.scope = Scope(parent=enclosing, name=function.qualified_name, variables=function.variables)
        self.function = function
        try:
            for param in params:
                self.scope.declare(param.name, Variable(param.declared_type, param.name))
            self.parse_body(function, [TokenType.END])
        finally:
            self.scope = enclosing
            self.function = None
        self.parse_closing_name(name)
        return function

    def parse_class(self) -> ClassDeclaration:
        self.consume(TokenType.CLASS)
        name = self.consume(TokenType.WORD).text
        declaration = ClassDeclaration(name=name)
        self.module.classes.declare(name, declaration)
        previous: Optional[SemanticOperator] = None
        while self.match(TokenType.METHOD):
            self.consume(TokenType.METHOD)
            method = self.parse_function(MethodFunction, declaration.methods, class_name=name)
            if previous is None:
                self.tree.insert_operator(declaration, method, as_child=True)
            else:
                self.tree.insert_operator(previous, method, as_child=False)
            previous = method
        self.parse_closing_name(name)
        return declaration


def parse_tokens(tokens: Sequence[Token]) -> SemanticTree:
    return Parser(tokens).parse()


def parse_program(source: str) -> SemanticTree:
    """Tokenize and parse program text into a semantic tree."""
    return parse_tokens(tokenize(source))

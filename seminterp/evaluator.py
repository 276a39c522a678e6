"""Expression evaluation.

Arithmetic follows the operand kinds: two integers give an integer
(wrapped to 32 bits, `/` truncating toward zero), a real on either side
converts both sides with `as_real`, and `+` with text on either side
concatenates. Comparisons always compare a pair of the same converted
representation. Any other mix of kinds is a `TypeConversionError`.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, TYPE_CHECKING

from .errors import (
    DivisionByZeroError, ExecutionError, ParseError, TypeConversionError, UnsetValueError,
)
from .expressions import (
    BinaryExpression, CallExpression, ConditionalExpression, Expression, ExpressionParser,
    IndexExpression, UnaryExpression, ValueExpression, VariableExpression,
)
from .tokens import Token
from .values import (
    ArrayValue, BooleanValue, IntegerValue, RealValue, StringValue, Value,
)

if TYPE_CHECKING:
    from .environment import Scope
    from .operators import Function


NUMERIC = (IntegerValue, RealValue)


class Evaluator:
    """Evaluates expression trees against a scope.

    Function calls need an interpreter to run the body; `Interpreter`
    overrides `call_function`.
    """

    def evaluate(self, node: Expression, scope: Optional['Scope']) -> Value:
        if isinstance(node, ValueExpression):
            return node.value
        if isinstance(node, VariableExpression):
            return self.variable_value(node.name, scope)
        if isinstance(node, IndexExpression):
            array = self.variable_value(node.name, scope)
            index = self.evaluate(node.index, scope).as_integer()
            if not isinstance(array, ArrayValue):
                raise TypeConversionError(array.kind, 'array', f'{node.name} cannot be indexed')
            item = array.get(index)
            if item is None:
                raise UnsetValueError(f"{node.name}[{index}] is unset")
            return item
        if isinstance(node, UnaryExpression):
            operand = self.evaluate(node.operand, scope)
            if isinstance(operand, IntegerValue):
                return IntegerValue(-operand.value)
            if isinstance(operand, RealValue):
                return RealValue(-operand.value)
            raise TypeConversionError(operand.kind, 'number', f'unary {node.op} needs a number')
        if isinstance(node, BinaryExpression):
            left = self.evaluate(node.left, scope)
            right = self.evaluate(node.right, scope)
            return self.apply_binary_op(node.op, left, right)
        if isinstance(node, ConditionalExpression):
            # Short-circuit for && and ||
            if node.op == '&&':
                if not self.evaluate(node.left, scope).as_boolean():
                    return BooleanValue(False)
                return BooleanValue(self.evaluate(node.right, scope).as_boolean())
            if node.op == '||':
                if self.evaluate(node.left, scope).as_boolean():
                    return BooleanValue(True)
                return BooleanValue(self.evaluate(node.right, scope).as_boolean())
            left = self.evaluate(node.left, scope)
            right = self.evaluate(node.right, scope)
            return BooleanValue(self.compare(node.op, left, right))
        if isinstance(node, CallExpression):
            args = [self.evaluate(arg, scope) for arg in node.arguments]
            result = self.call_function(node.function, args)
            if result is None:
                raise ExecutionError(f"function {node.name} does not return a value")
            return result
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def variable_value(self, name: str, scope: Optional['Scope']) -> Value:
        if scope is None:
            raise UnsetValueError(f"no scope to read {name} from")
        variable = scope.lookup(name)
        if variable.bound_expression is None:
            raise UnsetValueError(f"variable {name} has no value")
        return self.evaluate(variable.bound_expression, scope)

    def call_function(self, function: 'Function', args: List[Value]) -> Optional[Value]:
        raise ExecutionError(f"cannot call {function.qualified_name} outside of an interpreter")

    def apply_binary_op(self, op: str, a: Value, b: Value) -> Value:
        if op == '+' and (isinstance(a, StringValue) or isinstance(b, StringValue)):
            return StringValue(a.as_string() + b.as_string())
        if not isinstance(a, NUMERIC) or not isinstance(b, NUMERIC):
            culprit = b if isinstance(a, NUMERIC) else a
            raise TypeConversionError(culprit.kind, 'number', f'operator {op} needs numbers')
        if isinstance(a, IntegerValue) and isinstance(b, IntegerValue):
            x, y = a.value, b.value
            if op == '+':
                return IntegerValue(x + y)
            if op == '-':
                return IntegerValue(x - y)
            if op == '*':
                return IntegerValue(x * y)
            if op == '/':
                if y == 0:
                    raise DivisionByZeroError('division by zero')
                # integer division truncating toward zero
                quotient = abs(x) // abs(y)
                return IntegerValue(quotient if (x < 0) == (y < 0) else -quotient)
        else:
            x, y = a.as_real(), b.as_real()
            if op == '+':
                return RealValue(x + y)
            if op == '-':
                return RealValue(x - y)
            if op == '*':
                return RealValue(x * y)
            if op == '/':
                if y == 0.0:
                    raise DivisionByZeroError('division by zero')
                return RealValue(x / y)
        raise NotImplementedError(f"unknown operator {op}")

    def compare(self, op: str, a: Value, b: Value) -> bool:
        if isinstance(a, StringValue) and isinstance(b, StringValue):
            x, y = a.as_string(), b.as_string()
        elif isinstance(a, (IntegerValue, BooleanValue)) and isinstance(b, (IntegerValue, BooleanValue)):
            x, y = a.as_integer(), b.as_integer()
        elif isinstance(a, (RealValue, IntegerValue)) and isinstance(b, (RealValue, IntegerValue)):
            x, y = a.as_real(), b.as_real()
        else:
            raise TypeConversionError(b.kind, a.kind, f'cannot compare with {op}')
        if op == '==':
            return x == y
        if op == '!=':
            return x != y
        if op == '<':
            return x < y
        if op == '<=':
            return x <= y
        if op == '>':
            return x > y
        if op == '>=':
            return x >= y
        raise NotImplementedError(f"unknown operator {op}")


def evaluate_tokens(tokens: Sequence[Token], scope: Optional['Scope'] = None) -> Value:
    """Parse a token slice as one expression and evaluate it.

    Names resolve against `scope` both while parsing and while evaluating.
    Tokens left over after the expression are a `ParseError`.
    """
    parser = ExpressionParser(tokens, scope=scope)
    expression = parser.parse_expression()
    if not parser.at_end():
        raise ParseError("unexpected token after expression", 'end of expression', str(parser.peek()))
    return Evaluator().evaluate(expression, scope)

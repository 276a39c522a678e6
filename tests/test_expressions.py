import pytest

from seminterp.environment import Scope
from seminterp.errors import (
    DivisionByZeroError, ParseError, TypeConversionError, UndefinedNameError,
)
from seminterp.evaluator import Evaluator, evaluate_tokens
from seminterp.expressions import (
    BinaryExpression, ConditionalExpression, ExpressionParser, UnaryExpression,
    ValueExpression, VariableExpression,
)
from seminterp.lexer import tokenize
from seminterp.storage import Variable
from seminterp.tokens import TokenType, make_token
from seminterp.types import TypeSpec
from seminterp.values import BooleanValue, IntegerValue, RealValue, StringValue


def evaluate(source, scope=None):
    return evaluate_tokens(tokenize(source), scope)


def literal(n):
    return ValueExpression(IntegerValue(n))


def test_multiplication_binds_tighter_than_addition():
    assert evaluate('1 + 2 * 3') == IntegerValue(7)
    assert evaluate('(1 + 2) * 3') == IntegerValue(9)


def test_additive_chain_is_left_associative():
    assert evaluate('10 - 4 - 3') == IntegerValue(3)
    assert evaluate('64 / 4 / 2') == IntegerValue(8)


def test_relational_chain_is_left_associative():
    parser = ExpressionParser(tokenize('1 < 2 < 3'))
    expression = parser.parse_expression()
    assert expression == ConditionalExpression(
        '<', ConditionalExpression('<', literal(1), literal(2)), literal(3))
    assert parser.at_end()
    assert evaluate('1 < 2 < 3') == BooleanValue(True)
    # (3 > 2) is true, which compares as 1
    assert evaluate('3 > 2 > 1') == BooleanValue(False)


def test_equality_takes_a_single_comparison():
    parser = ExpressionParser(tokenize('1 == 2 == 3'))
    expression = parser.parse_expression()
    assert expression == ConditionalExpression('==', literal(1), literal(2))
    assert parser.peek().kind is TokenType.EQUAL
    assert Evaluator().evaluate(expression, None) == BooleanValue(False)


def test_leftover_equality_is_a_parse_error():
    with pytest.raises(ParseError):
        evaluate('1 == 2 == 3')


def test_logical_operators():
    assert evaluate('1 < 2 && 2 < 3') == BooleanValue(True)
    assert evaluate('1 > 2 || 2 > 3') == BooleanValue(False)
    assert evaluate('false || true && 1 == 1') == BooleanValue(True)


def test_logical_operators_short_circuit():
    assert evaluate('1 || 1 / 0') == BooleanValue(True)
    assert evaluate('0 && 1 / 0') == BooleanValue(False)


def test_unary_minus_applies_once():
    assert evaluate('-3 * 2') == IntegerValue(-6)
    expression = ExpressionParser(tokenize('-x'), scope=scope_with(x=IntegerValue(1))).parse_expression()
    assert expression == UnaryExpression('-', VariableExpression('x'))
    with pytest.raises(ParseError):
        evaluate('- - 1')


def test_integer_division_truncates_toward_zero():
    assert evaluate('7 / 2') == IntegerValue(3)
    assert evaluate('-7 / 2') == IntegerValue(-3)
    assert evaluate('7.0 / 2') == RealValue(3.5)


def test_division_by_zero():
    with pytest.raises(DivisionByZeroError):
        evaluate('1 / 0')
    with pytest.raises(DivisionByZeroError):
        evaluate('1.5 / 0')


def test_numeric_literals_use_a_dot_for_decimals():
    assert evaluate('1.5') == RealValue(1.5)
    assert evaluate('2') == IntegerValue(2)
    with pytest.raises(ParseError):
        evaluate('3000000000')


def test_mixed_numbers_compare_as_reals():
    assert evaluate('1 == 1.0') == BooleanValue(True)
    assert evaluate('2 < 2.5') == BooleanValue(True)


def test_text_concatenation_and_comparison():
    assert evaluate('"a" + 1') == StringValue('a1')
    assert evaluate('"abc" < "abd"') == BooleanValue(True)
    with pytest.raises(TypeConversionError):
        evaluate('"a" < 1')
    with pytest.raises(TypeConversionError):
        evaluate('"a" - 1')


def scope_with(**values):
    scope = Scope(name='test')
    for name, value in values.items():
        spec = TypeSpec.real() if isinstance(value, RealValue) else TypeSpec.integer()
        scope.declare(name, Variable(spec, name, ValueExpression(value)))
    return scope


def test_variables_resolve_through_scope():
    scope = scope_with(x=IntegerValue(4), y=RealValue(0.5))
    assert evaluate('x * 2 + 1', scope) == IntegerValue(9)
    assert evaluate('x * y', scope) == RealValue(2.0)


def test_unknown_variable_fails_while_parsing():
    parser = ExpressionParser(tokenize('z + 1'), scope=scope_with(x=IntegerValue(1)))
    with pytest.raises(UndefinedNameError):
        parser.parse_expression()
    with pytest.raises(UndefinedNameError):
        evaluate('x')


def test_missing_primary_or_paren_is_a_parse_error():
    with pytest.raises(ParseError) as info:
        evaluate('1 +')
    assert info.value.found == 'end of input'
    with pytest.raises(ParseError) as info:
        evaluate('(1 + 2')
    assert info.value.expected == ')'


def test_negative_literals_are_range_checked_with_their_sign():
    assert evaluate('-2147483648') == IntegerValue(-2147483648)
    assert evaluate('2 - -2147483648') == IntegerValue(-2147483646)
    with pytest.raises(ParseError):
        evaluate('2147483648')
    with pytest.raises(ParseError):
        evaluate('-2147483649')


def test_hand_built_token_stream():
    tokens = [
        make_token(TokenType.NUMBER, '2'),
        make_token(TokenType.MULTIPLY),
        make_token(TokenType.LPAREN),
        make_token(TokenType.NUMBER, '3'),
        make_token(TokenType.PLUS),
        make_token(TokenType.NUMBER, '4'),
        make_token(TokenType.RPAREN),
    ]
    assert str(tokens[1]) == '*'
    assert evaluate_tokens(tokens) == IntegerValue(14)

import pytest

from seminterp.environment import Scope
from seminterp.errors import DuplicateNameError, UndefinedNameError
from seminterp.expressions import ValueExpression
from seminterp.storage import ClassStorage, FunctionStorage, Variable, VariableStorage
from seminterp.types import TypeSpec
from seminterp.values import IntegerValue, StringValue


def make_variable(name, value=None, spec=None):
    bound = ValueExpression(value) if value is not None else None
    return Variable(spec or TypeSpec.integer(), name, bound)


def test_declare_twice_is_a_duplicate():
    storage = VariableStorage()
    storage.declare('x', make_variable('x', IntegerValue(1)))
    with pytest.raises(DuplicateNameError):
        storage.declare('x', make_variable('x', IntegerValue(2)))


def test_lookup_without_declare_is_undefined():
    storage = VariableStorage()
    assert not storage.exists('y')
    with pytest.raises(UndefinedNameError) as info:
        storage.lookup('y')
    assert info.value.name == 'y'


def test_rebind_keeps_declared_type():
    storage = VariableStorage()
    storage.declare('x', make_variable('x', IntegerValue(1)))
    storage.rebind('x', ValueExpression(IntegerValue(9)))
    variable = storage.lookup('x')
    assert variable.declared_type == TypeSpec.integer()
    assert variable.bound_expression == ValueExpression(IntegerValue(9))


def test_rebind_undeclared_fails():
    with pytest.raises(UndefinedNameError):
        VariableStorage().rebind('x', ValueExpression(IntegerValue(1)))


def test_clear_empties_the_table():
    storage = VariableStorage()
    storage.declare('x', make_variable('x'))
    storage.clear()
    assert len(storage) == 0
    assert not storage.exists('x')


def test_function_and_class_tables_name_their_kind():
    with pytest.raises(UndefinedNameError) as info:
        FunctionStorage().lookup('f')
    assert info.value.kind == 'function'
    with pytest.raises(UndefinedNameError) as info:
        ClassStorage().lookup('C')
    assert info.value.kind == 'class'


def test_scope_reads_walk_outward():
    outer = Scope(name='module')
    outer.declare('x', make_variable('x', IntegerValue(1)))
    inner = Scope(parent=outer, name='call')
    assert inner.exists('x')
    assert inner.lookup('x') is outer.lookup('x')
    assert inner.depth == 1


def test_scope_declares_in_innermost_frame():
    outer = Scope(name='module')
    outer.declare('x', make_variable('x', IntegerValue(1)))
    inner = Scope(parent=outer, name='call')
    inner.declare('x', make_variable('x', StringValue('shadow'), TypeSpec.string()))
    assert inner.lookup('x').declared_type == TypeSpec.string()
    assert outer.lookup('x').declared_type == TypeSpec.integer()


def test_scope_rebind_changes_owning_frame():
    outer = Scope(name='module')
    outer.declare('x', make_variable('x', IntegerValue(1)))
    inner = Scope(parent=outer, name='call')
    inner.rebind('x', ValueExpression(IntegerValue(5)))
    assert not inner.variables.exists('x')
    assert outer.lookup('x').bound_expression == ValueExpression(IntegerValue(5))


def test_clearing_a_frame_leaves_its_parent_alone():
    outer = Scope(name='module')
    outer.declare('x', make_variable('x', IntegerValue(1)))
    inner = Scope(parent=outer, name='call')
    inner.declare('y', make_variable('y', IntegerValue(2)))
    inner.clear()
    assert not inner.exists('y')
    assert inner.exists('x')

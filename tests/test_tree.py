import pytest

from seminterp.console import BufferedOutput
from seminterp.errors import (
    DuplicateNameError, InvalidConfigurationError, ParseError, UndefinedNameError,
)
from seminterp.interpreter import Interpreter
from seminterp.operators import (
    Beginning, Else, ElseIf, Function, If, Let, Module, Output, VariableDeclaration, While,
)
from seminterp.parser import parse_program, parse_tokens
from seminterp.lexer import tokenize
from seminterp.tree import SemanticTree


SIMPLE = """
module M;
variable - integer x;
begin
    let x := 5;
    output x;
end.
"""


def test_let_is_child_of_block_and_output_its_sibling():
    tree = parse_program(SIMPLE)
    assert len(tree.roots) == 1
    module = tree[tree.roots[0]]
    assert isinstance(module, Module)
    assert module.name == 'M'
    declaration = tree[module.child]
    assert isinstance(declaration, VariableDeclaration)
    block = tree[declaration.sibling]
    assert isinstance(block, Beginning)
    let = tree[block.child]
    assert isinstance(let, Let)
    output = tree[let.sibling]
    assert isinstance(output, Output)
    assert output.sibling is None


def test_executing_the_block_emits_the_bound_value():
    sink = BufferedOutput()
    Interpreter(output_sink=sink).run(parse_tokens(tokenize(SIMPLE)))
    assert sink.lines == ['5']


def test_block_becomes_module_child_without_declarations():
    tree = parse_program('module M; begin output 1; end.')
    module = tree[tree.roots[0]]
    block = tree[module.child]
    assert isinstance(block, Beginning)
    assert isinstance(tree[block.child], Output)


def test_declarations_register_in_the_module():
    tree = parse_program(SIMPLE)
    module = tree[tree.roots[0]]
    assert module.variables.exists('x')


def test_loop_body_hangs_under_the_loop():
    tree = parse_program("""
        module M;
        variable - integer x := 0;
        begin
            while x < 3 then
                let x := x + 1;
                output x;
            end while.
            output 0;
        end.
    """)
    block = next(op for op in tree.nodes if isinstance(op, Beginning))
    loop = tree[block.child]
    assert isinstance(loop, While)
    body = list(tree.children(loop))
    assert [type(op) for op in body] == [Let, Output]
    assert isinstance(tree[loop.sibling], Output)


def test_conditional_branches_are_kept_in_order():
    tree = parse_program("""
        module M;
        variable - integer x := 2;
        begin
            if x == 1 then
                output "one";
            elseif x == 2 then
                output "two";
            elseif x == 3 then
                output "three";
            else
                output "many";
            end if.
        end.
    """)
    branch = next(op for op in tree.nodes if isinstance(op, If))
    assert len(branch.else_ifs) == 2
    assert all(isinstance(tree[i], ElseIf) for i in branch.else_ifs)
    assert isinstance(tree[branch.otherwise], Else)
    assert isinstance(tree[branch.child], Output)


def test_end_marker_stops_parsing():
    tree = parse_program('module M; begin output 1; end. output 2;')
    outputs = [op for op in tree.nodes if isinstance(op, Output)]
    assert len(outputs) == 1


def test_operator_before_module_header_is_rejected():
    with pytest.raises(ParseError):
        parse_program('output 1; module M;')


def test_duplicate_declaration_fails_while_parsing():
    with pytest.raises(DuplicateNameError):
        parse_program('module M; variable - integer x; variable - real x; begin end.')


def test_undeclared_names_fail_while_parsing():
    with pytest.raises(UndefinedNameError):
        parse_program('module M; begin let y := 1; end.')
    with pytest.raises(UndefinedNameError):
        parse_program('module M; begin call nothing(); end.')


def test_leftover_equality_breaks_the_statement():
    with pytest.raises(ParseError) as info:
        parse_program('module M; begin output 1 == 2 == 3; end.')
    assert info.value.expected == ';'


def test_mismatched_closing_name():
    with pytest.raises(ParseError):
        parse_program('module M; function f() output 1; end g. begin end.')


def test_return_outside_function():
    with pytest.raises(ParseError):
        parse_program('module M; begin return; end.')


def test_unterminated_loop():
    with pytest.raises(ParseError):
        parse_program('module M; begin while 1 then output 1;')


def test_zero_length_array_declaration():
    with pytest.raises(InvalidConfigurationError):
        parse_program('module M; variable - integer[0] xs; begin end.')


def test_function_body_is_a_child_chain():
    tree = parse_program("""
        module M;
        function twice(integer n) : integer
            variable - integer m := n * 2;
            return m;
        end twice.
        begin end.
    """)
    module = tree[tree.roots[0]]
    function = tree[module.child]
    assert isinstance(function, Function)
    assert module.functions.lookup('twice') is function
    assert function.variables.exists('m')
    assert function.variables.exists('n')
    assert len(list(tree.children(function))) == 2


def test_insert_operator_primitive():
    tree = SemanticTree()
    module = Module(name='M')
    block = Beginning()
    first = Output()
    second = Output()
    tree.insert_operator(None, module, as_child=False)
    tree.insert_operator(module, block, as_child=True)
    tree.insert_operator(block, first, as_child=True)
    tree.insert_operator(first, second, as_child=False)
    assert tree.roots == [module.index]
    assert [op.index for op in tree.chain(block.child)] == [first.index, second.index]
    assert tree.outline() == ['Module M', '  Beginning', '    Output', '    Output']
    with pytest.raises(InvalidConfigurationError):
        tree.insert_operator(block, Output(), as_child=True)

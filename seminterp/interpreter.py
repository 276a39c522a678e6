"""Tree-walking executor for the semantic interpreter.

The interpreter walks the child/sibling links of a `SemanticTree`. It keeps
an explicit stack of scope frames: one per module activation and one per
function call. A function frame's parent is its module frame, so calls
never see their caller's locals, and recursion gets fresh bindings on
every call. Frames are cleared and popped when the activation ends,
whether it finished or failed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .console import ConsoleInput, ConsoleOutput
from .environment import Scope
from .errors import ExecutionError, ReturnSignal, SeminterpError, TypeConversionError
from .evaluator import Evaluator
from .expressions import Expression, ValueExpression
from .operators import (
    Beginning, Call, ClassDeclaration, Function, If, Input, Let, Module, Output,
    Return, SemanticOperator, VariableDeclaration, While,
)
from .parser import parse_program
from .storage import Variable
from .tree import SemanticTree, describe
from .values import ArrayValue, StringValue, Value, convert_value, default_value


class Interpreter(Evaluator):
    """Core interpreter that executes a semantic tree."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 input_source: Any = None, output_sink: Any = None):
        self.input_source = input_source if input_source is not None else ConsoleInput()
        self.output_sink = output_sink if output_sink is not None else ConsoleOutput()
        self.frames: List[Scope] = []
        self.module_scopes: Dict[str, Scope] = {}
        self.tree: Optional[SemanticTree] = None
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    @property
    def scope(self) -> Scope:
        if not self.frames:
            raise ExecutionError("no active scope")
        return self.frames[-1]

    # Public API
    def run(self, tree: SemanticTree):
        self.tree = tree
        if self.debug_level >= 1:
            for line in tree.outline():
                self.debug(f"tree {line}")
        try:
            for module in tree.modules():
                self.execute(module)
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute_chain(self, index: Optional[int]):
        for operator in self.tree.chain(index):
            self.execute(operator)

    def execute(self, node: SemanticOperator):
        if self.debug_level >= 1:
            self.debug(f"exec {describe(node)} depth={len(self.frames)}")
        if isinstance(node, Module):
            scope = Scope(name=node.name)
            self.module_scopes[node.name] = scope
            self.frames.append(scope)
            try:
                self.execute_chain(node.child)
            finally:
                scope.clear()
                self.frames.pop()
            return
        if isinstance(node, Beginning):
            self.execute_chain(node.child)
            return
        if isinstance(node, If):
            if self.guard_holds(node.guard):
                self.execute_chain(node.child)
                return
            for index in node.else_ifs:
                else_if = self.tree[index]
                if self.guard_holds(else_if.guard):
                    self.execute_chain(else_if.child)
                    return
            if node.otherwise is not None:
                self.execute_chain(self.tree[node.otherwise].child)
            return
        if isinstance(node, While):
            while self.guard_holds(node.guard):
                self.execute_chain(node.child)
            return
        if isinstance(node, VariableDeclaration):
            if node.expression is not None:
                value = self.evaluate(node.expression, self.scope)
            else:
                value = default_value(node.declared_type)
            value = convert_value(value, node.declared_type)
            frame = self.scope
            # a loop body runs its declarations again
            if frame.variables.exists(node.name):
                frame.variables.rebind(node.name, ValueExpression(value))
            else:
                frame.declare(node.name, Variable(node.declared_type, node.name, ValueExpression(value)))
            if self.debug_level >= 2:
                self.debug(f"declare {node.name}: {node.declared_type!r} = {value.as_string()}")
            return
        if isinstance(node, Let):
            self.assign(node.name, node.element, self.evaluate(node.expression, self.scope))
            return
        if isinstance(node, Input):
            variable = self.scope.lookup(node.name)
            if variable.declared_type.is_array:
                raise TypeConversionError('string', repr(variable.declared_type), 'cannot input an array')
            text = self.input_source.read(node.name, variable.declared_type)
            value = convert_value(StringValue(text), variable.declared_type)
            self.scope.rebind(node.name, ValueExpression(value))
            if self.debug_level >= 2:
                self.debug(f"input {node.name} = {value.as_string()}")
            return
        if isinstance(node, Output):
            self.output_sink.write(self.evaluate(node.expression, self.scope))
            return
        if isinstance(node, Call):
            call = node.expression
            args = [self.evaluate(arg, self.scope) for arg in call.arguments]
            self.call_function(call.function, args)
            return
        if isinstance(node, Return):
            value = self.evaluate(node.expression, self.scope) if node.expression is not None else None
            raise ReturnSignal(value)
        if isinstance(node, (Function, ClassDeclaration)):
            # registered while parsing
            return
        raise NotImplementedError(f"execute: unexpected operator type {type(node)}")

    def guard_holds(self, guard: Expression) -> bool:
        result = self.evaluate(guard, self.scope).as_integer() != 0
        if self.debug_level >= 3:
            self.debug(f"guard {guard} -> {result}")
        return result

    def assign(self, name: str, element: Optional[Expression], value: Value):
        variable = self.scope.lookup(name)
        declared_type = variable.declared_type
        if element is None:
            self.scope.rebind(name, ValueExpression(convert_value(value, declared_type)))
            if self.debug_level >= 2:
                self.debug(f"let {name} = {value.as_string()}")
            return
        array = self.variable_value(name, self.scope)
        if not isinstance(array, ArrayValue) or not declared_type.is_array:
            raise TypeConversionError(array.kind, 'array', f'{name} cannot be indexed')
        index = self.evaluate(element, self.scope).as_integer()
        array.set(index, convert_value(value, declared_type.element()))
        if self.debug_level >= 2:
            self.debug(f"let {name}[{index}] = {value.as_string()}")

    def call_function(self, function: Function, args: List[Value]) -> Optional[Value]:
        name = function.qualified_name
        if len(args) != len(function.parameters):
            raise ExecutionError(f"{name} expects {len(function.parameters)} arguments, got {len(args)}")
        if function.module not in self.module_scopes:
            raise ExecutionError(f"module {function.module} is not running")
        frame = Scope(parent=self.module_scopes[function.module], name=name)
        for param, arg in zip(function.parameters, args):
            bound = ValueExpression(convert_value(arg, param.declared_type))
            frame.declare(param.name, Variable(param.declared_type, param.name, bound))
        self.frames.append(frame)
        if self.debug_level >= 2:
            self.debug(f"call {name} depth={len(self.frames)}")
        result = None
        try:
            try:
                self.execute_chain(function.child)
            except ReturnSignal as signal:
                result = signal.value
            except ExecutionError:
                # raised by a nested call
                raise
            except SeminterpError as e:
                raise ExecutionError(f"function {name} failed: {e}", cause=e) from e
            except RecursionError as e:
                raise ExecutionError(f"function {name} failed: call depth exceeded", cause=e) from e
            if function.return_type is None:
                return None
            if result is None:
                raise ExecutionError(f"function {name} finished without return")
            try:
                return convert_value(result, function.return_type)
            except TypeConversionError as e:
                raise ExecutionError(f"function {name} returned a bad value: {e}", cause=e) from e
        finally:
            frame.clear()
            self.frames.pop()


def run_program(source: str, debug_level: int = 0, input_source: Any = None,
                output_sink: Any = None) -> Interpreter:
    """Convenience function to parse and run a program from source text."""
    tree = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level, input_source=input_source,
                              output_sink=output_sink)
    interpreter.run(tree)
    return interpreter


def run_file(file_path: str, debug_level: int = 0) -> Interpreter:
    """Parse and run a program file, returning the interpreter instance."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)

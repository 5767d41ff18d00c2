"""
Tree-walking evaluator for Nova.

`Evaluator.evaluate` dispatches on the node type through a handler table built
once per evaluator. Every call of a Nova function counts towards the call
depth, so runaway recursion in a Nova program is reported as a
`RecursionLimitError` long before the host stack is exhausted. When a step
budget is configured, every evaluated node counts towards it.

Expression nesting is bounded by the parser, except for left-deep chains of
binary operators, which `_eval_binary` walks without recursion.
"""

import logging
import math
import operator
from typing import List, Optional

from nova.config import (
    COMPARISON_OPERATORS,
    EQUALITY_OPERATORS,
    FRAMES_PER_DEPTH,
    FRAMES_PER_EVAL_NESTING,
    LOGICAL_OPERATORS,
    InterpreterConfig,
)
from nova.exceptions import ErrorCode, InternalInterpreterError, NovaRuntimeError
from nova.parser.core.classes import *
from nova.utils import recursion_headroom

from .environment import Environment
from .values import NUMERIC_TYPES, Builtin, Function, Value, type_name

logger = logging.getLogger(__name__)

COMPARISONS = {"<": operator.lt, "<=": operator.le, ">": operator.gt, ">=": operator.ge}


class _ReturnSignal(Exception):
    """Unwinds the evaluation of a function body when a `return` statement runs."""

    def __init__(self, value: Value):
        self.value = value
        super().__init__()


def _article(kind: str) -> str:
    return "an" if kind[0] in "aeiou" else "a"


def _type_mismatch(span: Optional[Span], details: str) -> NovaRuntimeError:
    return NovaRuntimeError(ErrorCode.TYPE_MISMATCH, span=span, details=details)


def _truncated_division(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


class Evaluator:
    def __init__(self, config: Optional[InterpreterConfig] = None):
        self.config = config or InterpreterConfig()
        self.depth = 0
        self.steps = 0
        self._handlers = {
            Program: self._eval_program,
            IntegerLiteral: self._eval_literal,
            FloatLiteral: self._eval_literal,
            StringLiteral: self._eval_literal,
            BooleanLiteral: self._eval_literal,
            Identifier: self._eval_identifier,
            BinaryOperation: self._eval_binary,
            UnaryOperation: self._eval_unary,
            Call: self._eval_call,
            FunctionLiteral: self._eval_function_literal,
            IfExpression: self._eval_if,
            Block: self._eval_block,
            Assignment: self._eval_assignment,
            LetStatement: self._eval_let,
            FunctionDeclaration: self._eval_function_declaration,
            ReturnStatement: self._eval_return,
            ExpressionStatement: self._eval_expression_statement,
        }

    def run_program(self, program: Program, environment: Environment) -> Value:
        """
        Evaluates a whole program directly in `environment` (its global scope).
        A top-level `return` ends the program with its value.
        """
        self.steps = 0
        frames = self.config.max_depth * FRAMES_PER_DEPTH + self.config.max_nesting * FRAMES_PER_EVAL_NESTING
        with recursion_headroom(frames):
            try:
                return self.evaluate(program, environment)
            except _ReturnSignal as signal:
                return signal.value
            except RecursionError as e:
                raise NovaRuntimeError(ErrorCode.RECURSION_LIMIT, limit=self.config.max_depth) from e

    def evaluate(self, node: Node, env: Environment) -> Value:
        self._count_step(node)
        handler = self._handlers.get(type(node))
        if handler is None:
            raise InternalInterpreterError(f"No evaluation rule for node type '{type(node).__name__}'.")
        return handler(node, env)

    def _count_step(self, node: Node) -> None:
        if self.config.max_steps is None:
            return
        self.steps += 1
        if self.steps > self.config.max_steps:
            raise NovaRuntimeError(ErrorCode.STEP_LIMIT, span=node.span, limit=self.config.max_steps)

    def call(self, function: Value, arguments: List[Value], span: Optional[Span] = None) -> Value:
        """Applies a function value to already evaluated arguments."""
        if isinstance(function, Builtin):
            if function.arity is not None and len(arguments) != function.arity:
                raise NovaRuntimeError(ErrorCode.ARITY_MISMATCH, span=span, name=function.name, expected=function.arity, provided=len(arguments))
            return function.implementation(arguments, span)

        if not isinstance(function, Function):
            raise NovaRuntimeError(ErrorCode.NOT_CALLABLE, span=span, provided=type_name(function))
        if len(arguments) != len(function.parameters):
            raise NovaRuntimeError(
                ErrorCode.ARITY_MISMATCH,
                span=span,
                name=function.display_name,
                expected=len(function.parameters),
                provided=len(arguments),
            )

        self.depth += 1
        try:
            if self.depth > self.config.max_depth:
                raise NovaRuntimeError(ErrorCode.RECURSION_LIMIT, span=span, limit=self.config.max_depth)

            # The call scope hangs off the captured scope, not the caller's: lexical scoping.
            scope = function.closure.child()
            for parameter, argument in zip(function.parameters, arguments):
                scope.define(parameter.name, argument, mutable=parameter.mutable, span=parameter.span)

            try:
                return self.evaluate(function.body, scope)
            except _ReturnSignal as signal:
                return signal.value
        finally:
            self.depth -= 1

    # --- Sequences ---

    def _eval_sequence(self, statements: List[Statement], tail: Optional[Expression], env: Environment) -> Value:
        for statement in statements:
            self.evaluate(statement, env)
        if tail is None:
            return None
        return self.evaluate(tail, env)

    def _eval_program(self, node: Program, env: Environment) -> Value:
        return self._eval_sequence(node.statements, node.tail, env)

    def _eval_block(self, node: Block, env: Environment) -> Value:
        return self._eval_sequence(node.statements, node.tail, env.child())

    # --- Statements ---

    def _eval_let(self, node: LetStatement, env: Environment) -> Value:
        value = self.evaluate(node.value, env)
        env.define(node.name, value, mutable=node.mutable, span=node.span)
        return None

    def _eval_function_declaration(self, node: FunctionDeclaration, env: Environment) -> Value:
        function = self._make_function(node.function, env, name=node.name)
        env.define(node.name, function, mutable=False, span=node.span)
        return None

    def _eval_return(self, node: ReturnStatement, env: Environment) -> Value:
        value = None if node.value is None else self.evaluate(node.value, env)
        raise _ReturnSignal(value)

    def _eval_expression_statement(self, node: ExpressionStatement, env: Environment) -> Value:
        self.evaluate(node.expression, env)
        return None

    # --- Expressions ---

    def _eval_literal(self, node, env: Environment) -> Value:
        return node.value

    def _eval_identifier(self, node: Identifier, env: Environment) -> Value:
        return env.get(node.name, span=node.span)

    def _eval_assignment(self, node: Assignment, env: Environment) -> Value:
        value = self.evaluate(node.value, env)
        env.assign(node.target.name, value, span=node.span)
        return value

    def _make_function(self, node: FunctionLiteral, env: Environment, name: Optional[str] = None) -> Function:
        function = Function(parameters=node.parameters, body=node.body, closure=env, name=name)
        logger.debug("Closure created: name=%s, params=(%s), scope_id=%s", function.display_name, ", ".join(p.name for p in node.parameters), id(env))
        return function

    def _eval_function_literal(self, node: FunctionLiteral, env: Environment) -> Value:
        return self._make_function(node, env)

    def _eval_call(self, node: Call, env: Environment) -> Value:
        callee = self.evaluate(node.callee, env)
        if not isinstance(callee, (Function, Builtin)):
            raise NovaRuntimeError(ErrorCode.NOT_CALLABLE, span=node.callee.span, provided=type_name(callee))
        arguments = [self.evaluate(argument, env) for argument in node.arguments]
        return self.call(callee, arguments, span=node.span)

    def _eval_if(self, node: IfExpression, env: Environment) -> Value:
        condition = self.evaluate(node.condition, env)
        if type_name(condition) != "bool":
            kind = type_name(condition)
            raise _type_mismatch(node.condition.span, f"The condition of an 'if' expression must be a 'bool', but got {_article(kind)} '{kind}'.")
        if condition:
            return self.evaluate(node.then_branch, env)
        if node.else_branch is not None:
            return self.evaluate(node.else_branch, env)
        return None

    def _eval_unary(self, node: UnaryOperation, env: Environment) -> Value:
        operand = self.evaluate(node.operand, env)
        kind = type_name(operand)
        if node.operator == "-" and kind in NUMERIC_TYPES:
            return -operand
        if node.operator == "!" and kind == "bool":
            return not operand
        raise _type_mismatch(node.span, f"The '{node.operator}' operator cannot be applied to {_article(kind)} '{kind}'.")

    def _eval_binary(self, node: BinaryOperation, env: Environment) -> Value:
        # spine[0] is `node`; spine[-1] is the innermost operation of the left-deep chain.
        spine = [node]
        while isinstance(spine[-1].left, BinaryOperation):
            self._count_step(spine[-1].left)
            spine.append(spine[-1].left)

        value = self.evaluate(spine[-1].left, env)
        for operation in reversed(spine):
            if operation.operator in LOGICAL_OPERATORS:
                value = self._apply_logical(operation, value, env)
            else:
                right = self.evaluate(operation.right, env)
                value = self.apply_binary(operation.operator, value, right, operation.span)
        return value

    def _require_bool(self, op: str, value: Value, span: Span) -> bool:
        kind = type_name(value)
        if kind != "bool":
            raise _type_mismatch(span, f"The '{op}' operator can only be used with 'bool' values, but got {_article(kind)} '{kind}'.")
        return value

    def _apply_logical(self, node: BinaryOperation, left: Value, env: Environment) -> Value:
        left = self._require_bool(node.operator, left, node.left.span)
        # Short-circuit: the right operand is only evaluated when it decides the result.
        if node.operator == "&&" and not left:
            return False
        if node.operator == "||" and left:
            return True
        return self._require_bool(node.operator, self.evaluate(node.right, env), node.right.span)

    def apply_binary(self, op: str, left: Value, right: Value, span: Optional[Span] = None) -> Value:
        """Applies a non-short-circuit binary operator to two evaluated operands."""
        left_type, right_type = type_name(left), type_name(right)

        if op in EQUALITY_OPERATORS:
            if left_type != right_type:
                raise _type_mismatch(span, f"The '{op}' operator cannot compare {_article(left_type)} '{left_type}' and {_article(right_type)} '{right_type}'.")
            equal = left is right if left_type == "function" else left == right
            return equal if op == "==" else not equal

        if op in COMPARISON_OPERATORS:
            if left_type != right_type or left_type not in ("int", "float", "string"):
                raise _type_mismatch(span, f"The '{op}' operator cannot compare {_article(left_type)} '{left_type}' and {_article(right_type)} '{right_type}'.")
            return COMPARISONS[op](left, right)

        if op == "+" and left_type == right_type == "string":
            return left + right

        if left_type != right_type or left_type not in NUMERIC_TYPES:
            details = f"The '{op}' operator cannot be applied to {_article(left_type)} '{left_type}' and {_article(right_type)} '{right_type}'."
            if {left_type, right_type} == set(NUMERIC_TYPES):
                details += " Numbers are never converted implicitly; use int() or float()."
            raise _type_mismatch(span, details)

        if left_type == "int":
            return self._integer_arithmetic(op, left, right, span)
        return self._float_arithmetic(op, left, right)

    def _integer_arithmetic(self, op: str, left: int, right: int, span: Optional[Span]) -> int:
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if right == 0:
            raise NovaRuntimeError(ErrorCode.DIVISION_BY_ZERO, span=span, operation="division" if op == "/" else "modulo")
        if op == "/":
            return _truncated_division(left, right)
        if op == "%":
            return left - right * _truncated_division(left, right)
        raise InternalInterpreterError(f"Unknown arithmetic operator '{op}'.")

    def _float_arithmetic(self, op: str, left: float, right: float) -> float:
        """IEEE-754 semantics: division by zero yields inf or nan instead of failing."""
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            if right == 0.0:
                if left == 0.0 or math.isnan(left):
                    return math.nan
                return math.copysign(math.inf, left) * math.copysign(1.0, right)
            return left / right
        if op == "%":
            if right == 0.0 or math.isinf(left):
                return math.nan
            return math.fmod(left, right)
        raise InternalInterpreterError(f"Unknown arithmetic operator '{op}'.")

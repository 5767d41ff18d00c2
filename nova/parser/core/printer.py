"""
Deterministic pretty-printer turning an AST back into Nova source.

Binary and unary operations and assignments are fully parenthesized, so
parsing the printed text yields a structurally equal AST whatever the
precedence of the operators involved.
"""

import math
from typing import List

from nova.config import STRING_ESCAPES
from nova.utils import int_to_text

from .classes import *

_ESCAPES_BY_CHAR = {char: "\\" + name for name, char in STRING_ESCAPES.items()}


def _format_string(value: str) -> str:
    return '"' + "".join(_ESCAPES_BY_CHAR.get(char, char) for char in value) + '"'


def _format_float(value: float) -> str:
    if math.isinf(value):
        # The largest literal the lexer reads as infinity.
        return "1e999"
    return repr(value)


def format_expression(node: Expression) -> str:
    if isinstance(node, BooleanLiteral):
        return "true" if node.value else "false"
    if isinstance(node, IntegerLiteral):
        return int_to_text(node.value)
    if isinstance(node, FloatLiteral):
        return _format_float(node.value)
    if isinstance(node, StringLiteral):
        return _format_string(node.value)
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, BinaryOperation):
        return f"({format_expression(node.left)} {node.operator} {format_expression(node.right)})"
    if isinstance(node, UnaryOperation):
        return f"({node.operator}{format_expression(node.operand)})"
    if isinstance(node, Assignment):
        return f"({node.target.name} = {format_expression(node.value)})"
    if isinstance(node, Call):
        arguments = ", ".join(format_expression(argument) for argument in node.arguments)
        return f"{format_expression(node.callee)}({arguments})"
    if isinstance(node, FunctionLiteral):
        return "fn" + _format_function_rest(node)
    if isinstance(node, IfExpression):
        return _format_if(node)
    if isinstance(node, Block):
        return _format_block(node)
    raise TypeError(f"Cannot format node of type '{type(node).__name__}'.")


def _format_function_rest(node: FunctionLiteral) -> str:
    parameters = ", ".join(("mut " if p.mutable else "") + p.name for p in node.parameters)
    return f"({parameters}) {_format_block(node.body)}"


def _format_if(node: IfExpression) -> str:
    text = f"if {format_expression(node.condition)} {_format_block(node.then_branch)}"
    if isinstance(node.else_branch, IfExpression):
        text += " else " + _format_if(node.else_branch)
    elif node.else_branch is not None:
        text += " else " + _format_block(node.else_branch)
    return text


def _format_items(statements: List[Statement], tail: Optional[Expression]) -> List[str]:
    items = [format_statement(statement) for statement in statements]
    if tail is not None:
        items.append(format_expression(tail))
    return items


def _format_block(node: Block) -> str:
    items = _format_items(node.statements, node.tail)
    if not items:
        return "{ }"
    return "{ " + " ".join(items) + " }"


def format_statement(node: Statement) -> str:
    if isinstance(node, LetStatement):
        keyword = "let mut" if node.mutable else "let"
        return f"{keyword} {node.name} = {format_expression(node.value)};"
    if isinstance(node, FunctionDeclaration):
        return f"fn {node.name}{_format_function_rest(node.function)}"
    if isinstance(node, ReturnStatement):
        if node.value is None:
            return "return;"
        return f"return {format_expression(node.value)};"
    if isinstance(node, ExpressionStatement):
        return format_expression(node.expression) + ";"
    raise TypeError(f"Cannot format node of type '{type(node).__name__}'.")


def format_program(program: Program) -> str:
    """Prints one statement per line, with the tail expression (if any) last."""
    return "\n".join(_format_items(program.statements, program.tail))

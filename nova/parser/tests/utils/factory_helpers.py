from typing import List, Optional, Tuple, Union

from nova.parser.core.classes import *


def get_span(s_line: int = 1, s_col: int = 1, e_line: int = 1, e_col: int = 1):
    return Span(s_line=s_line, s_col=s_col, e_line=e_line, e_col=e_col)


def get_identifier(name: str):
    return Identifier(span=get_span(), name=name)


def get_integer_literal(value: int):
    return IntegerLiteral(span=get_span(), value=value)


def get_float_literal(value: float):
    return FloatLiteral(span=get_span(), value=value)


def get_string_literal(value: str):
    return StringLiteral(span=get_span(), value=value)


def get_boolean_literal(value: bool):
    return BooleanLiteral(span=get_span(), value=value)


def get_binary(operator: str, left: Expression, right: Expression):
    return BinaryOperation(span=get_span(), operator=operator, left=left, right=right)


def get_unary(operator: str, operand: Expression):
    return UnaryOperation(span=get_span(), operator=operator, operand=operand)


def get_call(callee: Union[str, Expression], arguments: Optional[List[Expression]] = None):
    if isinstance(callee, str):
        callee = get_identifier(callee)
    return Call(span=get_span(), callee=callee, arguments=arguments or [])


def get_assignment(target: str, value: Expression):
    return Assignment(span=get_span(), target=get_identifier(target), value=value)


def get_block(statements: Optional[List[Statement]] = None, tail: Optional[Expression] = None):
    return Block(span=get_span(), statements=statements or [], tail=tail)


def get_param(name: str, mutable: bool = False):
    return Parameter(span=get_span(), name=name, mutable=mutable)


def get_function_literal(params: Optional[List[Union[str, Tuple[str, bool]]]] = None, body: Optional[Block] = None):
    """
    A flexible factory to build FunctionLiteral nodes for tests.

    Args:
        params: parameter names, or (name, mutable) pairs for `mut` parameters.
        body: the body block; an empty block when omitted.
    """
    parameters = []
    for param in params or []:
        if isinstance(param, tuple):
            parameters.append(get_param(*param))
        else:
            parameters.append(get_param(param))
    return FunctionLiteral(span=get_span(), parameters=parameters, body=body or get_block())


def get_if(condition: Expression, then_branch: Block, else_branch: Optional[Union[Block, IfExpression]] = None):
    return IfExpression(span=get_span(), condition=condition, then_branch=then_branch, else_branch=else_branch)


def get_let(name: str, value: Expression, mutable: bool = False):
    return LetStatement(span=get_span(), name=name, mutable=mutable, value=value)


def get_function_declaration(name: str, function: FunctionLiteral):
    return FunctionDeclaration(span=get_span(), name=name, function=function)


def get_return(value: Optional[Expression] = None):
    return ReturnStatement(span=get_span(), value=value)


def get_expression_statement(expression: Expression):
    return ExpressionStatement(span=get_span(), expression=expression)


def get_program(statements: Optional[List[Statement]] = None, tail: Optional[Expression] = None):
    return Program(span=get_span(), statements=statements or [], tail=tail)

"""
Defines the formal data structures (contracts) for the Abstract Syntax Tree (AST)
produced by the parser stage.

Each node is a pydantic model and includes a `Span` object to track its
location in the source code, enabling precise error reporting during evaluation.
Every node owns its children exclusively: the AST is a strict tree.
"""

from typing import List, Optional, Union

from pydantic import BaseModel

# --- Core Data Structures ---


class Span(BaseModel):
    """Represents a location in the source code for precise error reporting."""

    s_line: int
    s_col: int
    e_line: int
    e_col: int


class ASTNode(BaseModel):
    """A base class for all AST nodes, ensuring they have a span."""

    span: Span


# A generic type hint for any expression node
Expression = Union[
    "IntegerLiteral",
    "FloatLiteral",
    "StringLiteral",
    "BooleanLiteral",
    "Identifier",
    "BinaryOperation",
    "UnaryOperation",
    "Call",
    "FunctionLiteral",
    "IfExpression",
    "Block",
    "Assignment",
]

# A generic type hint for any statement node
Statement = Union["LetStatement", "FunctionDeclaration", "ReturnStatement", "ExpressionStatement"]


# --- Literals and Identifiers ---


class IntegerLiteral(ASTNode):
    value: int


class FloatLiteral(ASTNode):
    value: float


class StringLiteral(ASTNode):
    value: str


class BooleanLiteral(ASTNode):
    value: bool


class Identifier(ASTNode):
    name: str


# --- Expressions ---


class BinaryOperation(ASTNode):
    operator: str
    left: Expression
    right: Expression


class UnaryOperation(ASTNode):
    operator: str
    operand: Expression


class Call(ASTNode):
    callee: Expression
    arguments: List[Expression]


class Parameter(ASTNode):
    name: str
    mutable: bool = False


class Block(ASTNode):
    """
    A brace-delimited sequence of statements. When the last item is an
    expression without a terminating ';' it is stored as the `tail` and
    supplies the block's value.
    """

    statements: List[Statement]
    tail: Optional[Expression] = None


class FunctionLiteral(ASTNode):
    parameters: List[Parameter]
    body: Block


class IfExpression(ASTNode):
    condition: Expression
    then_branch: Block
    # Either a plain block or a nested `if` for `else if` chains.
    else_branch: Optional[Union[Block, "IfExpression"]] = None


class Assignment(ASTNode):
    target: Identifier
    value: Expression


# --- Statements ---


class LetStatement(ASTNode):
    name: str
    mutable: bool = False
    value: Expression


class FunctionDeclaration(ASTNode):
    """`fn name(params) { ... }`: an immutable binding holding a function."""

    name: str
    function: FunctionLiteral


class ReturnStatement(ASTNode):
    value: Optional[Expression] = None


class ExpressionStatement(ASTNode):
    expression: Expression


# --- Top-level Structures ---


class Program(ASTNode):
    """The root of the AST: the top-level statements of one source text."""

    statements: List[Statement]
    tail: Optional[Expression] = None


# A generic type hint for any node in the AST
Node = Union[ASTNode, Program]

for _model in (
    BinaryOperation,
    UnaryOperation,
    Call,
    Block,
    FunctionLiteral,
    IfExpression,
    Assignment,
    LetStatement,
    FunctionDeclaration,
    ReturnStatement,
    ExpressionStatement,
    Program,
):
    _model.model_rebuild()

"""
Custom exception types for the Nova interpreter.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from nova.parser.core.classes import Span


class ErrorCode(Enum):

    # --- Lexical Errors ---
    UNTERMINATED_STRING = "Lex Error: Unterminated string literal."
    INVALID_CHARACTER = "Lex Error: Invalid character '{char}' found."
    INVALID_NUMERIC_LITERAL = "Lex Error: '{lexeme}' is not a valid numeric literal."

    # --- Syntax Errors ---
    # The 'details' are generated by the parser (e.g. "Expected ';' but found 'x'").
    UNEXPECTED_TOKEN = "Syntax Error: Invalid syntax. {details}"
    UNEXPECTED_END_OF_INPUT = "Syntax Error: Expected {expected} but reached the end of the input."
    NESTING_LIMIT = "Syntax Error: Expressions are nested more than {limit} levels deep."

    # --- Runtime Errors ---
    UNBOUND_NAME = "Runtime Error: Name '{name}' is not defined."
    DUPLICATE_BINDING = "Runtime Error: Name '{name}' is already defined in this scope."
    IMMUTABLE_ASSIGNMENT = "Runtime Error: Cannot assign twice to immutable binding '{name}'. Declare it with 'let mut' to allow reassignment."
    TYPE_MISMATCH = "Runtime Error: {details}"
    DIVISION_BY_ZERO = "Runtime Error: Integer {operation} by zero."
    NOT_CALLABLE = "Runtime Error: A value of type '{provided}' is not callable."
    ARITY_MISMATCH = "Runtime Error: Function '{name}' expects {expected} argument(s), but got {provided}."
    RECURSION_LIMIT = "Runtime Error: Maximum call depth of {limit} exceeded."
    STEP_LIMIT = "Runtime Error: Maximum number of evaluation steps ({limit}) exceeded."


# Sub-kind names reported to collaborators in a Diagnostic.
ERROR_KIND_NAMES = {
    ErrorCode.UNTERMINATED_STRING: "UnterminatedString",
    ErrorCode.INVALID_CHARACTER: "InvalidCharacter",
    ErrorCode.INVALID_NUMERIC_LITERAL: "InvalidNumericLiteral",
    ErrorCode.UNEXPECTED_TOKEN: "UnexpectedToken",
    ErrorCode.UNEXPECTED_END_OF_INPUT: "UnexpectedEndOfInput",
    ErrorCode.NESTING_LIMIT: "NestingLimit",
    ErrorCode.UNBOUND_NAME: "UnboundNameError",
    ErrorCode.DUPLICATE_BINDING: "DuplicateBindingError",
    ErrorCode.IMMUTABLE_ASSIGNMENT: "ImmutableAssignmentError",
    ErrorCode.TYPE_MISMATCH: "TypeMismatchError",
    ErrorCode.DIVISION_BY_ZERO: "DivisionByZeroError",
    ErrorCode.NOT_CALLABLE: "NotCallableError",
    ErrorCode.ARITY_MISMATCH: "ArityMismatchError",
    ErrorCode.RECURSION_LIMIT: "RecursionLimitError",
    ErrorCode.STEP_LIMIT: "StepLimitError",
}


class NovaError(Exception):
    """Base class of every error the interpreter reports to its caller."""

    kind = "NovaError"

    def __init__(
        self,
        code: ErrorCode,
        span: Optional["Span"] = None,
        **kwargs,
    ):
        self.code = code
        self.span = span
        self.details = kwargs

        # The format string (e.g. "Name '{name}' is not defined.") is populated
        # with any extra data it needs from kwargs.
        self.core_message = code.value.format(**kwargs)

        if span:
            self.message = f"Error at line {span.s_line}, column {span.s_col}:\n{self.core_message}"
        else:
            self.message = self.core_message

        super().__init__(self.message)

    @property
    def sub_kind(self) -> str:
        return ERROR_KIND_NAMES[self.code]


class LexError(NovaError):
    kind = "LexError"


class ParseError(NovaError):
    kind = "ParseError"


class NovaRuntimeError(NovaError):
    kind = "RuntimeError"


class InternalInterpreterError(Exception):
    def __init__(self, message: str):
        super().__init__(message)

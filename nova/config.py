"""
Static configuration data for the Nova interpreter.
This includes the keyword set, operator tables, the precedence table and the
run-time limits accepted by `run`.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, PositiveInt

KEYWORDS = frozenset({"let", "mut", "fn", "if", "else", "return", "true", "false", "unsafe", "zone"})

# Reserved for future use: lexed as keywords, rejected by the parser.
RESERVED_KEYWORDS = frozenset({"unsafe", "zone"})

# Longest operators first so the lexer can match greedily.
OPERATORS = ("==", "!=", "<=", ">=", "&&", "||", "->", "=", "+", "-", "*", "/", "%", "<", ">", "!")
PUNCTUATION = frozenset({"(", ")", "{", "}", ",", ";"})

STRING_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "0": "\0"}

# Binding power of every binary operator, lowest first. Assignment (level 1)
# is handled separately by the parser because it is right-associative.
ASSIGNMENT_PRECEDENCE = 1
BINARY_PRECEDENCE = {
    "||": 2,
    "&&": 3,
    "==": 4,
    "!=": 4,
    "<": 5,
    "<=": 5,
    ">": 5,
    ">=": 5,
    "+": 6,
    "-": 6,
    "*": 7,
    "/": 7,
    "%": 7,
}
UNARY_PRECEDENCE = 8
UNARY_OPERATORS = frozenset({"-", "!"})

ARITHMETIC_OPERATORS = frozenset({"+", "-", "*", "/", "%"})
COMPARISON_OPERATORS = frozenset({"<", "<=", ">", ">="})
EQUALITY_OPERATORS = frozenset({"==", "!="})
LOGICAL_OPERATORS = frozenset({"&&", "||"})

FRIENDLY_TOKEN_NAMES = {
    "IDENTIFIER": "a name",
    "INTEGER": "an integer",
    "FLOAT": "a float",
    "STRING": "a string in double quotes",
    "EOF": "the end of the input",
    "=": "an equals sign '='",
    ";": "a semicolon ';'",
    ",": "a comma ','",
    "(": "an opening parenthesis '('",
    ")": "a closing parenthesis ')'",
    "{": "an opening brace '{'",
    "}": "a closing brace '}'",
}

DEFAULT_MAX_DEPTH = 1000
DEFAULT_MAX_NESTING = 256

# Host frames consumed per level of Nova call depth and per level of expression
# nesting (evaluating and parsing), used to size the host recursion limit.
FRAMES_PER_DEPTH = 16
FRAMES_PER_EVAL_NESTING = 4
FRAMES_PER_NESTING = 12


class InterpreterConfig(BaseModel):
    """Limits that bound a single run."""

    model_config = ConfigDict(frozen=True)

    max_depth: PositiveInt = DEFAULT_MAX_DEPTH
    max_steps: Optional[PositiveInt] = None
    max_nesting: PositiveInt = DEFAULT_MAX_NESTING

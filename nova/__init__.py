"""Nova: lexer, parser and tree-walking evaluator for a small expression-oriented language."""

from nova.config import InterpreterConfig
from nova.exceptions import ErrorCode, LexError, NovaError, NovaRuntimeError, ParseError
from nova.interpreter import Diagnostic, InterpreterPipeline, RunResult, Session, interpret, run
from nova.parser import Lexer, format_program, parse_program, tokenize
from nova.runtime import format_value

__version__ = "0.2.0"

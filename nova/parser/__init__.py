from .core.lexer import Lexer, tokenize
from .core.parser import parse_program
from .core.printer import format_program

"""
Lexical analysis for Nova.

`Lexer` is a restartable iterable: every iteration scans the source from the
start with a fresh `TokenStream`, so lexing the same text twice always yields
the same tokens. Tokens are produced lazily, one per `next()` call, and the
stream always ends with a single EOF token.
"""

from typing import Iterator, List

from nova.config import KEYWORDS, OPERATORS, PUNCTUATION, STRING_ESCAPES
from nova.exceptions import ErrorCode, LexError
from nova.utils import text_to_int

from .classes import Span
from .tokens import Token, TokenKind

DIGITS = "0123456789"
IDENTIFIER_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
IDENTIFIER_PART = IDENTIFIER_START | frozenset(DIGITS)


def _is_identifier_start(char: str) -> bool:
    return char in IDENTIFIER_START


def _is_identifier_part(char: str) -> bool:
    return char in IDENTIFIER_PART


class TokenStream:
    """A single pass over the source text. Holds the scanning cursor."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1
        self.finished = False

    def __iter__(self) -> "TokenStream":
        return self

    def __next__(self) -> Token:
        if self.finished:
            raise StopIteration
        self._skip_trivia()

        s_line, s_col, start = self.line, self.col, self.pos
        char = self._peek()

        if not char:
            self.finished = True
            return Token(kind=TokenKind.EOF, lexeme="", span=self._span_from(s_line, s_col))

        if char in DIGITS:
            return self._read_number()
        if _is_identifier_start(char):
            return self._read_identifier()
        if char == '"':
            return self._read_string()

        for op in OPERATORS:
            if self.source.startswith(op, self.pos):
                self._advance(len(op))
                return Token(kind=TokenKind.OPERATOR, lexeme=op, span=self._span_from(s_line, s_col))

        if char in PUNCTUATION:
            self._advance()
            return Token(kind=TokenKind.PUNCTUATION, lexeme=char, span=self._span_from(s_line, s_col))

        self._advance()
        raise LexError(ErrorCode.INVALID_CHARACTER, span=self._span_from(s_line, s_col), char=self.source[start:self.pos])

    # --- Cursor helpers ---

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index >= len(self.source):
            return ""
        return self.source[index]

    def _advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self.source[self.pos] == "\n":
                self.line += 1
                self.col = 1
            else:
                self.col += 1
            self.pos += 1

    def _span_from(self, s_line: int, s_col: int) -> Span:
        return Span(s_line=s_line, s_col=s_col, e_line=self.line, e_col=self.col)

    def _skip_trivia(self) -> None:
        """Skips whitespace, `//` line comments and `/* */` block comments."""
        while True:
            char = self._peek()
            if char in (" ", "\t", "\r", "\n"):
                self._advance()
            elif char == "/" and self._peek(1) == "/":
                while self._peek() and self._peek() != "\n":
                    self._advance()
            elif char == "/" and self._peek(1) == "*":
                self._advance(2)
                while self._peek() and not (self._peek() == "*" and self._peek(1) == "/"):
                    self._advance()
                if self._peek():
                    self._advance(2)
            else:
                return

    # --- Token readers ---

    def _read_identifier(self) -> Token:
        s_line, s_col, start = self.line, self.col, self.pos
        while self._peek() and _is_identifier_part(self._peek()):
            self._advance()
        lexeme = self.source[start:self.pos]
        kind = TokenKind.KEYWORD if lexeme in KEYWORDS else TokenKind.IDENTIFIER
        return Token(kind=kind, lexeme=lexeme, span=self._span_from(s_line, s_col))

    def _read_digits(self) -> bool:
        """Consumes `digits ('_' digits)*`. Returns False on a misplaced separator."""
        if self._peek() not in DIGITS or not self._peek():
            return False
        while self._peek():
            char = self._peek()
            if char in DIGITS:
                self._advance()
            elif char == "_":
                if not self._peek(1) or self._peek(1) not in DIGITS:
                    return False
                self._advance()
            else:
                break
        return True

    def _invalid_number(self, s_line: int, s_col: int, start: int) -> LexError:
        # Swallow the rest of the malformed literal so the message shows all of it.
        while self._peek() and (_is_identifier_part(self._peek()) or self._peek() == "."):
            self._advance()
        lexeme = self.source[start:self.pos]
        return LexError(ErrorCode.INVALID_NUMERIC_LITERAL, span=self._span_from(s_line, s_col), lexeme=lexeme)

    def _read_number(self) -> Token:
        s_line, s_col, start = self.line, self.col, self.pos
        is_float = False

        if not self._read_digits():
            raise self._invalid_number(s_line, s_col, start)

        if self._peek() == ".":
            if not self._peek(1) or self._peek(1) not in DIGITS:
                raise self._invalid_number(s_line, s_col, start)
            self._advance()
            self._read_digits()
            is_float = True

        if self._peek() in ("e", "E"):
            self._advance()
            if self._peek() in ("+", "-"):
                self._advance()
            if not self._read_digits():
                raise self._invalid_number(s_line, s_col, start)
            is_float = True

        if self._peek() and (_is_identifier_part(self._peek()) or self._peek() == "."):
            raise self._invalid_number(s_line, s_col, start)

        lexeme = self.source[start:self.pos]
        text = lexeme.replace("_", "")
        span = self._span_from(s_line, s_col)
        if is_float:
            return Token(kind=TokenKind.FLOAT, lexeme=lexeme, value=float(text), span=span)
        return Token(kind=TokenKind.INTEGER, lexeme=lexeme, value=text_to_int(text), span=span)

    def _read_string(self) -> Token:
        s_line, s_col, start = self.line, self.col, self.pos
        self._advance()  # Skip opening quote
        chars: List[str] = []
        while True:
            char = self._peek()
            if not char:
                raise LexError(ErrorCode.UNTERMINATED_STRING, span=self._span_from(s_line, s_col))
            if char == '"':
                self._advance()
                break
            if char == "\\":
                e_line, e_col = self.line, self.col
                self._advance()
                escaped = self._peek()
                if not escaped:
                    raise LexError(ErrorCode.UNTERMINATED_STRING, span=self._span_from(s_line, s_col))
                self._advance()
                if escaped not in STRING_ESCAPES:
                    raise LexError(ErrorCode.INVALID_CHARACTER, span=self._span_from(e_line, e_col), char="\\" + escaped)
                chars.append(STRING_ESCAPES[escaped])
            else:
                chars.append(char)
                self._advance()

        lexeme = self.source[start:self.pos]
        return Token(kind=TokenKind.STRING, lexeme=lexeme, value="".join(chars), span=self._span_from(s_line, s_col))


class Lexer:
    """Restartable, lazy token sequence over a source text."""

    def __init__(self, source: str):
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        return TokenStream(self.source)


def tokenize(source: str) -> List[Token]:
    """Lexes the whole source eagerly. The last token is always EOF."""
    return list(Lexer(source))

"""Token model produced by the lexer."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from .classes import Span


class TokenKind(Enum):
    IDENTIFIER = "IDENTIFIER"
    KEYWORD = "KEYWORD"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    STRING = "STRING"
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"
    EOF = "EOF"


class Token(BaseModel):
    """A lexical unit. `lexeme` is the exact source text, `value` the decoded literal."""

    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    lexeme: str
    span: Span
    value: Optional[Union[int, float, str]] = None

    def is_symbol(self, symbol: str) -> bool:
        """True for the operator, punctuation or keyword spelled `symbol`."""
        return self.kind in (TokenKind.OPERATOR, TokenKind.PUNCTUATION, TokenKind.KEYWORD) and self.lexeme == symbol

    def describe(self) -> str:
        if self.kind == TokenKind.EOF:
            return "the end of the input"
        return f"'{self.lexeme}'"

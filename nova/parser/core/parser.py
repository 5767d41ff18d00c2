"""
Recursive-descent parser for Nova.

Binary operators are parsed by precedence climbing over `BINARY_PRECEDENCE`
(see nova/config.py for the full table). Assignment sits below every binary
operator and is right-associative; unary `-` and `!` bind tighter than any
binary operator; calls bind tightest of all.

The parser fails fast: the first problem raises a `ParseError` and no
recovery is attempted.
"""

from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from nova.config import (
    BINARY_PRECEDENCE,
    DEFAULT_MAX_NESTING,
    FRAMES_PER_NESTING,
    FRIENDLY_TOKEN_NAMES,
    RESERVED_KEYWORDS,
    UNARY_OPERATORS,
)
from nova.exceptions import ErrorCode, ParseError
from nova.utils import recursion_headroom

from .classes import *
from .lexer import Lexer
from .tokens import Token, TokenKind

LOWEST_BINARY_PRECEDENCE = min(BINARY_PRECEDENCE.values())


def _join(start: Span, end: Span) -> Span:
    """Creates a Span covering everything from `start` to `end`."""
    return Span(s_line=start.s_line, s_col=start.s_col, e_line=end.e_line, e_col=end.e_col)


class Parser:
    """
    Consumes a token sequence and builds a `Program`.
    The token source is pulled lazily with a small lookahead buffer, so lexing
    errors surface at the point the parser reaches them.
    """

    def __init__(self, tokens: Iterable[Token], max_nesting: int = DEFAULT_MAX_NESTING):
        self._tokens: Iterator[Token] = iter(tokens)
        self._buffer: List[Token] = []
        self.max_nesting = max_nesting
        self.nesting = 0

    # --- Token helpers ---

    def _peek(self, offset: int = 0) -> Token:
        while len(self._buffer) <= offset:
            if self._buffer and self._buffer[-1].kind == TokenKind.EOF:
                return self._buffer[-1]
            self._buffer.append(next(self._tokens))
        return self._buffer[offset]

    @property
    def current(self) -> Token:
        return self._peek()

    def _advance(self) -> Token:
        token = self._peek()
        if token.kind != TokenKind.EOF:
            self._buffer.pop(0)
        return token

    def _check(self, symbol: str) -> bool:
        return self.current.is_symbol(symbol)

    def _match(self, symbol: str) -> bool:
        if self._check(symbol):
            self._advance()
            return True
        return False

    def _error(self, expected: str, details: Optional[str] = None) -> ParseError:
        token = self.current
        if token.kind == TokenKind.EOF:
            return ParseError(ErrorCode.UNEXPECTED_END_OF_INPUT, span=token.span, expected=expected, token=token)
        if details is None:
            details = f"Expected {expected} but found {token.describe()}."
        return ParseError(ErrorCode.UNEXPECTED_TOKEN, span=token.span, details=details, expected=expected, token=token)

    def _expect(self, symbol: str) -> Token:
        if not self._check(symbol):
            raise self._error(FRIENDLY_TOKEN_NAMES.get(symbol, f"'{symbol}'"))
        return self._advance()

    def _expect_identifier(self) -> Token:
        token = self.current
        if token.kind == TokenKind.IDENTIFIER:
            return self._advance()
        if token.kind == TokenKind.KEYWORD:
            raise self._error("a name", details=f"Expected a name but found the keyword '{token.lexeme}'.")
        raise self._error(FRIENDLY_TOKEN_NAMES["IDENTIFIER"])

    @contextmanager
    def _nested(self):
        self.nesting += 1
        try:
            if self.nesting > self.max_nesting:
                raise ParseError(ErrorCode.NESTING_LIMIT, span=self.current.span, limit=self.max_nesting)
            yield
        finally:
            self.nesting -= 1

    # --- Statements ---

    def parse_program(self) -> Program:
        first = self.current
        statements, tail = self._parse_sequence(closing=None)
        end = self.current
        return Program(statements=statements, tail=tail, span=_join(first.span, end.span))

    def _at_sequence_end(self, closing: Optional[str]) -> bool:
        if self.current.kind == TokenKind.EOF:
            return True
        return closing is not None and self._check(closing)

    def _end_statement(self, closing: Optional[str]) -> None:
        """A statement ends with ';', which may be omitted right before the end of its block."""
        if self._match(";"):
            return
        if not self._at_sequence_end(closing):
            raise self._error(FRIENDLY_TOKEN_NAMES[";"])

    def _parse_sequence(self, closing: Optional[str]) -> Tuple[List[Statement], Optional[Expression]]:
        """
        Parses statements up to `closing` ('}' for blocks, None for the whole
        program). An expression left unterminated at the very end becomes the tail.
        """
        statements: List[Statement] = []
        tail: Optional[Expression] = None

        while not self._at_sequence_end(closing):
            if self._match(";"):
                continue
            if self._check("let"):
                statements.append(self._parse_let(closing))
                continue
            if self._check("return"):
                statements.append(self._parse_return(closing))
                continue
            if self._check("fn") and self._peek(1).kind == TokenKind.IDENTIFIER:
                statements.append(self._parse_function_declaration())
                continue

            expression = self._parse_expression()
            if self._match(";"):
                statements.append(ExpressionStatement(expression=expression, span=expression.span))
            elif self._at_sequence_end(closing):
                tail = expression
            elif isinstance(expression, (Block, IfExpression)):
                # Block-like expressions may stand as statements without ';'.
                statements.append(ExpressionStatement(expression=expression, span=expression.span))
            else:
                raise self._error(FRIENDLY_TOKEN_NAMES[";"])

        return statements, tail

    def _parse_let(self, closing: Optional[str]) -> LetStatement:
        let_token = self._advance()
        mutable = self._match("mut")
        name = self._expect_identifier()
        self._expect("=")
        value = self._parse_expression()
        self._end_statement(closing)
        return LetStatement(name=name.lexeme, mutable=mutable, value=value, span=_join(let_token.span, value.span))

    def _parse_return(self, closing: Optional[str]) -> ReturnStatement:
        return_token = self._advance()
        value = None
        span = return_token.span
        if not self._check(";") and not self._at_sequence_end(closing):
            value = self._parse_expression()
            span = _join(span, value.span)
        self._end_statement(closing)
        return ReturnStatement(value=value, span=span)

    def _parse_function_declaration(self) -> FunctionDeclaration:
        fn_token = self._advance()
        name = self._expect_identifier()
        function = self._parse_function_rest(fn_token)
        self._match(";")
        return FunctionDeclaration(name=name.lexeme, function=function, span=function.span)

    # --- Expressions ---

    def _parse_expression(self) -> Expression:
        with self._nested():
            return self._parse_assignment()

    def _parse_assignment(self) -> Expression:
        target = self._parse_binary(LOWEST_BINARY_PRECEDENCE)
        if not self._check("="):
            return target

        if not isinstance(target, Identifier):
            raise self._error("an assignable name", details="Invalid assignment target: only a name can be assigned to.")
        self._advance()
        value = self._parse_expression()
        return Assignment(target=target, value=value, span=_join(target.span, value.span))

    def _binary_precedence(self, token: Token) -> Optional[int]:
        if token.kind != TokenKind.OPERATOR:
            return None
        return BINARY_PRECEDENCE.get(token.lexeme)

    def _parse_binary(self, min_precedence: int) -> Expression:
        """Precedence climbing: every operator at or above `min_precedence` is left-associative."""
        left = self._parse_unary()
        while True:
            precedence = self._binary_precedence(self.current)
            if precedence is None or precedence < min_precedence:
                return left
            operator = self._advance()
            right = self._parse_binary(precedence + 1)
            left = BinaryOperation(operator=operator.lexeme, left=left, right=right, span=_join(left.span, right.span))

    def _parse_unary(self) -> Expression:
        token = self.current
        if token.kind == TokenKind.OPERATOR and token.lexeme in UNARY_OPERATORS:
            self._advance()
            with self._nested():
                operand = self._parse_unary()
            return UnaryOperation(operator=token.lexeme, operand=operand, span=_join(token.span, operand.span))
        return self._parse_call()

    def _parse_call(self) -> Expression:
        expression = self._parse_primary()
        while self._check("("):
            self._advance()
            arguments: List[Expression] = []
            while not self._check(")"):
                arguments.append(self._parse_expression())
                if not self._match(","):
                    break
            close = self._expect(")")
            expression = Call(callee=expression, arguments=arguments, span=_join(expression.span, close.span))
        return expression

    def _parse_primary(self) -> Expression:
        token = self.current

        if token.kind == TokenKind.INTEGER:
            self._advance()
            return IntegerLiteral(value=token.value, span=token.span)
        if token.kind == TokenKind.FLOAT:
            self._advance()
            return FloatLiteral(value=token.value, span=token.span)
        if token.kind == TokenKind.STRING:
            self._advance()
            return StringLiteral(value=token.value, span=token.span)
        if token.kind == TokenKind.IDENTIFIER:
            self._advance()
            return Identifier(name=token.lexeme, span=token.span)

        if token.is_symbol("true") or token.is_symbol("false"):
            self._advance()
            return BooleanLiteral(value=token.lexeme == "true", span=token.span)
        if token.is_symbol("("):
            self._advance()
            expression = self._parse_expression()
            self._expect(")")
            return expression
        if token.is_symbol("{"):
            return self._parse_block()
        if token.is_symbol("if"):
            return self._parse_if()
        if token.is_symbol("fn"):
            return self._parse_function_rest(self._advance())

        if token.kind == TokenKind.KEYWORD and token.lexeme in RESERVED_KEYWORDS:
            raise self._error("an expression", details=f"The keyword '{token.lexeme}' is reserved and cannot be used yet.")
        raise self._error("an expression")

    def _parse_block(self) -> Block:
        open_brace = self._expect("{")
        statements, tail = self._parse_sequence(closing="}")
        close_brace = self._expect("}")
        return Block(statements=statements, tail=tail, span=_join(open_brace.span, close_brace.span))

    def _parse_if(self) -> IfExpression:
        if_token = self._advance()
        condition = self._parse_expression()
        then_branch = self._parse_block()
        else_branch: Optional[Union[Block, IfExpression]] = None
        if self._match("else"):
            if self._check("if"):
                with self._nested():
                    else_branch = self._parse_if()
            else:
                else_branch = self._parse_block()

        end = else_branch.span if else_branch else then_branch.span
        return IfExpression(condition=condition, then_branch=then_branch, else_branch=else_branch, span=_join(if_token.span, end))

    def _parse_function_rest(self, fn_token: Token) -> FunctionLiteral:
        """Parses `(params) { body }` after the `fn` keyword (and name, for declarations)."""
        self._expect("(")
        parameters: List[Parameter] = []
        seen = set()
        while not self._check(")"):
            start = self.current
            mutable = self._match("mut")
            name = self._expect_identifier()
            if name.lexeme in seen:
                raise ParseError(
                    ErrorCode.UNEXPECTED_TOKEN,
                    span=name.span,
                    details=f"Duplicate parameter name '{name.lexeme}'.",
                    token=name,
                )
            seen.add(name.lexeme)
            parameters.append(Parameter(name=name.lexeme, mutable=mutable, span=_join(start.span, name.span)))
            if not self._match(","):
                break
        self._expect(")")
        body = self._parse_block()
        return FunctionLiteral(parameters=parameters, body=body, span=_join(fn_token.span, body.span))


def parse_program(source: Union[str, Iterable[Token]], max_nesting: int = DEFAULT_MAX_NESTING) -> Program:
    """Parses a source text (or an already lexed token sequence) into a `Program`."""
    tokens = Lexer(source) if isinstance(source, str) else source
    with recursion_headroom(max_nesting * FRAMES_PER_NESTING):
        try:
            return Parser(tokens, max_nesting=max_nesting).parse_program()
        except RecursionError as e:
            raise ParseError(ErrorCode.NESTING_LIMIT, limit=max_nesting) from e

import pytest

from nova.parser.core.parser import parse_program
from ..utils.assertion_helper import assert_asts_equal
from ..utils.factory_helpers import *


def parse_tail(code):
    program = parse_program(code)
    assert program.statements == []
    return program.tail


# --- Literals and primaries ---


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("42", get_integer_literal(42), id="integer"),
        pytest.param("2.5", get_float_literal(2.5), id="float"),
        pytest.param('"nova"', get_string_literal("nova"), id="string"),
        pytest.param("true", get_boolean_literal(True), id="true"),
        pytest.param("false", get_boolean_literal(False), id="false"),
        pytest.param("answer", get_identifier("answer"), id="identifier"),
        pytest.param("((7))", get_integer_literal(7), id="parentheses_leave_no_node"),
    ],
)
def test_parse_primary(code, expected):
    assert_asts_equal(parse_tail(code), expected)


# --- Precedence and associativity ---


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param(
            "2 + 3 * 4",
            get_binary("+", get_integer_literal(2), get_binary("*", get_integer_literal(3), get_integer_literal(4))),
            id="multiplication_before_addition",
        ),
        pytest.param(
            "(2 + 3) * 4",
            get_binary("*", get_binary("+", get_integer_literal(2), get_integer_literal(3)), get_integer_literal(4)),
            id="grouping_overrides_precedence",
        ),
        pytest.param(
            "1 - 2 - 3",
            get_binary("-", get_binary("-", get_integer_literal(1), get_integer_literal(2)), get_integer_literal(3)),
            id="subtraction_is_left_associative",
        ),
        pytest.param(
            "8 / 4 % 3",
            get_binary("%", get_binary("/", get_integer_literal(8), get_integer_literal(4)), get_integer_literal(3)),
            id="multiplicative_is_left_associative",
        ),
        pytest.param(
            "a || b && c",
            get_binary("||", get_identifier("a"), get_binary("&&", get_identifier("b"), get_identifier("c"))),
            id="and_binds_tighter_than_or",
        ),
        pytest.param(
            "a == b < c",
            get_binary("==", get_identifier("a"), get_binary("<", get_identifier("b"), get_identifier("c"))),
            id="relational_binds_tighter_than_equality",
        ),
        pytest.param(
            "a + b >= c - d",
            get_binary(
                ">=",
                get_binary("+", get_identifier("a"), get_identifier("b")),
                get_binary("-", get_identifier("c"), get_identifier("d")),
            ),
            id="additive_binds_tighter_than_relational",
        ),
        pytest.param(
            "x != y && y == z",
            get_binary(
                "&&",
                get_binary("!=", get_identifier("x"), get_identifier("y")),
                get_binary("==", get_identifier("y"), get_identifier("z")),
            ),
            id="equality_binds_tighter_than_and",
        ),
    ],
)
def test_binary_precedence(code, expected):
    assert_asts_equal(parse_tail(code), expected)


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("-x", get_unary("-", get_identifier("x")), id="negation"),
        pytest.param("!done", get_unary("!", get_identifier("done")), id="not"),
        pytest.param("--3", get_unary("-", get_unary("-", get_integer_literal(3))), id="nested_unary"),
        pytest.param(
            "-x * y",
            get_binary("*", get_unary("-", get_identifier("x")), get_identifier("y")),
            id="unary_binds_tighter_than_binary",
        ),
        pytest.param(
            "!a && b",
            get_binary("&&", get_unary("!", get_identifier("a")), get_identifier("b")),
            id="not_binds_tighter_than_and",
        ),
        pytest.param(
            "-f(1)",
            get_unary("-", get_call("f", [get_integer_literal(1)])),
            id="call_binds_tighter_than_unary",
        ),
    ],
)
def test_unary_operators(code, expected):
    assert_asts_equal(parse_tail(code), expected)


# --- Calls ---


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("f()", get_call("f"), id="no_arguments"),
        pytest.param(
            "f(1, x)",
            get_call("f", [get_integer_literal(1), get_identifier("x")]),
            id="two_arguments",
        ),
        pytest.param(
            "f(1, 2,)",
            get_call("f", [get_integer_literal(1), get_integer_literal(2)]),
            id="trailing_comma",
        ),
        pytest.param("f(1,)", get_call("f", [get_integer_literal(1)]), id="single_argument_trailing_comma"),
        pytest.param(
            "f(1)(2)",
            get_call(get_call("f", [get_integer_literal(1)]), [get_integer_literal(2)]),
            id="chained_calls",
        ),
        pytest.param(
            "f(a + 1, g(b))",
            get_call(
                "f",
                [get_binary("+", get_identifier("a"), get_integer_literal(1)), get_call("g", [get_identifier("b")])],
            ),
            id="nested_arguments",
        ),
        pytest.param(
            "fn(x) { x }(5)",
            get_call(get_function_literal(["x"], get_block(tail=get_identifier("x"))), [get_integer_literal(5)]),
            id="immediately_called_function_literal",
        ),
    ],
)
def test_calls(code, expected):
    assert_asts_equal(parse_tail(code), expected)


# --- Assignment ---


@pytest.mark.parametrize(
    "code, expected",
    [
        pytest.param("x = 1", get_assignment("x", get_integer_literal(1)), id="simple"),
        pytest.param(
            "a = b = 1 + 2",
            get_assignment("a", get_assignment("b", get_binary("+", get_integer_literal(1), get_integer_literal(2)))),
            id="right_associative",
        ),
        pytest.param(
            "x = y || z",
            get_assignment("x", get_binary("||", get_identifier("y"), get_identifier("z"))),
            id="lowest_precedence",
        ),
        pytest.param(
            "(x = 2) * 3",
            get_binary("*", get_assignment("x", get_integer_literal(2)), get_integer_literal(3)),
            id="parenthesized_assignment_is_an_operand",
        ),
    ],
)
def test_assignment(code, expected):
    assert_asts_equal(parse_tail(code), expected)


# --- Spans ---


def test_binary_span_covers_both_operands():
    tail = parse_tail("alpha +\n  beta")
    assert (tail.span.s_line, tail.span.s_col) == (1, 1)
    assert (tail.span.e_line, tail.span.e_col) == (2, 7)


def test_call_span_ends_at_closing_parenthesis():
    tail = parse_tail("f(1, 2)")
    assert (tail.span.s_col, tail.span.e_col) == (1, 8)

import json
import logging

import pytest

from nova import InterpreterPipeline, Session, run
from nova.config import InterpreterConfig
from nova.exceptions import ErrorCode, LexError, NovaRuntimeError, ParseError
from nova.parser.core.classes import Program
from nova.parser.core.tokens import TokenKind


# --- run() and RunResult ---


def test_run_returns_value_on_success():
    result = run("let x = 2; x * 21")
    assert result.ok
    assert result.value == 42
    assert result.diagnostic is None
    assert result.unwrap() == 42


@pytest.mark.parametrize(
    "code, kind, code_name",
    [
        pytest.param('"abc', "LexError", "UnterminatedString", id="lex"),
        pytest.param("let = 1;", "ParseError", "UnexpectedToken", id="parse"),
        pytest.param("1 +", "ParseError", "UnexpectedEndOfInput", id="parse_end_of_input"),
        pytest.param("1 / 0", "RuntimeError", "DivisionByZeroError", id="runtime"),
        pytest.param("ghost", "RuntimeError", "UnboundNameError", id="runtime_unbound"),
    ],
)
def test_run_reports_diagnostic_on_failure(code, kind, code_name):
    result = run(code)
    assert not result.ok
    assert result.value is None
    assert result.diagnostic.kind == kind
    assert result.diagnostic.code == code_name
    assert result.diagnostic.message


def test_diagnostic_carries_location():
    result = run("let a = 1;\na / 0")
    span = result.diagnostic.span
    assert (span.s_line, span.s_col) == (2, 1)
    assert result.error.code == ErrorCode.DIVISION_BY_ZERO


def test_unwrap_raises_the_original_error():
    with pytest.raises(NovaRuntimeError) as excinfo:
        run("1 % 0").unwrap()
    assert excinfo.value.code == ErrorCode.DIVISION_BY_ZERO

    with pytest.raises(ParseError):
        run("let").unwrap()
    with pytest.raises(LexError):
        run("@").unwrap()


def test_output_before_a_failure_is_kept(output):
    result = run("print(1); 1 / 0; print(2)", output=output)
    assert not result.ok
    assert output.getvalue() == "1\n"


def test_syntax_error_prevents_any_evaluation(output):
    result = run('print("side effect"); let = 1;', output=output)
    assert result.diagnostic.kind == "ParseError"
    assert output.getvalue() == ""


def test_limits_are_passed_through():
    result = run("fn f(n) { f(n) } f(0)", config=InterpreterConfig(max_depth=40))
    assert result.diagnostic.code == "RecursionLimitError"

    result = run("((((1))))", config=InterpreterConfig(max_nesting=2))
    assert result.diagnostic.code == "NestingLimit"


def test_huge_integers_are_read_and_printed(output):
    result = run("1" * 5000)
    assert result.ok
    assert result.value == (10**5000 - 1) // 9

    thousand_digits = "1" + "0" * 999
    result = run(f"let a = {thousand_digits}; let b = a * a * a * a * a; print(b)", output=output)
    assert result.ok
    assert output.getvalue() == "1" + "0" * 4995 + "\n"


def test_config_rejects_non_positive_limits():
    with pytest.raises(ValueError):
        InterpreterConfig(max_depth=0)
    with pytest.raises(ValueError):
        InterpreterConfig(max_steps=-1)


# --- Session ---


def test_session_keeps_bindings_between_runs():
    session = Session()
    assert session.run("let mut total = 1;").ok
    assert session.run("fn add(n) { total = total + n; total }").ok
    assert session.run("add(4)").value == 5
    assert session.run("total").value == 5


def test_session_keeps_completed_bindings_after_a_failure():
    session = Session()
    session.run("let x = 1;")
    result = session.run("let y = 2; x = 5;")
    assert result.diagnostic.code == "ImmutableAssignmentError"
    assert session.run("x").value == 1
    assert session.run("y").value == 2


def test_session_failure_inside_block_does_not_leak_bindings():
    session = Session()
    assert not session.run("{ let inner = 1; inner / 0 }").ok
    assert session.run("inner").diagnostic.code == "UnboundNameError"


def test_session_print_goes_to_its_output(output):
    session = Session(output=output)
    session.run('print("first")')
    session.run('print("second")')
    assert output.getvalue() == "first\nsecond\n"


def test_sessions_are_isolated():
    first, second = Session(), Session()
    first.run("let only_here = 1;")
    assert second.run("only_here").diagnostic.code == "UnboundNameError"


# --- Pipeline stages ---


def test_pipeline_can_stop_after_lexing():
    tokens = InterpreterPipeline("let x = 1;", stop_after_stage="tokens").run()
    assert tokens[-1].kind == TokenKind.EOF
    assert [t.lexeme for t in tokens[:-1]] == ["let", "x", "=", "1", ";"]


def test_pipeline_can_stop_after_parsing(output):
    pipeline = InterpreterPipeline("print(1); 2", output=output, stop_after_stage="ast")
    program = pipeline.run()
    assert isinstance(program, Program)
    assert output.getvalue() == ""
    assert "value" not in pipeline.artifacts


def test_pipeline_records_every_artifact():
    pipeline = InterpreterPipeline("1 + 2")
    assert pipeline.run() == 3
    assert list(pipeline.artifacts) == ["tokens", "ast", "value"]
    assert pipeline.results[-1] == 3


def test_pipeline_dumps_artifacts_as_json():
    pipeline = InterpreterPipeline("let x = 1;", stop_after_stage="ast")
    pipeline.run()

    ast = json.loads(pipeline.dump_artifact("ast"))
    assert ast["statements"][0]["name"] == "x"
    assert ast["statements"][0]["value"]["value"] == 1

    tokens = json.loads(pipeline.dump_artifact("tokens"))
    assert tokens[0]["kind"] == "KEYWORD"
    assert tokens[-1]["kind"] == "EOF"


def test_pipeline_refuses_to_dump_values():
    pipeline = InterpreterPipeline("1")
    pipeline.run()
    with pytest.raises(ValueError):
        pipeline.dump_artifact("value")


def test_pipeline_rejects_unknown_stage():
    with pytest.raises(ValueError):
        InterpreterPipeline("1", stop_after_stage="bytecode")


def test_stages_and_closures_are_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="nova"):
        run("let f = fn(a) { a }; f(1)")
    messages = [record.getMessage() for record in caplog.records]
    assert "Stage 'value' finished" in messages
    assert any(message.startswith("Closure created") for message in messages)


def test_long_sum_runs_under_default_limits():
    result = run(" + ".join(["1"] * 1200))
    assert result.ok
    assert result.value == 1200

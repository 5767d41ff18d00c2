import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TextIO

from pydantic import BaseModel

from nova.config import InterpreterConfig
from nova.parser.core.classes import Span
from nova.parser.core.lexer import tokenize
from nova.parser.core.parser import parse_program
from nova.runtime.builtins import create_prelude
from nova.runtime.environment import Environment
from nova.runtime.evaluator import Evaluator
from nova.runtime.values import Value

from .exceptions import NovaError
from .utils import ArtifactEncoder, unbounded_int_digits

logger = logging.getLogger(__name__)


class InterpreterPipeline:
    """
    Orchestrates one run from source text to final value.
    Each stage's product is kept in `artifacts` and passed on to the next stage:
    tokens -> ast -> value.
    """

    STAGES = ("tokens", "ast", "value")

    def __init__(
        self,
        source_content: str,
        config: Optional[InterpreterConfig] = None,
        environment: Optional[Environment] = None,
        output: Optional[TextIO] = None,
        stop_after_stage: Optional[str] = None,
    ):
        if stop_after_stage is not None and stop_after_stage not in self.STAGES:
            raise ValueError(f"Unknown stage '{stop_after_stage}'. Expected one of: {', '.join(self.STAGES)}.")
        self.source_content = source_content
        self.config = config or InterpreterConfig()
        self.environment = environment if environment is not None else new_global_environment(output)
        self.stop_after_stage = stop_after_stage
        self.artifacts: Dict[str, Any] = {}
        self.results: List[Any] = []

    def run(self) -> Any:
        """
        Executes the pipeline stage by stage. Any NovaError stops the run at the
        stage that raised it; no partial result is returned.
        """
        # --- Stage 1: Lexing ---
        self._run_stage("tokens", tokenize, self.source_content)
        if self.stop_after_stage == "tokens":
            return self.results[-1]

        # --- Stage 2: Parsing ---
        self._run_stage("ast", parse_program, self.results[-1], max_nesting=self.config.max_nesting)
        if self.stop_after_stage == "ast":
            return self.results[-1]

        # --- Stage 3: Evaluation ---
        evaluator = Evaluator(self.config)
        self._run_stage("value", evaluator.run_program, self.results[-1], self.environment)
        return self.results[-1]

    def _run_stage(self, name: str, func, *args, **kwargs) -> Any:
        """Runs a single function as a stage, storing and returning its result."""
        result = func(*args, **kwargs)
        self.artifacts[name] = result
        self.results.append(result)
        logger.debug("Stage '%s' finished", name)
        return result

    def dump_artifact(self, name: str) -> str:
        """Serializes the tokens or AST produced by a finished stage as JSON."""
        if name == "value":
            raise ValueError("The 'value' stage produces runtime values, which have no JSON form.")
        with unbounded_int_digits():
            return json.dumps(self.artifacts[name], indent=2, sort_keys=False, cls=ArtifactEncoder)


class Diagnostic(BaseModel):
    """What a collaborator needs to report a failed run."""

    kind: str
    code: str
    message: str
    span: Optional[Span] = None

    @classmethod
    def from_error(cls, error: NovaError) -> "Diagnostic":
        return cls(kind=error.kind, code=error.sub_kind, message=error.core_message, span=error.span)


@dataclass
class RunResult:
    value: Value = None
    diagnostic: Optional[Diagnostic] = None
    error: Optional[NovaError] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.diagnostic is None

    def unwrap(self) -> Value:
        """Returns the value of a successful run, or raises the error of a failed one."""
        if self.error is not None:
            raise self.error
        return self.value


def new_global_environment(output: Optional[TextIO] = None) -> Environment:
    """A fresh global scope whose parent is the prelude of built-ins."""
    return create_prelude(output).child()


def interpret(
    source_content: str,
    config: Optional[InterpreterConfig] = None,
    output: Optional[TextIO] = None,
    environment: Optional[Environment] = None,
) -> Value:
    """Runs a program and returns its value. Raises a NovaError on failure."""
    pipeline = InterpreterPipeline(source_content, config=config, environment=environment, output=output)
    return pipeline.run()


def run(
    source_content: str,
    config: Optional[InterpreterConfig] = None,
    output: Optional[TextIO] = None,
    environment: Optional[Environment] = None,
) -> RunResult:
    """
    High-level entry point: evaluates `source_content` and returns a RunResult
    holding either the final value or a Diagnostic. `output` is where `print`
    writes; it is ignored when an existing `environment` is passed in, since
    that environment already carries its own prelude.
    """
    try:
        value = interpret(source_content, config=config, output=output, environment=environment)
    except NovaError as e:
        return RunResult(diagnostic=Diagnostic.from_error(e), error=e)
    return RunResult(value=value)


class Session:
    """
    Keeps one global scope alive across runs, so bindings made by one source
    text are visible to the next. A failed run keeps every binding that was
    completed before the failure.
    """

    def __init__(self, config: Optional[InterpreterConfig] = None, output: Optional[TextIO] = None):
        self.config = config or InterpreterConfig()
        self.environment = new_global_environment(output)

    def run(self, source_content: str) -> RunResult:
        return run(source_content, config=self.config, environment=self.environment)

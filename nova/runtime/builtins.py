"""
Built-in functions available to every program through the prelude scope.
"""

import sys
from typing import List, Optional, TextIO

from nova.exceptions import ErrorCode, NovaRuntimeError
from nova.parser.core.classes import Span
from nova.utils import text_to_int

from .environment import Environment
from .values import Builtin, Value, format_value, type_name


def _conversion_error(value: Value, target: str, span: Optional[Span]) -> NovaRuntimeError:
    shown = f'"{value}"' if isinstance(value, str) else format_value(value)
    return NovaRuntimeError(ErrorCode.TYPE_MISMATCH, span=span, details=f"Cannot convert {shown} of type '{type_name(value)}' to '{target}'.")


def builtin_len(args: List[Value], span: Optional[Span]) -> Value:
    (value,) = args
    if type_name(value) != "string":
        raise NovaRuntimeError(ErrorCode.TYPE_MISMATCH, span=span, details=f"len() expects a 'string', but got a '{type_name(value)}'.")
    return len(value)


def builtin_str(args: List[Value], span: Optional[Span]) -> Value:
    (value,) = args
    return format_value(value)


def builtin_int(args: List[Value], span: Optional[Span]) -> Value:
    (value,) = args
    kind = type_name(value)
    try:
        if kind == "int":
            return value
        if kind == "float":
            # int() truncates toward zero
            return int(value)
        if kind == "string":
            return text_to_int(value.strip())
    except (ValueError, OverflowError):
        pass
    raise _conversion_error(value, "int", span)


def builtin_float(args: List[Value], span: Optional[Span]) -> Value:
    (value,) = args
    kind = type_name(value)
    try:
        if kind in ("int", "float"):
            return float(value)
        if kind == "string":
            return float(value.strip())
    except (ValueError, OverflowError):
        pass
    raise _conversion_error(value, "float", span)


def make_print(output: Optional[TextIO]):
    def builtin_print(args: List[Value], span: Optional[Span]) -> Value:
        stream = output if output is not None else sys.stdout
        stream.write(" ".join(format_value(arg) for arg in args) + "\n")
        return None

    return builtin_print


def create_prelude(output: Optional[TextIO] = None) -> Environment:
    """
    Builds the outermost scope holding the built-ins. `print` writes to `output`,
    or to the process's standard output when none is given.
    """
    prelude = Environment()
    for builtin in (
        Builtin(name="print", arity=None, implementation=make_print(output)),
        Builtin(name="len", arity=1, implementation=builtin_len),
        Builtin(name="str", arity=1, implementation=builtin_str),
        Builtin(name="int", arity=1, implementation=builtin_int),
        Builtin(name="float", arity=1, implementation=builtin_float),
    ):
        prelude.define(builtin.name, builtin)
    return prelude

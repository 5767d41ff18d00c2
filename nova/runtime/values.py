"""
Runtime values produced by evaluation.

Scalars use the host types directly: `int`, `float`, `bool`, `str`, and `None`
for unit. Because `bool` is a subclass of `int` in Python, every kind check in
the interpreter goes through `type_name`, which tests for booleans first.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Union

from nova.parser.core.classes import Block, Parameter, Span
from nova.utils import int_to_text

if TYPE_CHECKING:
    from .environment import Environment


@dataclass(eq=False)
class Function:
    """A closure: parameters and body plus the scope that was active at creation."""

    parameters: List[Parameter]
    body: Block
    closure: "Environment"
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or "<anonymous>"

    def __repr__(self):
        return f"<Function {self.display_name}({', '.join(p.name for p in self.parameters)})>"


@dataclass(eq=False)
class Builtin:
    """A host function. `arity` of None accepts any number of arguments."""

    name: str
    arity: Optional[int]
    implementation: Callable[[List["Value"], Optional[Span]], "Value"]

    @property
    def display_name(self) -> str:
        return self.name

    def __repr__(self):
        return f"<Builtin {self.name}>"


Value = Union[int, float, bool, str, None, Function, Builtin]

NUMERIC_TYPES = ("int", "float")


def type_name(value: Value) -> str:
    if value is None:
        return "unit"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (Function, Builtin)):
        return "function"
    raise TypeError(f"Not a Nova value: {value!r}")


def format_value(value: Value) -> str:
    """The display form used by `print` and `str`."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return int_to_text(value)
    if isinstance(value, (float, str)):
        return str(value)
    if isinstance(value, Function):
        params = ", ".join(("mut " if p.mutable else "") + p.name for p in value.parameters)
        return f"fn({params}) {{ ... }}"
    if isinstance(value, Builtin):
        return f"<builtin {value.name}>"
    raise TypeError(f"Not a Nova value: {value!r}")

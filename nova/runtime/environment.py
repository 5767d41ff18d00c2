"""
Lexical scopes.

Each `Environment` is one scope holding a dict of bindings and a link to its
parent. A function value keeps a reference to the scope it was created in, so
a captured scope stays alive for as long as any closure refers to it.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from nova.exceptions import ErrorCode, NovaRuntimeError
from nova.parser.core.classes import Span

from .values import Value


@dataclass
class Binding:
    value: Value
    mutable: bool = False


class Environment:
    def __init__(self, parent: Optional["Environment"] = None):
        self.parent = parent
        self.bindings: Dict[str, Binding] = {}

    def child(self) -> "Environment":
        """Creates a new scope nested inside this one."""
        return Environment(parent=self)

    def define(self, name: str, value: Value, mutable: bool = False, span: Optional[Span] = None) -> None:
        """Declares `name` in this scope. Shadowing a name of an outer scope is allowed."""
        if name in self.bindings:
            raise NovaRuntimeError(ErrorCode.DUPLICATE_BINDING, span=span, name=name)
        self.bindings[name] = Binding(value=value, mutable=mutable)

    def lookup(self, name: str) -> Optional[Binding]:
        """Finds the innermost binding for `name`, or None."""
        scope: Optional[Environment] = self
        while scope is not None:
            binding = scope.bindings.get(name)
            if binding is not None:
                return binding
            scope = scope.parent
        return None

    def get(self, name: str, span: Optional[Span] = None) -> Value:
        binding = self.lookup(name)
        if binding is None:
            raise NovaRuntimeError(ErrorCode.UNBOUND_NAME, span=span, name=name)
        return binding.value

    def assign(self, name: str, value: Value, span: Optional[Span] = None) -> None:
        binding = self.lookup(name)
        if binding is None:
            raise NovaRuntimeError(ErrorCode.UNBOUND_NAME, span=span, name=name)
        if not binding.mutable:
            raise NovaRuntimeError(ErrorCode.IMMUTABLE_ASSIGNMENT, span=span, name=name)
        binding.value = value

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

"""Lexical scopes and the symbol table."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .types import MethodSignature, RubyType, Visibility


class ScopeKind(Enum):
    """The kind of lexical scope."""

    TOP_LEVEL = "top_level"
    CLASS = "class"
    MODULE = "module"
    METHOD = "method"
    BLOCK = "block"
    LAMBDA = "lambda"
    RESCUE = "rescue"


class SymbolKind(Enum):
    """What a symbol table entry represents."""

    LOCAL_VAR = "local_var"
    INSTANCE_VAR = "instance_var"
    CLASS_VAR = "class_var"
    GLOBAL_VAR = "global_var"
    CONSTANT = "constant"
    METHOD = "method"
    CLASS = "class"
    MODULE = "module"
    PARAM = "param"
    BLOCK_PARAM = "block_param"


@dataclass
class Symbol:
    """A symbol table entry.

    ``signature`` is set for methods and ``superclass`` for classes.
    """

    name: str
    kind: SymbolKind
    ty: RubyType = field(default_factory=RubyType)
    initialized: bool = False
    ref_count: int = 0
    visibility: Visibility = Visibility.PUBLIC
    signature: MethodSignature | None = None
    superclass: str | None = None


@dataclass
class Scope:
    """A lexical scope holding symbol definitions."""

    kind: ScopeKind
    name: str | None = None
    symbols: dict[str, Symbol] = field(default_factory=dict)
    current_visibility: Visibility = Visibility.PUBLIC

    def define(self, sym: Symbol) -> None:
        """Define ``sym`` in this scope, replacing any entry of the same name."""
        self.symbols[sym.name] = sym

    def lookup(self, name: str) -> Symbol | None:
        """Look ``name`` up in this scope only."""
        return self.symbols.get(name)

    def has(self, name: str) -> bool:
        return name in self.symbols


class ScopeStack:
    """A stack of nested scopes; the bottom is always the top-level scope."""

    def __init__(self) -> None:
        self._scopes: list[Scope] = [Scope(ScopeKind.TOP_LEVEL)]

    def push(self, kind: ScopeKind, name: str | None = None) -> None:
        self._scopes.append(Scope(kind, name))

    def pop(self) -> Scope | None:
        """Remove and return the innermost scope; the top level is never removed."""
        if len(self._scopes) > 1:
            return self._scopes.pop()
        return None

    def current(self) -> Scope:
        return self._scopes[-1]

    def define(self, sym: Symbol) -> None:
        self.current().define(sym)

    def lookup(self, name: str) -> Symbol | None:
        """Find ``name`` in the innermost scope that defines it."""
        for scope in reversed(self._scopes):
            sym = scope.lookup(name)
            if sym is not None:
                return sym
        return None

    def in_method(self) -> bool:
        return any(s.kind is ScopeKind.METHOD for s in self._scopes)

    def in_class(self) -> bool:
        return any(s.kind is ScopeKind.CLASS for s in self._scopes)

    def _enclosing(self, kind: ScopeKind) -> str | None:
        for scope in reversed(self._scopes):
            if scope.kind is kind:
                return scope.name
        return None

    def enclosing_class(self) -> str | None:
        return self._enclosing(ScopeKind.CLASS)

    def enclosing_method(self) -> str | None:
        return self._enclosing(ScopeKind.METHOD)

    def depth(self) -> int:
        return len(self._scopes)
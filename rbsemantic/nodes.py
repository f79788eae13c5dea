"""Syntax tree nodes and diagnostics consumed by the semantic analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class SourceSpan:
    """A byte range in the source text."""

    start: int = 0
    end: int = 0


class Severity(Enum):
    """How serious a diagnostic is."""

    ERROR = "error"
    WARNING = "warning"

    def __str__(self) -> str:
        return self.value


@dataclass
class Diagnostic:
    """A message about a location in the source."""

    severity: Severity
    message: str
    span: SourceSpan = field(default_factory=SourceSpan)

    @classmethod
    def error(cls, message: str, span: SourceSpan) -> Diagnostic:
        return cls(Severity.ERROR, message, span)

    @classmethod
    def warning(cls, message: str, span: SourceSpan) -> Diagnostic:
        return cls(Severity.WARNING, message, span)


class ParamKind(Enum):
    """The kind of a method, block or lambda parameter."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    REST = "rest"
    KEYWORD = "keyword"
    KEYWORD_REST = "keyword_rest"
    BLOCK = "block"


@dataclass
class Param:
    """A declared parameter."""

    name: str
    kind: ParamKind = ParamKind.REQUIRED
    default: Expr | None = None
    span: SourceSpan = field(default_factory=SourceSpan)


class BinOperator(Enum):
    """Binary operators, keyed by their Ruby spelling."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "**"
    EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"
    LT_EQ = "<="
    GT_EQ = ">="
    SPACESHIP = "<=>"
    CASE_EQ = "==="
    MATCH = "=~"
    NOT_MATCH = "!~"
    AND = "&&"
    OR = "||"
    BIT_AND = "&"
    BIT_OR = "|"
    BIT_XOR = "^"
    SHL = "<<"
    SHR = ">>"
    RANGE = ".."
    RANGE_EXCL = "..."


class UnOperator(Enum):
    """Unary operators, keyed by their Ruby spelling."""

    NEG = "-"
    POS = "+"
    NOT = "!"
    BIT_NOT = "~"


# Expressions


@dataclass
class IntegerLit:
    value: int
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class FloatLit:
    value: float
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class StringLit:
    value: str
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class InterpolatedString:
    """A string with embedded expressions; parts are strings or expressions."""

    parts: list[str | Expr] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class SymbolLit:
    name: str
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class BoolLit:
    value: bool
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class NilLit:
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class SelfExpr:
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class RegexLit:
    pattern: str
    flags: str = ""
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ArrayLit:
    elements: list[Expr] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class HashLit:
    entries: list[tuple[Expr, Expr]] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class RangeLit:
    start: Expr
    end: Expr
    exclusive: bool = False
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class LocalVar:
    name: str
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class InstanceVar:
    name: str
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ClassVar:
    name: str
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class GlobalVar:
    name: str
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ConstRef:
    """A constant reference such as ``A::B``, held as its path segments."""

    path: list[str]
    span: SourceSpan = field(default_factory=SourceSpan)

    @property
    def full_name(self) -> str:
        return "::".join(self.path)


@dataclass
class BinaryOp:
    left: Expr
    op: BinOperator
    right: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class UnaryOp:
    op: UnOperator
    operand: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class MethodCall:
    method: str
    receiver: Expr | None = None
    args: list[Expr] = field(default_factory=list)
    kwargs: list[tuple[str, Expr]] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class BlockCall:
    """A method call with an attached ``do ... end`` or brace block."""

    call: MethodCall
    params: list[Param] = field(default_factory=list)
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class SuperCall:
    args: list[Expr] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class YieldExpr:
    args: list[Expr] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class Lambda:
    params: list[Param] = field(default_factory=list)
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ProcExpr:
    params: list[Param] = field(default_factory=list)
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class Ternary:
    condition: Expr
    then_expr: Expr
    else_expr: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class Defined:
    expr: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class PatternMatch:
    subject: Expr
    pattern: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


# Assignment targets


@dataclass
class LocalVarTarget:
    name: str


@dataclass
class InstanceVarTarget:
    name: str


@dataclass
class ClassVarTarget:
    name: str


@dataclass
class GlobalVarTarget:
    name: str


@dataclass
class ConstantTarget:
    name: str


@dataclass
class IndexTarget:
    receiver: Expr
    index: Expr


@dataclass
class AttributeTarget:
    receiver: Expr
    name: str


# Statements


@dataclass
class ExprStmt:
    expr: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class AssignmentStmt:
    target: AssignTarget
    value: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class CompoundAssignmentStmt:
    """An assignment such as ``x += 1``."""

    target: AssignTarget
    op: BinOperator
    value: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class MethodDef:
    name: str
    params: list[Param] = field(default_factory=list)
    body: list[Stmt] = field(default_factory=list)
    is_class_method: bool = False
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ClassDef:
    name: str
    superclass: Expr | None = None
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ModuleDef:
    name: str
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ElsifClause:
    condition: Expr
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class IfStmt:
    condition: Expr
    then_body: list[Stmt] = field(default_factory=list)
    elsif_clauses: list[ElsifClause] = field(default_factory=list)
    else_body: list[Stmt] | None = None
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class UnlessStmt:
    condition: Expr
    body: list[Stmt] = field(default_factory=list)
    else_body: list[Stmt] | None = None
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class WhileStmt:
    condition: Expr
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class UntilStmt:
    condition: Expr
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ForStmt:
    var: str
    iterable: Expr
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class WhenClause:
    patterns: list[Expr] = field(default_factory=list)
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class CaseStmt:
    subject: Expr | None = None
    when_clauses: list[WhenClause] = field(default_factory=list)
    else_body: list[Stmt] | None = None
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class RescueClause:
    exceptions: list[Expr] = field(default_factory=list)
    var: str | None = None
    body: list[Stmt] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class BeginRescueStmt:
    body: list[Stmt] = field(default_factory=list)
    rescue_clauses: list[RescueClause] = field(default_factory=list)
    else_body: list[Stmt] | None = None
    ensure_body: list[Stmt] | None = None
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class ReturnStmt:
    value: Expr | None = None
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class YieldStmt:
    args: list[Expr] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class BreakStmt:
    value: Expr | None = None
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class NextStmt:
    value: Expr | None = None
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class RequireStmt:
    path: str
    relative: bool = False
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class AliasStmt:
    new_name: str
    old_name: str
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class AttrDecl:
    """An ``attr_reader``/``attr_writer``/``attr_accessor`` declaration."""

    kind: str
    names: list[str] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class MixinStmt:
    """An ``include``/``extend``/``prepend`` of a module."""

    kind: str
    module: Expr
    span: SourceSpan = field(default_factory=SourceSpan)


@dataclass
class Program:
    body: list[Stmt] = field(default_factory=list)


Expr = Union[
    IntegerLit, FloatLit, StringLit, InterpolatedString, SymbolLit, BoolLit,
    NilLit, SelfExpr, RegexLit, ArrayLit, HashLit, RangeLit, LocalVar,
    InstanceVar, ClassVar, GlobalVar, ConstRef, BinaryOp, UnaryOp, MethodCall,
    BlockCall, SuperCall, YieldExpr, Lambda, ProcExpr, Ternary, Defined,
    PatternMatch,
]

AssignTarget = Union[
    LocalVarTarget, InstanceVarTarget, ClassVarTarget, GlobalVarTarget,
    ConstantTarget, IndexTarget, AttributeTarget,
]

Stmt = Union[
    ExprStmt, AssignmentStmt, CompoundAssignmentStmt, MethodDef, ClassDef,
    ModuleDef, IfStmt, UnlessStmt, WhileStmt, UntilStmt, ForStmt, CaseStmt,
    BeginRescueStmt, ReturnStmt, YieldStmt, BreakStmt, NextStmt, RequireStmt,
    AliasStmt, AttrDecl, MixinStmt,
]
"""Two-pass semantic analysis of a Ruby syntax tree."""

from __future__ import annotations

from collections.abc import Iterable

from .nodes import (
    AliasStmt,
    ArrayLit,
    AssignmentStmt,
    AttrDecl,
    AttributeTarget,
    BeginRescueStmt,
    BinaryOp,
    BinOperator,
    BlockCall,
    BoolLit,
    BreakStmt,
    CaseStmt,
    ClassDef,
    ClassVar,
    ClassVarTarget,
    CompoundAssignmentStmt,
    ConstantTarget,
    ConstRef,
    Defined,
    Diagnostic,
    ExprStmt,
    FloatLit,
    ForStmt,
    GlobalVar,
    GlobalVarTarget,
    HashLit,
    IfStmt,
    IndexTarget,
    InstanceVar,
    InstanceVarTarget,
    IntegerLit,
    InterpolatedString,
    Lambda,
    LocalVar,
    LocalVarTarget,
    MethodCall,
    MethodDef,
    MixinStmt,
    ModuleDef,
    NextStmt,
    NilLit,
    ParamKind,
    PatternMatch,
    ProcExpr,
    Program,
    RangeLit,
    RegexLit,
    RequireStmt,
    ReturnStmt,
    SelfExpr,
    SourceSpan,
    StringLit,
    SuperCall,
    SymbolLit,
    Ternary,
    UnaryOp,
    UnlessStmt,
    UnOperator,
    UntilStmt,
    WhileStmt,
    YieldExpr,
    YieldStmt,
)
from .scope import ScopeKind, ScopeStack, Symbol, SymbolKind
from .types import MethodSignature, ParamSig, RubyType, TypeKind, Visibility

_BUILTIN_METHODS: tuple[tuple[str, RubyType], ...] = (
    ("puts", RubyType.NIL),
    ("print", RubyType.NIL),
    ("p", RubyType.ANY),
    ("gets", RubyType.optional_of(RubyType.STRING)),
    ("raise", RubyType.VOID),
    ("require", RubyType.BOOL),
    ("require_relative", RubyType.BOOL),
    ("rand", RubyType.ANY),
    ("sleep", RubyType.INTEGER),
    ("exit", RubyType.VOID),
    ("abort", RubyType.VOID),
    ("at_exit", RubyType.PROC),
    ("freeze", RubyType.SELF),
    ("frozen?", RubyType.BOOL),
    ("nil?", RubyType.BOOL),
    ("is_a?", RubyType.BOOL),
    ("kind_of?", RubyType.BOOL),
    ("respond_to?", RubyType.BOOL),
    ("send", RubyType.ANY),
    ("class", RubyType.class_of("Class")),
    ("to_s", RubyType.STRING),
    ("to_i", RubyType.INTEGER),
    ("to_f", RubyType.FLOAT),
    ("to_a", RubyType.array_of(RubyType.ANY)),
    ("inspect", RubyType.STRING),
    ("hash", RubyType.INTEGER),
    ("dup", RubyType.SELF),
    ("clone", RubyType.SELF),
    ("tap", RubyType.SELF),
    ("then", RubyType.ANY),
    ("yield_self", RubyType.ANY),
    ("object_id", RubyType.INTEGER),
    ("equal?", RubyType.BOOL),
    ("eql?", RubyType.BOOL),
    ("instance_of?", RubyType.BOOL),
    ("method", RubyType.PROC),
    ("methods", RubyType.array_of(RubyType.SYMBOL)),
    ("instance_variables", RubyType.array_of(RubyType.SYMBOL)),
    ("instance_variable_get", RubyType.ANY),
    ("instance_variable_set", RubyType.ANY),
)

_BUILTIN_CONSTANTS = (
    "ARGV", "STDIN", "STDOUT", "STDERR", "ENV", "RUBY_VERSION",
    "RUBY_PLATFORM", "RUBY_ENGINE", "TRUE", "FALSE", "NIL",
    "__FILE__", "__LINE__", "__dir__", "__method__",
)

_BUILTIN_CLASSES = (
    "Object", "BasicObject", "Kernel", "Integer", "Float",
    "String", "Symbol", "Array", "Hash", "Range", "Regexp", "Proc",
    "NilClass", "TrueClass", "FalseClass", "IO", "File", "Dir",
    "Exception", "StandardError", "RuntimeError", "TypeError",
    "ArgumentError", "NameError", "NoMethodError", "ZeroDivisionError",
    "Comparable", "Enumerable", "Enumerator", "Struct", "Class", "Module",
    "Numeric", "Math", "Thread", "Mutex", "Fiber", "Process", "Signal",
    "Time", "Random", "Set", "GC", "Marshal", "Encoding",
)

_COMPARISONS = frozenset({
    BinOperator.EQ, BinOperator.NOT_EQ, BinOperator.LT, BinOperator.GT,
    BinOperator.LT_EQ, BinOperator.GT_EQ, BinOperator.CASE_EQ,
    BinOperator.MATCH, BinOperator.NOT_MATCH,
})
_ARITHMETIC = frozenset({BinOperator.ADD, BinOperator.SUB, BinOperator.MUL, BinOperator.POW})
_BITWISE = frozenset({
    BinOperator.BIT_AND, BinOperator.BIT_OR, BinOperator.BIT_XOR,
    BinOperator.SHL, BinOperator.SHR,
})


class SemanticAnalyzer:
    """Collects symbols and checks a program, reporting diagnostics.

    ``scopes`` is the symbol table; after analysis its top-level scope holds
    the program's top-level definitions with their inferred types.
    """

    def __init__(self) -> None:
        self.scopes = ScopeStack()
        self._diagnostics: list[Diagnostic] = []
        self._class_hierarchy: dict[str, str | None] = {}
        self._define_builtins()

    def analyze(self, program: Program) -> list[Diagnostic]:
        """Run both passes over ``program`` and return the diagnostics found."""
        for stmt in program.body:
            self._collect_stmt(stmt)
        self._analyze_body(program.body)
        diagnostics, self._diagnostics = self._diagnostics, []
        return diagnostics

    # Built-ins

    def _define_builtins(self) -> None:
        for name, return_type in _BUILTIN_METHODS:
            self.scopes.define(Symbol(
                name=name,
                kind=SymbolKind.METHOD,
                ty=RubyType.PROC,
                initialized=True,
                signature=MethodSignature(name=name, return_type=return_type),
            ))
        for name in _BUILTIN_CONSTANTS:
            self._define(name, SymbolKind.CONSTANT, RubyType.ANY)
        for name in _BUILTIN_CLASSES:
            self._class_hierarchy[name] = "Object"
            self.scopes.define(Symbol(
                name=name,
                kind=SymbolKind.CLASS,
                ty=RubyType.class_of(name),
                initialized=True,
                superclass="Object",
            ))

    def _define(
        self,
        name: str,
        kind: SymbolKind,
        ty: RubyType,
        visibility: Visibility = Visibility.PUBLIC,
    ) -> None:
        self.scopes.define(Symbol(
            name=name, kind=kind, ty=ty, initialized=True, visibility=visibility,
        ))

    # Pass 1: collect symbols

    def _collect_stmt(self, stmt) -> None:
        match stmt:
            case MethodDef():
                visibility = self.scopes.current().current_visibility
                signature = MethodSignature(
                    name=stmt.name,
                    params=[
                        ParamSig(
                            name=p.name,
                            ty=RubyType.ANY,
                            has_default=p.default is not None,
                            is_rest=p.kind is ParamKind.REST,
                            is_keyword=p.kind is ParamKind.KEYWORD,
                            is_block=p.kind is ParamKind.BLOCK,
                        )
                        for p in stmt.params
                    ],
                    return_type=RubyType.ANY,
                    visibility=visibility,
                    is_class_method=stmt.is_class_method,
                )
                self.scopes.define(Symbol(
                    name=stmt.name,
                    kind=SymbolKind.METHOD,
                    ty=RubyType.PROC,
                    initialized=True,
                    visibility=visibility,
                    signature=signature,
                ))
            case ClassDef():
                if stmt.superclass is None:
                    super_name = "Object"
                else:
                    super_name = self._expr_to_name(stmt.superclass)
                self._class_hierarchy[stmt.name] = super_name
                self.scopes.define(Symbol(
                    name=stmt.name,
                    kind=SymbolKind.CLASS,
                    ty=RubyType.class_of(stmt.name),
                    initialized=True,
                    superclass=super_name,
                ))
                self._collect_nested(ScopeKind.CLASS, stmt.name, stmt.body)
            case ModuleDef():
                self._define(stmt.name, SymbolKind.MODULE, RubyType.module_of(stmt.name))
                self._collect_nested(ScopeKind.MODULE, stmt.name, stmt.body)
            case _:
                pass

    def _collect_nested(self, kind: ScopeKind, name: str, body) -> None:
        self.scopes.push(kind, name)
        for stmt in body:
            self._collect_stmt(stmt)
        self.scopes.pop()

    # Pass 2: analyze bodies

    def _analyze_body(self, body: Iterable | None) -> None:
        for stmt in body or ():
            self._analyze_stmt(stmt)

    def _analyze_in_scope(self, kind: ScopeKind, name: str | None, body) -> None:
        self.scopes.push(kind, name)
        self._analyze_body(body)
        self.scopes.pop()

    def _analyze_stmt(self, stmt) -> None:
        match stmt:
            case ExprStmt():
                self._analyze_expr(stmt.expr)
            case AssignmentStmt():
                self._analyze_assignment(stmt)
            case CompoundAssignmentStmt():
                self._analyze_expr(stmt.value)
                target = stmt.target
                if isinstance(target, LocalVarTarget) and self.scopes.lookup(target.name) is None:
                    self._error(f"undefined local variable '{target.name}'", stmt.span)
            case MethodDef():
                self._analyze_method_def(stmt)
            case ClassDef():
                self._analyze_class_def(stmt)
            case ModuleDef():
                self._analyze_in_scope(ScopeKind.MODULE, stmt.name, stmt.body)
            case IfStmt():
                self._analyze_expr(stmt.condition)
                self._analyze_body(stmt.then_body)
                for clause in stmt.elsif_clauses:
                    self._analyze_expr(clause.condition)
                    self._analyze_body(clause.body)
                self._analyze_body(stmt.else_body)
            case UnlessStmt():
                self._analyze_expr(stmt.condition)
                self._analyze_body(stmt.body)
                self._analyze_body(stmt.else_body)
            case WhileStmt() | UntilStmt():
                self._analyze_expr(stmt.condition)
                self._analyze_body(stmt.body)
            case ForStmt():
                self._analyze_expr(stmt.iterable)
                self._define(stmt.var, SymbolKind.LOCAL_VAR, RubyType.ANY)
                self._analyze_body(stmt.body)
            case CaseStmt():
                if stmt.subject is not None:
                    self._analyze_expr(stmt.subject)
                for clause in stmt.when_clauses:
                    for pattern in clause.patterns:
                        self._analyze_expr(pattern)
                    self._analyze_body(clause.body)
                self._analyze_body(stmt.else_body)
            case BeginRescueStmt():
                self._analyze_begin_rescue(stmt)
            case ReturnStmt():
                if not self.scopes.in_method():
                    self._warning("return used outside of method", stmt.span)
                if stmt.value is not None:
                    self._analyze_expr(stmt.value)
            case YieldStmt():
                if not self.scopes.in_method():
                    self._error("yield used outside of method", stmt.span)
                for arg in stmt.args:
                    self._analyze_expr(arg)
            case BreakStmt() | NextStmt():
                if stmt.value is not None:
                    self._analyze_expr(stmt.value)
            case RequireStmt() | AliasStmt() | AttrDecl() | MixinStmt():
                pass
            case _:
                raise TypeError(f"not a statement node: {stmt!r}")

    def _analyze_assignment(self, stmt: AssignmentStmt) -> None:
        value_type = self._analyze_expr(stmt.value)
        match stmt.target:
            case LocalVarTarget(name=name):
                existing = self.scopes.lookup(name)
                if existing is not None:
                    existing.ty = value_type
                    existing.initialized = True
                else:
                    self._define(name, SymbolKind.LOCAL_VAR, value_type)
            case InstanceVarTarget(name=name):
                if not self.scopes.in_class() and not self.scopes.in_method():
                    self._warning(
                        f"instance variable {name} used outside class/method", stmt.span
                    )
                self._define(name, SymbolKind.INSTANCE_VAR, value_type, Visibility.PRIVATE)
            case ClassVarTarget(name=name):
                if not self.scopes.in_class():
                    self._warning(f"class variable {name} used outside class", stmt.span)
                self._define(name, SymbolKind.CLASS_VAR, value_type, Visibility.PRIVATE)
            case GlobalVarTarget(name=name):
                self._define(name, SymbolKind.GLOBAL_VAR, value_type)
            case ConstantTarget(name=name):
                if self.scopes.lookup(name) is not None:
                    self._warning(f"already initialized constant {name}", stmt.span)
                self._define(name, SymbolKind.CONSTANT, value_type)
            case IndexTarget(receiver=receiver, index=index):
                self._analyze_expr(receiver)
                self._analyze_expr(index)
            case AttributeTarget(receiver=receiver):
                self._analyze_expr(receiver)
            case target:
                raise TypeError(f"not an assignment target: {target!r}")

    def _analyze_method_def(self, stmt: MethodDef) -> None:
        self.scopes.push(ScopeKind.METHOD, stmt.name)
        for param in stmt.params:
            ty = RubyType.ANY if param.default is None else self._analyze_expr(param.default)
            self._define(param.name, SymbolKind.PARAM, ty)
        self._analyze_body(stmt.body)
        self.scopes.pop()

    def _analyze_class_def(self, stmt: ClassDef) -> None:
        if stmt.superclass is not None:
            name = self._expr_to_name(stmt.superclass)
            if (
                name is not None
                and self.scopes.lookup(name) is None
                and name not in self._class_hierarchy
            ):
                self._error(f"undefined superclass '{name}'", stmt.span)
        self._analyze_in_scope(ScopeKind.CLASS, stmt.name, stmt.body)

    def _analyze_begin_rescue(self, stmt: BeginRescueStmt) -> None:
        self._analyze_body(stmt.body)
        for clause in stmt.rescue_clauses:
            self.scopes.push(ScopeKind.RESCUE)
            for exception in clause.exceptions:
                self._analyze_expr(exception)
            if clause.var is not None:
                self._define(clause.var, SymbolKind.LOCAL_VAR, RubyType.instance("Exception"))
            self._analyze_body(clause.body)
            self.scopes.pop()
        self._analyze_body(stmt.else_body)
        self._analyze_body(stmt.ensure_body)

    # Expressions

    def _analyze_params_scope(self, params, body, param_kind: SymbolKind) -> None:
        self.scopes.push(ScopeKind.BLOCK if param_kind is SymbolKind.BLOCK_PARAM else ScopeKind.LAMBDA)
        for param in params:
            self._define(param.name, param_kind, RubyType.ANY)
        self._analyze_body(body)
        self.scopes.pop()

    def _lookup_type(self, name: str) -> RubyType:
        sym = self.scopes.lookup(name)
        return RubyType.ANY if sym is None else sym.ty

    def _analyze_expr(self, expr) -> RubyType:
        """Analyze ``expr`` and return its inferred type."""
        match expr:
            case IntegerLit():
                return RubyType.INTEGER
            case FloatLit():
                return RubyType.FLOAT
            case StringLit() | InterpolatedString():
                return RubyType.STRING
            case SymbolLit():
                return RubyType.SYMBOL
            case BoolLit():
                return RubyType.BOOL
            case NilLit():
                return RubyType.NIL
            case SelfExpr():
                return RubyType.SELF
            case RegexLit():
                return RubyType.REGEXP
            case ArrayLit():
                element = RubyType.UNKNOWN
                for item in expr.elements:
                    item_type = self._analyze_expr(item)
                    if element == RubyType.UNKNOWN:
                        element = item_type
                    elif element != item_type:
                        element = RubyType.ANY
                if element == RubyType.UNKNOWN:
                    element = RubyType.ANY
                return RubyType.array_of(element)
            case HashLit():
                for key, value in expr.entries:
                    self._analyze_expr(key)
                    self._analyze_expr(value)
                return RubyType.hash_of(RubyType.ANY, RubyType.ANY)
            case RangeLit():
                self._analyze_expr(expr.start)
                self._analyze_expr(expr.end)
                return RubyType.RANGE
            case LocalVar():
                sym = self.scopes.lookup(expr.name)
                if sym is None:
                    # Possibly a method call without parentheses.
                    return RubyType.ANY
                sym.ref_count += 1
                return sym.ty
            case InstanceVar() | ClassVar():
                return self._lookup_type(expr.name)
            case GlobalVar():
                return RubyType.ANY
            case ConstRef():
                name = "::".join(expr.path)
                sym = self.scopes.lookup(name)
                if sym is None:
                    sym = self.scopes.lookup(expr.path[-1] if expr.path else name)
                return RubyType.ANY if sym is None else sym.ty
            case BinaryOp():
                left = self._analyze_expr(expr.left)
                right = self._analyze_expr(expr.right)
                return self._infer_binary_type(left, expr.op, right)
            case UnaryOp():
                operand = self._analyze_expr(expr.operand)
                if expr.op in (UnOperator.NEG, UnOperator.POS):
                    return operand
                if expr.op is UnOperator.NOT:
                    return RubyType.BOOL
                return RubyType.INTEGER
            case MethodCall():
                if expr.receiver is not None:
                    self._analyze_expr(expr.receiver)
                for arg in expr.args:
                    self._analyze_expr(arg)
                for _, value in expr.kwargs:
                    self._analyze_expr(value)
                sym = self.scopes.lookup(expr.method)
                if sym is not None and sym.kind is SymbolKind.METHOD and sym.signature is not None:
                    return sym.signature.return_type
                return RubyType.ANY
            case BlockCall():
                self._analyze_expr(expr.call)
                self._analyze_params_scope(expr.params, expr.body, SymbolKind.BLOCK_PARAM)
                return RubyType.ANY
            case SuperCall() | YieldExpr():
                for arg in expr.args:
                    self._analyze_expr(arg)
                return RubyType.ANY
            case Lambda() | ProcExpr():
                self._analyze_params_scope(expr.params, expr.body, SymbolKind.PARAM)
                return RubyType.PROC
            case Ternary():
                self._analyze_expr(expr.condition)
                then_type = self._analyze_expr(expr.then_expr)
                else_type = self._analyze_expr(expr.else_expr)
                return then_type if then_type == else_type else then_type.union(else_type)
            case Defined():
                return RubyType.optional_of(RubyType.STRING)
            case PatternMatch():
                self._analyze_expr(expr.subject)
                self._analyze_expr(expr.pattern)
                return RubyType.BOOL
            case _:
                raise TypeError(f"not an expression node: {expr!r}")

    @staticmethod
    def _infer_binary_type(left: RubyType, op: BinOperator, right: RubyType) -> RubyType:
        if op in _COMPARISONS:
            return RubyType.BOOL
        if op is BinOperator.SPACESHIP:
            return RubyType.optional_of(RubyType.INTEGER)
        if op in (BinOperator.AND, BinOperator.OR):
            return left if left == right else RubyType.ANY
        if op in _ARITHMETIC:
            kinds = (left.kind, right.kind)
            if kinds == (TypeKind.INTEGER, TypeKind.INTEGER):
                return RubyType.INTEGER
            if TypeKind.FLOAT in kinds:
                return RubyType.FLOAT
            if op is BinOperator.ADD and kinds == (TypeKind.STRING, TypeKind.STRING):
                return RubyType.STRING
            if op is BinOperator.ADD and kinds == (TypeKind.ARRAY, TypeKind.ARRAY):
                return left
            return RubyType.ANY
        if op is BinOperator.DIV:
            if left.kind is TypeKind.INTEGER and right.kind is TypeKind.INTEGER:
                return RubyType.INTEGER
            return RubyType.FLOAT
        if op is BinOperator.MOD or op in _BITWISE:
            return RubyType.INTEGER
        return RubyType.RANGE

    @staticmethod
    def _expr_to_name(expr) -> str | None:
        if isinstance(expr, ConstRef):
            return "::".join(expr.path)
        if isinstance(expr, LocalVar):
            return expr.name
        return None

    def _error(self, message: str, span: SourceSpan) -> None:
        self._diagnostics.append(Diagnostic.error(message, span))

    def _warning(self, message: str, span: SourceSpan) -> None:
        self._diagnostics.append(Diagnostic.warning(message, span))
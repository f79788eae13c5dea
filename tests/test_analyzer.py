import pytest

from rbsemantic.analyzer import SemanticAnalyzer
from rbsemantic.nodes import (
    ArrayLit,
    AssignmentStmt,
    BeginRescueStmt,
    BinaryOp,
    BinOperator,
    BlockCall,
    ClassDef,
    ClassVarTarget,
    CompoundAssignmentStmt,
    ConstantTarget,
    ConstRef,
    ExprStmt,
    FloatLit,
    ForStmt,
    InstanceVarTarget,
    IntegerLit,
    LocalVar,
    LocalVarTarget,
    MethodCall,
    MethodDef,
    Param,
    ParamKind,
    Program,
    RescueClause,
    ReturnStmt,
    Severity,
    SourceSpan,
    StringLit,
    Ternary,
    BoolLit,
    YieldStmt,
)
from rbsemantic.scope import SymbolKind
from rbsemantic.types import RubyType


def run(*stmts):
    analyzer = SemanticAnalyzer()
    diags = analyzer.analyze(Program(body=list(stmts)))
    return analyzer, diags


def assign(name, value):
    return AssignmentStmt(target=LocalVarTarget(name), value=value)


def type_of(expr):
    analyzer, diags = run(assign("x", expr))
    assert diags == []
    return analyzer.scopes.lookup("x").ty


def test_integer_addition_is_integer():
    assert type_of(BinaryOp(IntegerLit(1), BinOperator.ADD, IntegerLit(2))) == RubyType.INTEGER


def test_division_with_float_is_float():
    assert type_of(BinaryOp(IntegerLit(1), BinOperator.DIV, FloatLit(2.0))) == RubyType.FLOAT


def test_string_concatenation_is_string():
    assert type_of(BinaryOp(StringLit("a"), BinOperator.ADD, StringLit("b"))) == RubyType.STRING


def test_comparison_and_spaceship_types():
    assert type_of(BinaryOp(IntegerLit(1), BinOperator.LT, IntegerLit(2))) == RubyType.BOOL
    assert type_of(
        BinaryOp(IntegerLit(1), BinOperator.SPACESHIP, IntegerLit(2))
    ) == RubyType.optional_of(RubyType.INTEGER)


@pytest.mark.parametrize(
    "elements, expected",
    [
        ([IntegerLit(1), IntegerLit(2)], RubyType.array_of(RubyType.INTEGER)),
        ([IntegerLit(1), StringLit("a")], RubyType.array_of(RubyType.ANY)),
        ([], RubyType.array_of(RubyType.ANY)),
    ],
)
def test_array_literal_element_type(elements, expected):
    assert type_of(ArrayLit(elements)) == expected


def test_ternary_of_different_types_is_union():
    expr = Ternary(BoolLit(True), IntegerLit(1), StringLit("a"))
    assert type_of(expr) == RubyType.union_of(RubyType.INTEGER, RubyType.STRING)


def test_builtin_method_return_types():
    assert type_of(MethodCall("puts", args=[StringLit("hi")])) == RubyType.NIL
    assert type_of(MethodCall("gets")) == RubyType.optional_of(RubyType.STRING)


def test_user_method_returns_any_and_is_collected():
    method = MethodDef(
        "greet",
        params=[
            Param("a"),
            Param("b", ParamKind.OPTIONAL, default=IntegerLit(1)),
            Param("rest", ParamKind.REST),
        ],
    )
    analyzer, diags = run(assign("x", MethodCall("greet")), method)
    assert diags == []
    assert analyzer.scopes.lookup("x").ty == RubyType.ANY
    sym = analyzer.scopes.lookup("greet")
    assert sym.kind is SymbolKind.METHOD
    assert [p.has_default for p in sym.signature.params] == [False, True, False]
    assert [p.is_rest for p in sym.signature.params] == [False, False, True]


def test_return_outside_method_warns():
    span = SourceSpan(3, 9)
    _, diags = run(ReturnStmt(span=span))
    assert len(diags) == 1
    assert diags[0].severity is Severity.WARNING
    assert diags[0].message == "return used outside of method"
    assert diags[0].span == span


def test_return_and_yield_inside_method_are_fine():
    _, diags = run(MethodDef("m", body=[YieldStmt(), ReturnStmt(value=IntegerLit(1))]))
    assert diags == []


def test_yield_outside_method_is_error():
    _, diags = run(YieldStmt())
    assert [(d.severity, d.message) for d in diags] == [
        (Severity.ERROR, "yield used outside of method")
    ]


def test_undefined_superclass_is_error():
    _, diags = run(ClassDef("Foo", superclass=ConstRef(["Bar"])))
    assert [(d.severity, d.message) for d in diags] == [
        (Severity.ERROR, "undefined superclass 'Bar'")
    ]


def test_known_superclasses_are_accepted():
    _, diags = run(
        ClassDef("MyError", superclass=ConstRef(["StandardError"])),
        ClassDef("Child", superclass=ConstRef(["Parent"])),
        ClassDef("Parent"),
    )
    assert diags == []


def test_class_symbol_records_superclass_path():
    analyzer, _ = run(ClassDef("Foo", superclass=ConstRef(["A", "B"])))
    sym = analyzer.scopes.lookup("Foo")
    assert sym.kind is SymbolKind.CLASS
    assert sym.superclass == "A::B"


def test_compound_assignment_on_undefined_local():
    stmt = CompoundAssignmentStmt(LocalVarTarget("x"), BinOperator.ADD, IntegerLit(1))
    _, diags = run(stmt)
    assert [(d.severity, d.message) for d in diags] == [
        (Severity.ERROR, "undefined local variable 'x'")
    ]


def test_compound_assignment_after_definition():
    stmt = CompoundAssignmentStmt(LocalVarTarget("x"), BinOperator.ADD, IntegerLit(1))
    _, diags = run(assign("x", IntegerLit(0)), stmt)
    assert diags == []


@pytest.mark.parametrize("name", ["FOO", "ARGV"])
def test_reassigning_constant_warns(name):
    stmts = [AssignmentStmt(ConstantTarget(name), IntegerLit(1))]
    if name == "FOO":
        stmts.append(AssignmentStmt(ConstantTarget(name), IntegerLit(2)))
    _, diags = run(*stmts)
    assert [(d.severity, d.message) for d in diags] == [
        (Severity.WARNING, f"already initialized constant {name}")
    ]


def test_instance_variable_placement():
    top = AssignmentStmt(InstanceVarTarget("@x"), IntegerLit(1))
    _, diags = run(top)
    assert [d.message for d in diags] == ["instance variable @x used outside class/method"]
    inside = MethodDef("m", body=[AssignmentStmt(InstanceVarTarget("@x"), IntegerLit(1))])
    _, diags = run(inside)
    assert diags == []


def test_class_variable_outside_class_warns():
    _, diags = run(AssignmentStmt(ClassVarTarget("@@x"), IntegerLit(1)))
    assert [d.message for d in diags] == ["class variable @@x used outside class"]
    _, diags = run(ClassDef("C", body=[AssignmentStmt(ClassVarTarget("@@x"), IntegerLit(1))]))
    assert diags == []


def test_local_variable_references_are_counted():
    analyzer, _ = run(
        assign("x", IntegerLit(1)),
        assign("y", LocalVar("x")),
        ExprStmt(LocalVar("x")),
    )
    assert analyzer.scopes.lookup("x").ref_count == 2
    assert analyzer.scopes.lookup("y").ty == RubyType.INTEGER


def test_reassignment_updates_type():
    analyzer, _ = run(assign("x", IntegerLit(1)), assign("x", StringLit("s")))
    assert analyzer.scopes.lookup("x").ty == RubyType.STRING


def test_block_and_rescue_scopes_are_popped():
    block = BlockCall(MethodCall("each", receiver=LocalVar("items")), params=[Param("item")])
    rescue = BeginRescueStmt(rescue_clauses=[RescueClause(var="err")])
    analyzer, diags = run(ExprStmt(block), rescue)
    assert diags == []
    assert analyzer.scopes.lookup("item") is None
    assert analyzer.scopes.lookup("err") is None
    assert analyzer.scopes.depth() == 1


def test_for_variable_is_defined_in_current_scope():
    analyzer, _ = run(ForStmt("i", ArrayLit([IntegerLit(1)])))
    assert analyzer.scopes.lookup("i").kind is SymbolKind.LOCAL_VAR


def test_diagnostics_are_taken_on_each_run():
    analyzer = SemanticAnalyzer()
    first = analyzer.analyze(Program([YieldStmt()]))
    second = analyzer.analyze(Program([]))
    assert len(first) == 1
    assert second == []


def test_unknown_node_raises_type_error():
    with pytest.raises(TypeError):
        SemanticAnalyzer().analyze(Program([object()]))
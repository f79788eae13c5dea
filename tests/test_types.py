import pytest

from rbsemantic.types import (
    MethodSignature,
    ParamSig,
    RubyType,
    TypeKind,
    Visibility,
)

INT = RubyType.INTEGER
FLT = RubyType.FLOAT
STR = RubyType.STRING
NIL = RubyType.NIL


@pytest.mark.parametrize(
    "ty, text",
    [
        (RubyType.INTEGER, "Integer"),
        (RubyType.FLOAT, "Float"),
        (RubyType.BOOL, "Bool"),
        (RubyType.NIL, "nil"),
        (RubyType.VOID, "void"),
        (RubyType.SELF, "self"),
        (RubyType.ANY, "any"),
        (RubyType.UNKNOWN, "?"),
        (RubyType.instance("Widget"), "Widget"),
    ],
)
def test_display_simple(ty, text):
    assert str(ty) == text


def test_display_composites():
    assert str(RubyType.array_of(INT)) == "Array<Integer>"
    assert str(RubyType.union_of(INT, NIL)) == "Integer | nil"
    assert str(RubyType.optional_of(INT)) == "Integer?"


def test_display_wraps_inner_text():
    inner = RubyType.class_of("Foo")
    assert str(RubyType.module_of("Foo")).endswith("<Foo>")
    assert str(inner).startswith("Class<")
    assert str(RubyType.hash_of(STR, inner)).endswith(str(inner) + ">")


def test_default_is_unknown():
    assert RubyType() == RubyType.UNKNOWN
    assert RubyType().kind is TypeKind.UNKNOWN


@pytest.mark.parametrize(
    "left, right, expected",
    [
        (INT, INT, True),
        (INT, RubyType.ANY, True),
        (RubyType.ANY, STR, True),
        (RubyType.UNKNOWN, STR, True),
        (NIL, RubyType.optional_of(STR), True),
        (INT, RubyType.optional_of(FLT), True),
        (STR, RubyType.optional_of(INT), False),
        (INT, FLT, True),
        (FLT, INT, False),
        (INT, RubyType.union_of(STR, INT), True),
        (NIL, RubyType.union_of(STR, INT), False),
        (RubyType.instance("A"), RubyType.instance("A"), True),
        (RubyType.instance("A"), RubyType.instance("B"), False),
        (STR, INT, False),
    ],
)
def test_is_compatible_with(left, right, expected):
    assert left.is_compatible_with(right) is expected


def test_numeric_and_collection():
    assert INT.is_numeric() and FLT.is_numeric()
    assert not STR.is_numeric()
    assert RubyType.array_of(INT).is_collection()
    assert RubyType.hash_of(STR, INT).is_collection()
    assert not RubyType.RANGE.is_collection()


def test_optional():
    opt = INT.optional()
    assert opt == RubyType.optional_of(INT)
    assert opt.optional() == opt
    assert NIL.optional() == NIL
    assert opt.inner == INT


def test_inner_rejects_scalar():
    with pytest.raises(ValueError):
        RubyType.instance("Widget").inner


def test_union_of_equal_types_is_same():
    assert INT.union(INT) == INT


def test_union_two_types():
    assert INT.union(STR) == RubyType.union_of(INT, STR)


def test_union_merges_unions_without_duplicates():
    a = RubyType.union_of(INT, STR)
    b = RubyType.union_of(STR, NIL)
    assert a.union(b) == RubyType.union_of(INT, STR, NIL)


def test_union_appends_to_existing_union():
    a = RubyType.union_of(INT, STR)
    assert a.union(NIL).args == (INT, STR, NIL)
    assert a.union(INT) == a


def test_union_prepends_when_right_is_union():
    b = RubyType.union_of(STR, NIL)
    assert INT.union(b).args == (INT, STR, NIL)
    assert STR.union(b) == b


def test_types_are_hashable_values():
    seen = {RubyType.array_of(INT), RubyType.array_of(INT), INT}
    assert len(seen) == 2


def test_method_signature_defaults_and_equality():
    sig = MethodSignature("greet", [ParamSig("name", has_default=True)])
    assert sig.return_type == RubyType.ANY
    assert sig.visibility is Visibility.PUBLIC
    assert not sig.is_class_method
    assert sig == MethodSignature("greet", [ParamSig("name", has_default=True)])
    assert sig != MethodSignature("greet", [ParamSig("name")])
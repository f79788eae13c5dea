"""Type representation used by the semantic analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeKind(Enum):
    """The shape of a Ruby type."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    SYMBOL = "symbol"
    BOOL = "bool"
    NIL = "nil"
    ARRAY = "array"
    HASH = "hash"
    RANGE = "range"
    REGEXP = "regexp"
    PROC = "proc"
    INSTANCE = "instance"
    CLASS = "class"
    MODULE = "module"
    UNION = "union"
    OPTIONAL = "optional"
    VOID = "void"
    SELF = "self"
    ANY = "any"
    UNKNOWN = "unknown"


_SIMPLE_NAMES = {
    TypeKind.INTEGER: "Integer",
    TypeKind.FLOAT: "Float",
    TypeKind.STRING: "String",
    TypeKind.SYMBOL: "Symbol",
    TypeKind.BOOL: "Bool",
    TypeKind.NIL: "nil",
    TypeKind.RANGE: "Range",
    TypeKind.REGEXP: "Regexp",
    TypeKind.PROC: "Proc",
    TypeKind.VOID: "void",
    TypeKind.SELF: "self",
    TypeKind.ANY: "any",
    TypeKind.UNKNOWN: "?",
}


@dataclass(frozen=True)
class RubyType:
    """An immutable Ruby type.

    ``name`` carries the class or module name for instance, class and module
    types; ``args`` holds the element types of arrays, hashes, optionals and
    the members of unions.
    """

    kind: TypeKind = TypeKind.UNKNOWN
    name: str | None = None
    args: tuple[RubyType, ...] = ()

    # Constructors for the parameterised shapes.

    @classmethod
    def array_of(cls, element: RubyType) -> RubyType:
        return cls(TypeKind.ARRAY, args=(element,))

    @classmethod
    def hash_of(cls, key: RubyType, value: RubyType) -> RubyType:
        return cls(TypeKind.HASH, args=(key, value))

    @classmethod
    def instance(cls, name: str) -> RubyType:
        return cls(TypeKind.INSTANCE, name=name)

    @classmethod
    def class_of(cls, name: str) -> RubyType:
        return cls(TypeKind.CLASS, name=name)

    @classmethod
    def module_of(cls, name: str) -> RubyType:
        return cls(TypeKind.MODULE, name=name)

    @classmethod
    def union_of(cls, *members: RubyType) -> RubyType:
        return cls(TypeKind.UNION, args=tuple(members))

    @classmethod
    def optional_of(cls, inner: RubyType) -> RubyType:
        return cls(TypeKind.OPTIONAL, args=(inner,))

    @property
    def inner(self) -> RubyType:
        """The wrapped type of an array or optional type."""
        if self.kind not in (TypeKind.ARRAY, TypeKind.OPTIONAL):
            raise ValueError(f"{self} has no inner type")
        return self.args[0]

    def is_compatible_with(self, other: RubyType) -> bool:
        """Whether a value of this type may be assigned where ``other`` is expected."""
        if self == other:
            return True
        if TypeKind.ANY in (self.kind, other.kind):
            return True
        if TypeKind.UNKNOWN in (self.kind, other.kind):
            return True
        if other.kind is TypeKind.OPTIONAL:
            if self.kind is TypeKind.NIL:
                return True
            return self.is_compatible_with(other.args[0])
        if self.kind is TypeKind.INTEGER and other.kind is TypeKind.FLOAT:
            return True
        if other.kind is TypeKind.UNION:
            return any(self.is_compatible_with(member) for member in other.args)
        if self.kind is TypeKind.INSTANCE and other.kind is TypeKind.INSTANCE:
            return self.name == other.name
        return False

    def is_numeric(self) -> bool:
        return self.kind in (TypeKind.INTEGER, TypeKind.FLOAT)

    def is_collection(self) -> bool:
        return self.kind in (TypeKind.ARRAY, TypeKind.HASH)

    def optional(self) -> RubyType:
        """This type made nilable (``T | nil``)."""
        if self.kind in (TypeKind.OPTIONAL, TypeKind.NIL):
            return self
        return RubyType.optional_of(self)

    def union(self, other: RubyType) -> RubyType:
        """The union of this type and ``other``, without duplicate members."""
        if self.kind is TypeKind.UNION and other.kind is TypeKind.UNION:
            members = list(self.args)
            members.extend(t for t in other.args if t not in self.args)
            return RubyType.union_of(*members)
        if self.kind is TypeKind.UNION:
            if other in self.args:
                return self
            return RubyType.union_of(*self.args, other)
        if other.kind is TypeKind.UNION:
            if self in other.args:
                return other
            return RubyType.union_of(self, *other.args)
        if self == other:
            return self
        return RubyType.union_of(self, other)

    def __str__(self) -> str:
        kind = self.kind
        if kind in _SIMPLE_NAMES:
            return _SIMPLE_NAMES[kind]
        if kind is TypeKind.ARRAY:
            return f"Array<{self.args[0]}>"
        if kind is TypeKind.HASH:
            return f"Hash<{self.args[0]}, {self.args[1]}>"
        if kind is TypeKind.INSTANCE:
            return f"{self.name}"
        if kind is TypeKind.CLASS:
            return f"Class<{self.name}>"
        if kind is TypeKind.MODULE:
            return f"Module<{self.name}>"
        if kind is TypeKind.UNION:
            return " | ".join(str(t) for t in self.args)
        return f"{self.args[0]}?"


RubyType.INTEGER = RubyType(TypeKind.INTEGER)
RubyType.FLOAT = RubyType(TypeKind.FLOAT)
RubyType.STRING = RubyType(TypeKind.STRING)
RubyType.SYMBOL = RubyType(TypeKind.SYMBOL)
RubyType.BOOL = RubyType(TypeKind.BOOL)
RubyType.NIL = RubyType(TypeKind.NIL)
RubyType.RANGE = RubyType(TypeKind.RANGE)
RubyType.REGEXP = RubyType(TypeKind.REGEXP)
RubyType.PROC = RubyType(TypeKind.PROC)
RubyType.VOID = RubyType(TypeKind.VOID)
RubyType.SELF = RubyType(TypeKind.SELF)
RubyType.ANY = RubyType(TypeKind.ANY)
RubyType.UNKNOWN = RubyType(TypeKind.UNKNOWN)


class Visibility(Enum):
    """Method or attribute visibility."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"


@dataclass
class ParamSig:
    """A parameter in a method signature."""

    name: str
    ty: RubyType = field(default_factory=lambda: RubyType.ANY)
    has_default: bool = False
    is_rest: bool = False
    is_keyword: bool = False
    is_block: bool = False


@dataclass
class MethodSignature:
    """A method signature used to type method calls."""

    name: str
    params: list[ParamSig] = field(default_factory=list)
    return_type: RubyType = field(default_factory=lambda: RubyType.ANY)
    visibility: Visibility = Visibility.PUBLIC
    is_class_method: bool = False
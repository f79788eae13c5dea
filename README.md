# rbsemantic

Semantic analysis for Ruby programs that are given as syntax trees.
`SemanticAnalyzer.analyze` makes two passes over a `Program`:

1. **Symbol collection**: method, class and module definitions are entered
   into the symbol table, and each class's superclass is recorded.
2. **Body analysis**: every statement and expression is walked. The analyzer
   infers a `RubyType` for each expression, records local, instance, class
   and global variables and constants, and collects problems as
   `Diagnostic`s.

The analyzer reports these problems:

- `return` used outside a method (warning)
- `yield` used outside a method (error)
- an instance variable assigned outside a class or method (warning)
- a class variable assigned outside a class (warning)
- a constant assigned when the name is already defined (warning)
- a compound assignment such as `x += 1` to an undefined local variable (error)
- a superclass that is neither defined nor a known class (error)

Built-in methods such as `puts`, `to_s` and `gets`, constants such as `ARGV`
and `ENV`, and classes such as `Object`, `String` and `StandardError` are
defined before analysis starts. A call to a known method is given that
method's return type.

`analyze` returns the diagnostics as a list rather than raising them. It
raises `TypeError` only when it meets an object that is not a statement,
expression or assignment target node.

## Installation

```
pip install .
```

## Usage

Build a syntax tree from the node classes in `rbsemantic.nodes` and pass it
to `SemanticAnalyzer.analyze`:

```python
from rbsemantic.analyzer import SemanticAnalyzer
from rbsemantic.nodes import (
    AssignmentStmt, ClassDef, ConstRef, ConstantTarget, IntegerLit,
    Program, SourceSpan,
)

span = SourceSpan(0, 1)
program = Program(body=[
    AssignmentStmt(target=ConstantTarget("LIMIT"), value=IntegerLit(1), span=span),
    AssignmentStmt(target=ConstantTarget("LIMIT"), value=IntegerLit(2), span=span),
    ClassDef(name="Widget", superclass=ConstRef(["Missing"]), body=[], span=span),
])

for diagnostic in SemanticAnalyzer().analyze(program):
    print(diagnostic.severity, diagnostic.message)
```

This prints:

```
warning already initialized constant LIMIT
error undefined superclass 'Missing'
```

Each `Diagnostic` has a `severity` (`Severity.ERROR` or `Severity.WARNING`),
a `message` and the `span` of the statement it concerns.

After analysis, the analyzer's `scopes` attribute holds the top-level
symbols. Each symbol has its inferred type in `ty`, and local variables keep
count of their references in `ref_count`:

```python
analyzer = SemanticAnalyzer()
analyzer.analyze(program)
print(analyzer.scopes.lookup("LIMIT").ty)   # Integer
```

## Nodes

`rbsemantic.nodes` defines the tree as dataclasses:

- expressions: `IntegerLit`, `FloatLit`, `StringLit`, `InterpolatedString`,
  `SymbolLit`, `BoolLit`, `NilLit`, `SelfExpr`, `RegexLit`, `ArrayLit`,
  `HashLit`, `RangeLit`, `LocalVar`, `InstanceVar`, `ClassVar`, `GlobalVar`,
  `ConstRef`, `BinaryOp`, `UnaryOp`, `MethodCall`, `BlockCall`, `SuperCall`,
  `YieldExpr`, `Lambda`, `ProcExpr`, `Ternary`, `Defined` and
  `PatternMatch`
- assignment targets: `LocalVarTarget`, `InstanceVarTarget`,
  `ClassVarTarget`, `GlobalVarTarget`, `ConstantTarget`, `IndexTarget` and
  `AttributeTarget`
- statements: `ExprStmt`, `AssignmentStmt`, `CompoundAssignmentStmt`,
  `MethodDef`, `ClassDef`, `ModuleDef`, `IfStmt`, `UnlessStmt`, `WhileStmt`,
  `UntilStmt`, `ForStmt`, `CaseStmt`, `BeginRescueStmt`, `ReturnStmt`,
  `YieldStmt`, `BreakStmt`, `NextStmt`, `RequireStmt`, `AliasStmt`,
  `AttrDecl` and `MixinStmt`
- `Program`, `Param`, `ParamKind`, `BinOperator` and `UnOperator`, whose
  values are the Ruby spellings of the operators

## Types

`rbsemantic.types.RubyType` is an immutable value with a `TypeKind`, a
`name` for instance, class and module types, and `args` for element and
member types. Simple types are class attributes such as `RubyType.INTEGER`,
`RubyType.STRING` and `RubyType.ANY`. The others are built with
`array_of`, `hash_of`, `instance`, `class_of`, `module_of`, `union_of` and
`optional_of`.

Its methods are:

- `is_compatible_with(other)`: whether a value of this type can be assigned
  where `other` is expected. `any` and unknown types match everything,
  `nil` matches any optional type, and `Integer` matches `Float`.
- `is_numeric()` and `is_collection()`.
- `optional()`: turns `T` into `T?`; optional types and `nil` stay as they
  are.
- `union(other)`: merges two types into a union, dropping duplicates.

`str()` gives names such as `Array<Integer>`, `Hash<any, any>`,
`Class<String>`, `Integer | String` and `String?`.

`MethodSignature`, `ParamSig` and `Visibility` describe methods in the
symbol table.

## Scopes

`rbsemantic.scope.ScopeStack` holds nested lexical scopes of the kinds in
`ScopeKind`: top level, class, module, method, block, lambda and rescue. A
lookup searches the innermost scope first and then each enclosing scope.
The top-level scope is never popped. The stack also reports whether it is
inside a method or class, the names of the enclosing class and method, and
its depth. Entries are `Symbol`s, tagged with a `SymbolKind`.

## What this package does not do

It does not read Ruby source text. There is no lexer, no parser and no
command-line tool: the tree must be built from the node classes. It also
produces no code. It analyses the tree and reports diagnostics, and nothing
more.

## Running the tests

```
pip install .[test]
pytest
```
"""Syntax tree nodes and their indented S-expression rendering."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


def indent_str(level: int) -> str:
    """Return the indentation prefix for ``level`` (two spaces per level)."""
    if level < 0:
        raise ValueError(f"indent level must not be negative: {level}")
    return "  " * level


def _format_float(value: float) -> str:
    # Six significant digits, as a default-formatted stream would print it.
    return format(value, "g")


class AccessModifier(enum.Enum):
    """Visibility of a declaration."""

    PRIVATE = "private"
    PROTECTED = "protected"
    PUBLIC = "public"


class AsyncKind(enum.Enum):
    """Scheduling hint of an async function."""

    NONE = "none"
    IO = "io"
    COMPUTE = "compute"


# --- Type expressions --------------------------------------------------------


@dataclass
class TypeExpr(ABC):
    """A type written in source code."""

    location: Any = field(default=None, kw_only=True)

    @abstractmethod
    def to_string(self) -> str:
        """Render the type as it would be written."""

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class NamedType(TypeExpr):
    """A named type with optional generic arguments and nullability."""

    name: str
    nullable: bool = False
    type_args: List[TypeExpr] = field(default_factory=list)

    def to_string(self) -> str:
        result = self.name
        if self.type_args:
            result += "<" + ", ".join(arg.to_string() for arg in self.type_args) + ">"
        if self.nullable:
            result += "?"
        return result


# --- Expressions -------------------------------------------------------------


@dataclass
class Expr(ABC):
    """Base of every expression node."""

    location: Any = field(default=None, kw_only=True)

    @abstractmethod
    def to_string(self, indent: int = 0) -> str:
        """Render the node, indented by ``indent`` levels."""

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class IntLiteralExpr(Expr):
    value: int

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(IntLiteral {self.value})"


@dataclass
class FloatLiteralExpr(Expr):
    value: float

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(FloatLiteral {_format_float(self.value)})"


@dataclass
class StringLiteralExpr(Expr):
    value: str

    def to_string(self, indent: int = 0) -> str:
        return f'{indent_str(indent)}(StringLiteral "{self.value}")'


@dataclass
class CharLiteralExpr(Expr):
    value: str

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(CharLiteral '{self.value}')"


@dataclass
class BoolLiteralExpr(Expr):
    value: bool

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(BoolLiteral {'true' if self.value else 'false'})"


@dataclass
class NilLiteralExpr(Expr):
    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(NilLiteral)"


@dataclass
class IfExpr(Expr):
    condition: Expr
    then_expr: Expr
    else_expr: Expr

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(IfExpr {self.condition.to_string()}"
            f" then {self.then_expr.to_string()}"
            f" else {self.else_expr.to_string()})"
        )


@dataclass
class IdentifierExpr(Expr):
    name: str

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(Identifier {self.name})"


@dataclass
class BinaryExpr(Expr):
    op: str
    left: Expr
    right: Expr

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(BinaryExpr {self.op}\n"
            f"{self.left.to_string(indent + 1)}\n"
            f"{self.right.to_string(indent + 1)})"
        )


@dataclass
class UnaryExpr(Expr):
    op: str
    operand: Expr

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(UnaryExpr {self.op}\n"
            f"{self.operand.to_string(indent + 1)})"
        )


@dataclass
class CallExpr(Expr):
    callee: Expr
    arguments: List[Expr] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(CallExpr\n{self.callee.to_string(indent + 1)}\n"
        result += f"{indent_str(indent + 1)}(Args"
        if self.arguments:
            result += "\n" + "\n".join(arg.to_string(indent + 2) for arg in self.arguments)
        return result + "))"


@dataclass
class MemberExpr(Expr):
    object: Expr
    member: str

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(MemberExpr .{self.member}\n"
            f"{self.object.to_string(indent + 1)})"
        )


@dataclass
class ThisExpr(Expr):
    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(This)"


@dataclass
class ConstructExpr(Expr):
    class_name: str
    field_inits: List[Tuple[str, Expr]] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(Construct {self.class_name}"
        for name, value in self.field_inits:
            result += f"\n{indent_str(indent + 1)}{name}: {value.to_string(0)}"
        return result + ")"


@dataclass
class AssignExpr(Expr):
    target: Expr
    value: Expr

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(AssignExpr\n"
            f"{self.target.to_string(indent + 1)}\n"
            f"{self.value.to_string(indent + 1)})"
        )


@dataclass
class RangeExpr(Expr):
    start: Expr
    end: Expr

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(RangeExpr\n"
            f"{self.start.to_string(indent + 1)}\n"
            f"{self.end.to_string(indent + 1)})"
        )


@dataclass
class NilCoalesceExpr(Expr):
    """``value ?? default_value``."""

    value: Expr
    default_value: Expr

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(NilCoalesce\n"
            f"{self.value.to_string(indent + 1)}\n"
            f"{self.default_value.to_string(indent + 1)})"
        )


@dataclass
class ForceUnwrapExpr(Expr):
    """``operand!``."""

    operand: Expr

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(ForceUnwrap\n"
            f"{self.operand.to_string(indent + 1)})"
        )


@dataclass
class OptionalChainExpr(Expr):
    """``object?.member``."""

    object: Expr
    member: str

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(OptionalChain\n"
            f"{self.object.to_string(indent + 1)}\n"
            f"{indent_str(indent + 1)}(Member {self.member}))"
        )


@dataclass
class StringInterpolationExpr(Expr):
    """Literal parts interleaved with expressions; one more part than expressions."""

    parts: List[str] = field(default_factory=list)
    expressions: List[Expr] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(StringInterpolation"
        for i, part in enumerate(self.parts):
            if part:
                result += f'\n{indent_str(indent + 1)}(Part "{part}")'
            if i < len(self.expressions):
                result += "\n" + self.expressions[i].to_string(indent + 1)
        return result + ")"


@dataclass
class ArrayLiteralExpr(Expr):
    elements: List[Expr] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(ArrayLiteral"
        for element in self.elements:
            result += "\n" + element.to_string(indent + 1)
        return result + ")"


@dataclass
class IndexExpr(Expr):
    object: Expr
    index: Expr

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(Index\n"
            f"{self.object.to_string(indent + 1)}\n"
            f"{self.index.to_string(indent + 1)})"
        )


@dataclass
class LambdaParam:
    name: str
    type: Optional[TypeExpr] = None


@dataclass
class LambdaExpr(Expr):
    """``(params) => expr`` or ``(params) => { block }``."""

    params: List[LambdaParam] = field(default_factory=list)
    body_expr: Optional[Expr] = None
    body_block: Optional["Block"] = None

    def to_string(self, indent: int = 0) -> str:
        rendered = []
        for param in self.params:
            text = param.name
            if param.type is not None:
                text += ": " + param.type.to_string()
            rendered.append(text)
        result = f"{indent_str(indent)}(Lambda ({', '.join(rendered)})"
        if self.body_expr is not None:
            result += "\n" + self.body_expr.to_string(indent + 1)
        elif self.body_block is not None:
            result += "\n" + self.body_block.to_string(indent + 1)
        return result + ")"


@dataclass
class AwaitExpr(Expr):
    operand: Expr

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(Await\n{self.operand.to_string(indent + 1)})"


@dataclass
class MatchArm:
    """One ``pattern => body`` arm of a match."""

    case_name: str
    body: Optional["Stmt"] = None
    enum_name: str = ""
    binding_name: str = ""


@dataclass
class MatchExpr(Expr):
    subject: Expr
    arms: List[MatchArm] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(MatchExpr\n{self.subject.to_string(indent + 1)}"
        for arm in self.arms:
            result += f"\n{indent_str(indent + 1)}(Arm "
            if arm.enum_name:
                result += arm.enum_name + "."
            result += arm.case_name
            if arm.body is not None:
                result += "\n" + arm.body.to_string(indent + 2)
            result += ")"
        return result + ")"


# --- Statements --------------------------------------------------------------


@dataclass
class Stmt(ABC):
    """Base of every statement and declaration node."""

    location: Any = field(default=None, kw_only=True)

    @abstractmethod
    def to_string(self, indent: int = 0) -> str:
        """Render the node, indented by ``indent`` levels."""

    def __str__(self) -> str:
        return self.to_string()


@dataclass
class Block(Stmt):
    statements: List[Stmt] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(Block"
        for stmt in self.statements:
            result += "\n" + stmt.to_string(indent + 1)
        return result + ")"


@dataclass
class ExprStmt(Stmt):
    expression: Expr

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(ExprStmt\n{self.expression.to_string(indent + 1)})"


@dataclass
class VarDecl(Stmt):
    """``var`` (mutable) or ``let`` declaration."""

    name: str
    is_mutable: bool = True
    type_annotation: Optional[TypeExpr] = None
    initializer: Optional[Expr] = None
    access: AccessModifier = AccessModifier.PRIVATE

    def to_string(self, indent: int = 0) -> str:
        keyword = "VarDecl" if self.is_mutable else "LetDecl"
        result = f"{indent_str(indent)}({keyword} {self.name}"
        if self.type_annotation is not None:
            result += " : " + self.type_annotation.to_string()
        if self.initializer is not None:
            result += "\n" + self.initializer.to_string(indent + 1)
        return result + ")"


@dataclass
class ReturnStmt(Stmt):
    value: Optional[Expr] = None

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(ReturnStmt"
        if self.value is not None:
            result += "\n" + self.value.to_string(indent + 1)
        return result + ")"


@dataclass
class IfStmt(Stmt):
    """``if`` with an optional else branch (a Block or another IfStmt)."""

    condition: Expr
    then_block: Block
    else_block: Optional[Stmt] = None

    def to_string(self, indent: int = 0) -> str:
        inner = indent_str(indent + 1)
        result = f"{indent_str(indent)}(IfStmt\n"
        result += f"{inner}(Condition\n{self.condition.to_string(indent + 2)})\n"
        result += f"{inner}(Then\n{self.then_block.to_string(indent + 2)})"
        if self.else_block is not None:
            result += f"\n{inner}(Else\n{self.else_block.to_string(indent + 2)})"
        return result + ")"


@dataclass
class WhileStmt(Stmt):
    condition: Expr
    body: Block

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(WhileStmt\n"
        result += f"{indent_str(indent + 1)}(Condition\n{self.condition.to_string(indent + 2)})\n"
        return result + self.body.to_string(indent + 1) + ")"


@dataclass
class ForStmt(Stmt):
    variable: str
    iterable: Expr
    body: Block

    def to_string(self, indent: int = 0) -> str:
        return (
            f"{indent_str(indent)}(ForStmt {self.variable} in\n"
            f"{self.iterable.to_string(indent + 1)}\n"
            f"{self.body.to_string(indent + 1)})"
        )


@dataclass
class BreakStmt(Stmt):
    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(BreakStmt)"


@dataclass
class ContinueStmt(Stmt):
    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(ContinueStmt)"


@dataclass
class ThrowStmt(Stmt):
    expression: Expr

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(ThrowStmt\n{self.expression.to_string(indent + 1)})"


@dataclass
class CatchClause:
    """``catch (var_name: type_name) { body }``."""

    var_name: str
    type_name: str
    body: Block


@dataclass
class TryCatchStmt(Stmt):
    try_block: Block
    catch_clauses: List[CatchClause] = field(default_factory=list)
    finally_block: Optional[Block] = None

    def to_string(self, indent: int = 0) -> str:
        inner = indent_str(indent + 1)
        result = f"{indent_str(indent)}(TryCatch\n"
        result += f"{inner}(Try\n{self.try_block.to_string(indent + 2)})"
        for clause in self.catch_clauses:
            result += f"\n{inner}(Catch {clause.var_name}: {clause.type_name}\n"
            result += clause.body.to_string(indent + 2) + ")"
        if self.finally_block is not None:
            result += f"\n{inner}(Finally\n{self.finally_block.to_string(indent + 2)})"
        return result + ")"


@dataclass
class UnsafeBlock(Stmt):
    body: Block

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(Unsafe\n{self.body.to_string(indent + 1)})"


# --- Declarations ------------------------------------------------------------


@dataclass
class Annotation:
    """``@Name(args...)`` attached to a declaration."""

    name: str
    arguments: List[str] = field(default_factory=list)
    location: Any = None


@dataclass
class Parameter:
    name: str
    type: Optional[TypeExpr] = None
    location: Any = None


def _render_params(parameters: List[Parameter], indent: int) -> str:
    result = ""
    for param in parameters:
        result += f"\n{indent_str(indent)}(Param {param.name}"
        if param.type is not None:
            result += " : " + param.type.to_string()
        result += ")"
    return result


@dataclass
class FuncDecl(Stmt):
    name: str
    parameters: List[Parameter] = field(default_factory=list)
    return_type: Optional[TypeExpr] = None
    body: Optional[Block] = None
    annotations: List[Annotation] = field(default_factory=list)
    access: AccessModifier = AccessModifier.PRIVATE
    is_operator: bool = False
    is_async: bool = False
    async_kind: AsyncKind = AsyncKind.NONE

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(FuncDecl "
        if self.is_async:
            result += "async "
            if self.async_kind is AsyncKind.IO:
                result += "io "
            elif self.async_kind is AsyncKind.COMPUTE:
                result += "compute "
        result += self.name
        result += f"\n{indent_str(indent + 1)}(Params"
        result += _render_params(self.parameters, indent + 2) + ")"
        if self.return_type is not None:
            result += f"\n{indent_str(indent + 1)}(Returns {self.return_type.to_string()})"
        if self.body is not None:
            result += "\n" + self.body.to_string(indent + 1)
        return result + ")"


@dataclass
class ExternFuncDecl(Stmt):
    name: str
    parameters: List[Parameter] = field(default_factory=list)
    return_type: Optional[TypeExpr] = None
    is_variadic: bool = False

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(ExternFuncDecl {self.name}"
        result += f"\n{indent_str(indent + 1)}(Params"
        result += _render_params(self.parameters, indent + 2)
        if self.is_variadic:
            result += f"\n{indent_str(indent + 2)}(Variadic)"
        result += ")"
        if self.return_type is not None:
            result += f"\n{indent_str(indent + 1)}(Returns {self.return_type.to_string()})"
        return result + ")"


@dataclass
class ImportDecl(Stmt):
    path: str

    def to_string(self, indent: int = 0) -> str:
        return f"{indent_str(indent)}(ImportDecl {self.path})"


@dataclass
class ClassDecl(Stmt):
    name: str
    fields: List[VarDecl] = field(default_factory=list)
    methods: List[FuncDecl] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)
    is_public: bool = False
    is_shared: bool = False
    type_params: List[str] = field(default_factory=list)
    base_class: str = ""
    interfaces: List[str] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(ClassDecl "
        if self.is_public:
            result += "public "
        if self.is_shared:
            result += "shared "
        result += self.name
        if self.type_params:
            result += "<" + ", ".join(self.type_params) + ">"
        if self.base_class:
            result += " : " + self.base_class
        for iface in self.interfaces:
            result += " : " + iface
        for member in [*self.fields, *self.methods]:
            result += "\n" + member.to_string(indent + 1)
        return result + ")"


@dataclass
class InterfaceDecl(Stmt):
    name: str
    methods: List[FuncDecl] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(InterfaceDecl {self.name}"
        for method in self.methods:
            result += "\n" + method.to_string(indent + 1)
        return result + ")"


@dataclass
class EnumVariant:
    """An enum case, optionally carrying a value of ``associated_type``."""

    name: str
    associated_type: Optional[TypeExpr] = None
    location: Any = None


@dataclass
class EnumDecl(Stmt):
    name: str
    cases: List[str] = field(default_factory=list)
    variants: List[EnumVariant] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)

    def to_string(self, indent: int = 0) -> str:
        result = f"{indent_str(indent)}(EnumDecl {self.name}"
        for case in self.cases:
            result += f"\n{indent_str(indent + 1)}(Case {case})"
        return result + ")"


@dataclass
class Program:
    """Root of a parsed source file."""

    declarations: List[Stmt] = field(default_factory=list)

    def to_string(self) -> str:
        result = "(Program"
        for decl in self.declarations:
            result += "\n" + decl.to_string(1)
        return result + ")"

    def __str__(self) -> str:
        return self.to_string()
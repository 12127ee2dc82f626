"""AST node definitions for mini-ML.

Every node is a frozen dataclass. ``pos`` is the source offset of the
token that licenses the node and is left out of equality, so two trees
compare equal when they have the same shape and contents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

# ── Types ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class UnitType:
    pass


@dataclass(frozen=True)
class IntType:
    pass


@dataclass(frozen=True)
class BoolType:
    pass


@dataclass(frozen=True)
class FunType:
    domain: Type
    codomain: Type


@dataclass(frozen=True)
class ProdType:
    left: Type
    right: Type


@dataclass(frozen=True)
class SumType:
    left: Type
    right: Type


@dataclass(frozen=True)
class RefType:
    pointee: Type


Type = Union[UnitType, IntType, BoolType, FunType, ProdType, SumType, RefType]


# ── Operators ────────────────────────────────────────────────────


class UnOp(Enum):
    NOT = "~"


class BinOp(Enum):
    PLUS = "+"
    MINUS = "-"
    MUL = "*"
    DIV = "/"
    AND = "&&"
    OR = "||"
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    EQ = "=="
    NEQ = "/="


# ── Expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class BooleanLit:
    value: bool
    pos: int = field(compare=False)


@dataclass(frozen=True)
class IntegerLit:
    value: int
    pos: int = field(compare=False)


@dataclass(frozen=True)
class UnitLit:
    pos: int = field(compare=False)


@dataclass(frozen=True)
class IdentifierExpr:
    name: str
    pos: int = field(compare=False)


@dataclass(frozen=True)
class UnaryExpr:
    op: UnOp
    operand: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class BinaryExpr:
    left: Expr
    op: BinOp
    right: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class ApplyExpr:
    func: Expr
    arg: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class PairExpr:
    first: Expr
    second: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class FstExpr:
    expr: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class SndExpr:
    expr: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class InlExpr:
    other_type: Type  # type of the right alternative
    expr: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class InrExpr:
    other_type: Type  # type of the left alternative
    expr: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class RefExpr:
    expr: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class DerefExpr:
    expr: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class AssignExpr:
    target: Expr
    value: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class LambdaExpr:
    param: str
    param_type: Type
    body: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class IfExpr:
    condition: Expr
    then_branch: Expr
    else_branch: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class LetExpr:
    name: str
    var_type: Type
    value: Expr
    body: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class LetRecExpr:
    name: str
    param: str
    param_type: Type
    return_type: Type
    value: Expr
    body: Expr
    pos: int = field(compare=False)


@dataclass(frozen=True)
class CaseExpr:
    scrutinee: Expr
    left_name: str
    left_body: Expr
    right_name: str
    right_body: Expr
    pos: int = field(compare=False)


Expr = Union[
    BooleanLit, IntegerLit, UnitLit, IdentifierExpr,
    UnaryExpr, BinaryExpr, ApplyExpr,
    PairExpr, FstExpr, SndExpr, InlExpr, InrExpr,
    RefExpr, DerefExpr, AssignExpr,
    LambdaExpr, IfExpr, LetExpr, LetRecExpr, CaseExpr,
]

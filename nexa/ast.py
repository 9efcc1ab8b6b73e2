from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from .types import DataType

class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    EQ = "=="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def precedence(self) -> int:
        # comparisons < additive < multiplicative
        if self in (Operator.MUL, Operator.DIV):
            return 2
        if self in (Operator.ADD, Operator.SUB):
            return 1
        return 0

# Expressions
@dataclass(frozen=True)
class Expr:
    pass

@dataclass(frozen=True)
class Number(Expr):
    value: int

@dataclass(frozen=True)
class Float(Expr):
    value: float

@dataclass(frozen=True)
class String(Expr):
    value: str

@dataclass(frozen=True)
class Bool(Expr):
    value: bool

@dataclass(frozen=True)
class Identifier(Expr):
    name: str

@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    op: Operator
    right: Expr
    # Set on the "add" chain that packs the arguments of print(a, b, ...).
    folded: bool = False

@dataclass(frozen=True)
class Unary(Expr):
    op: Operator
    operand: Expr

@dataclass(frozen=True)
class Range(Expr):
    start: Expr
    end: Expr

# Statements
@dataclass(frozen=True)
class Stmt:
    pass

@dataclass(frozen=True)
class VarDecl(Stmt):
    name: str
    data_type: Optional[DataType]
    init: Expr

@dataclass(frozen=True)
class Assign(Stmt):
    name: str
    value: Expr

@dataclass(frozen=True)
class Print(Stmt):
    value: Expr

@dataclass(frozen=True)
class PrintLn(Stmt):
    values: List[Expr]

@dataclass(frozen=True)
class If(Stmt):
    cond: Expr
    then_block: List[Stmt]
    else_block: Optional[List[Stmt]] = None

@dataclass(frozen=True)
class For(Stmt):
    var: str
    iterable: Expr
    body: List[Stmt]

@dataclass(frozen=True)
class While(Stmt):
    cond: Expr
    body: List[Stmt]

@dataclass(frozen=True)
class ExprStmt(Stmt):
    expr: Expr

@dataclass(frozen=True)
class Program:
    statements: List[Stmt] = field(default_factory=list)

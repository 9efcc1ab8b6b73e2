from __future__ import annotations
import logging
from typing import List, Optional
from . import ast as A
from .types import DataType
from .errors import EmitError

logger = logging.getLogger(__name__)

INDENT = "    "


def rust_literal_text(text: str) -> str:
    # Nexa strings have no escapes, Rust literals do.
    return text.replace("\\", "\\\\")


class CodeGenRust:
    """Walks a parsed program and renders it as a Rust ``main`` function."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.lines: List[str] = []
        self.indent_level = 0
        self.log = log or logger

    def generate(self, program: A.Program) -> str:
        self._emit("fn main() {")
        self.indent_level += 1
        for st in program.statements:
            self._emit_stmt(st)
        self.indent_level -= 1
        self._emit("}")
        self.log.debug("generated %d lines of Rust", len(self.lines))
        return "\n".join(self.lines) + "\n"

    def _emit(self, text: str):
        self.lines.append(INDENT * self.indent_level + text)

    def _emit_body(self, stmts: List[A.Stmt]):
        self.indent_level += 1
        for st in stmts:
            self._emit_stmt(st)
        self.indent_level -= 1

    def _emit_stmt(self, st: A.Stmt):
        if isinstance(st, A.VarDecl):
            decl = f"let mut {st.name}"
            if st.data_type is not None:
                decl += f": {st.data_type.rust_name}"
            self._emit(f"{decl} = {self._initializer(st.data_type, st.init)};")
        elif isinstance(st, A.Assign):
            self._emit(f"{st.name} = {self._expr(st.value)};")
        elif isinstance(st, A.Print):
            self._emit(self._print(st.value))
        elif isinstance(st, A.PrintLn):
            for value in st.values:
                self._emit(f'println!("{{}}", {self._expr(value)});')
        elif isinstance(st, A.If):
            self._emit(f"if {self._expr(st.cond)} {{")
            self._emit_body(st.then_block)
            if st.else_block is not None:
                self._emit("} else {")
                self._emit_body(st.else_block)
            self._emit("}")
        elif isinstance(st, A.For):
            if isinstance(st.iterable, A.Range):
                start = self._expr(st.iterable.start)
                end = self._expr(st.iterable.end)
                self._emit(f"for {st.var} in {start}..{end} {{")
            else:
                self._emit(f"for {st.var} in ({self._expr(st.iterable)}).chars() {{")
            self._emit_body(st.body)
            self._emit("}")
        elif isinstance(st, A.While):
            self._emit(f"while {self._expr(st.cond)} {{")
            self._emit_body(st.body)
            self._emit("}")
        elif isinstance(st, A.ExprStmt):
            self._emit(f"{self._expr(st.expr)};")
        else:
            raise EmitError(f"cannot generate code for statement {type(st).__name__}")

    def _initializer(self, data_type: Optional[DataType], init: A.Expr) -> str:
        # Literal coercions so the value matches the declared Rust type.
        if data_type == DataType.FLOAT:
            if isinstance(init, A.Number):
                return f"{init.value}.0"
            if isinstance(init, A.Unary) and init.op == A.Operator.SUB and isinstance(init.operand, A.Number):
                return f"-{init.operand.value}.0"
        if data_type == DataType.STRING and isinstance(init, A.String):
            return f"({self._expr(init)}).to_string()"
        return self._expr(init)

    def _print(self, value: A.Expr) -> str:
        if isinstance(value, A.Binary) and value.folded:
            params = self._unfold(value)
            template = " ".join("{}" for _ in params)
            args = ", ".join(self._expr(p) for p in params)
            return f'print!("{template}", {args});'
        if isinstance(value, A.String):
            # The literal itself is the format string.
            text = rust_literal_text(value.value).replace("{", "{{").replace("}", "}}")
            return f'print!("{text}");'
        return f'print!("{{}}", {self._expr(value)});'

    def _unfold(self, expr: A.Expr) -> List[A.Expr]:
        if isinstance(expr, A.Binary) and expr.folded:
            return self._unfold(expr.left) + self._unfold(expr.right)
        return [expr]

    def _expr(self, e: A.Expr) -> str:
        if isinstance(e, A.Bool):
            return "true" if e.value else "false"
        if isinstance(e, A.Number):
            return str(e.value)
        if isinstance(e, A.Float):
            return repr(e.value)
        if isinstance(e, A.String):
            return f'"{rust_literal_text(e.value)}"'
        if isinstance(e, A.Identifier):
            return e.name
        if isinstance(e, A.Binary):
            return f"({self._expr(e.left)} {e.op.symbol} {self._expr(e.right)})"
        if isinstance(e, A.Unary):
            if e.op != A.Operator.SUB:
                raise EmitError(f"unsupported unary operator '{e.op.symbol}'")
            return f"-{self._expr(e.operand)}"
        if isinstance(e, A.Range):
            return f"({self._expr(e.start)}..{self._expr(e.end)})"
        raise EmitError(f"cannot generate code for expression {type(e).__name__}")


def generate(program: A.Program, log: Optional[logging.Logger] = None) -> str:
    return CodeGenRust(log).generate(program)

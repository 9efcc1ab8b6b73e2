"""
Tokenize, parse and generate in one call.

Each stage runs to completion before the next one starts; the first error
aborts the whole compilation.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from runtime.rustc import RunOutput, Toolchain
from .lexer import Lexer
from .parser import Parser
from .codegen_rust import CodeGenRust
from .errors import NexaError


@dataclass
class CompileResult:
    code: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def compile_source(source: str, log: Optional[logging.Logger] = None) -> str:
    """Compile Nexa source text to Rust source text, raising NexaError on failure."""
    tokens = Lexer(source, log).tokenize()
    program = Parser(tokens, log).parse()
    return CodeGenRust(log).generate(program)


def try_compile(source: str, log: Optional[logging.Logger] = None) -> CompileResult:
    """Like compile_source, but report failure as a single error string."""
    try:
        return CompileResult(code=compile_source(source, log))
    except NexaError as e:
        return CompileResult(error=e.describe())


def compile_and_run(source: str, toolchain: Toolchain,
                    log: Optional[logging.Logger] = None) -> RunOutput:
    code = compile_source(source, log)
    return toolchain.run(code)

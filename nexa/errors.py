from __future__ import annotations
from typing import Optional


class NexaError(Exception):
    """Base class for every failure raised by the compiler pipeline."""

    stage = "Compile"

    def __init__(self, message: str, line: Optional[int] = None, col: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.col = col

    def describe(self) -> str:
        """Render the error the way the front ends report it, stage first."""
        if self.line is not None:
            return f"{self.stage} error at {self.line}:{self.col}: {self.message}"
        return f"{self.stage} error: {self.message}"


class LexError(NexaError):
    stage = "Lexical"

    def __init__(self, message: str, offset: int, line: int, col: int):
        super().__init__(message, line, col)
        self.offset = offset


class ParseError(NexaError):
    stage = "Syntax"

    def __init__(self, message: str, token=None):
        if token is not None:
            super().__init__(message, token.line, token.col)
        else:
            super().__init__(message)
        self.token = token


class EmitError(NexaError):
    # Raised for tree shapes the Rust generator cannot render.
    stage = "Emission"

"""
Interactive read-eval-print loop for Nexa.
"""
from __future__ import annotations
import sys
from typing import List, Optional, TextIO

from nexa.pipeline import try_compile
from runtime.rustc import Toolchain, ToolchainError

PROMPT = "nexa> "
CONTINUATION_PROMPT = "... "
BLOCK_KEYWORDS = ("for ", "if ", "while ")


def needs_continuation(line: str) -> bool:
    """Guess whether a line opens a block that continues on following lines."""
    stripped = line.strip()
    if stripped.endswith(":"):
        return True
    if "{" in stripped:
        return False
    return any(kw in stripped for kw in BLOCK_KEYWORDS)


class Repl:
    """
    Reads programs line by line, compiles them, and runs them through the
    configured toolchain. Without a toolchain only the generated Rust is shown.
    """

    def __init__(
        self,
        toolchain: Optional[Toolchain] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        show_code: bool = True,
    ):
        self._toolchain = toolchain
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout
        self._show_code = show_code
        self._history: List[str] = []

    @property
    def history(self) -> List[str]:
        return list(self._history)

    def _write(self, text: str):
        self._out.write(text)
        self._out.flush()

    def _read_line(self, prompt: str) -> Optional[str]:
        self._write(prompt)
        line = self._in.readline()
        if line == "":
            return None
        return line

    def read_program(self) -> Optional[str]:
        """Read one complete program; None at end of input."""
        first = self._read_line(PROMPT)
        if first is None:
            return None
        first = first.strip()
        if not needs_continuation(first):
            return first
        lines = [first]
        while True:
            line = self._read_line(CONTINUATION_PROMPT)
            if line is None or line.strip() == "":
                break
            # keep leading whitespace, it drives the indentation blocks
            lines.append(line.rstrip("\r\n"))
        return "\n".join(lines) + "\n"

    def execute(self, source: str):
        self._history.append(source)
        result = try_compile(source)
        if not result.ok:
            self._write(f"{result.error}\n")
            return
        if self._show_code:
            self._write(f"Generated Rust:\n{result.code}")
        if self._toolchain is None:
            return
        try:
            output = self._toolchain.run(result.code)
        except ToolchainError as e:
            self._write(f"{e}\n")
            return
        self._write(output.stdout)

    def loop(self):
        self._write("Nexa REPL - type 'exit' to quit\n")
        while True:
            program = self.read_program()
            if program is None or program.strip() == "exit":
                self._write("Bye!\n")
                break
            if not program.strip():
                continue
            self.execute(program)

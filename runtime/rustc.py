from __future__ import annotations
import logging
import shutil
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass
class RunOutput:
    stdout: str
    exit_status: int


class ToolchainError(Exception):
    """Base class for failures outside the compiler itself."""
    pass


class ToolchainMissing(ToolchainError):
    """Raised when the native compiler cannot be found."""
    pass


class CompileFailed(ToolchainError):
    """Raised when rustc rejects the generated code."""

    def __init__(self, message: str, stderr: str = "", stdout: str = "", code: str = ""):
        super().__init__(message)
        self.stderr = stderr
        self.stdout = stdout
        self.code = code


class RunFailed(ToolchainError):
    """Raised when the compiled program cannot start or exits non-zero."""

    def __init__(self, message: str, stderr: str = "", exit_status: Optional[int] = None):
        super().__init__(message)
        self.stderr = stderr
        self.exit_status = exit_status


class Toolchain(Protocol):
    def run(self, code: str) -> RunOutput:
        ...


class RustcToolchain:
    """Compiles Rust source with rustc in a scratch directory and runs the binary."""

    def __init__(self, rustc: str = "rustc", timeout: Optional[float] = None,
                 workdir: Optional[Path] = None):
        self.rustc = rustc
        self.timeout = timeout
        self.workdir = workdir

    def run(self, code: str) -> RunOutput:
        exe = shutil.which(self.rustc)
        if exe is None:
            raise ToolchainMissing(f"Rust compiler '{self.rustc}' not found on PATH")

        with tempfile.TemporaryDirectory(prefix="nexa-", dir=self.workdir) as tmp:
            source = Path(tmp) / "main.rs"
            binary = Path(tmp) / ("main.exe" if sys.platform == "win32" else "main")
            source.write_text(code, encoding="utf-8")

            logger.debug("compiling %s with %s", source, exe)
            try:
                compiled = subprocess.run(
                    [exe, str(source), "-o", str(binary), "-A", "warnings"],
                    capture_output=True, text=True, timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as e:
                raise CompileFailed(f"rustc timed out after {self.timeout}s", code=code) from e
            if compiled.returncode != 0:
                raise CompileFailed(
                    f"Compile error:\nSTDERR: {compiled.stderr}\nSTDOUT: {compiled.stdout}\n"
                    f"Generated code:\n{code}",
                    stderr=compiled.stderr, stdout=compiled.stdout, code=code,
                )

            logger.debug("running %s", binary)
            try:
                ran = subprocess.run(
                    [str(binary)], capture_output=True, text=True, timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as e:
                raise RunFailed(f"program timed out after {self.timeout}s") from e
            except OSError as e:
                raise RunFailed(f"failed to start program: {e}") from e
            if ran.returncode != 0:
                raise RunFailed(
                    f"Run error (exit status {ran.returncode}): {ran.stderr}",
                    stderr=ran.stderr, exit_status=ran.returncode,
                )
            return RunOutput(ran.stdout, ran.returncode)

"""
Compiler/toolchain runner with output capture and threading support.
"""
from __future__ import annotations
import logging
import threading
from typing import Callable, Optional
from dataclasses import dataclass
from enum import Enum, auto

from nexa.pipeline import compile_source
from nexa.errors import NexaError
from runtime.rustc import RustcToolchain, Toolchain, ToolchainError, RunFailed

logger = logging.getLogger(__name__)


class RunState(Enum):
    IDLE = auto()
    RUNNING = auto()
    FINISHED = auto()
    ERROR = auto()


@dataclass
class RunResult:
    state: RunState
    exit_code: Optional[int] = None
    output: str = ""
    error_message: Optional[str] = None


class Runner:
    """Compiles and runs Nexa code on a worker thread."""

    def __init__(
        self,
        on_output: Callable[[str], None],
        on_complete: Callable[[RunResult], None],
        toolchain: Optional[Toolchain] = None,
    ):
        self._on_output = on_output
        self._on_complete = on_complete
        self._toolchain = toolchain or RustcToolchain()
        self._thread: Optional[threading.Thread] = None
        self._state = RunState.IDLE

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == RunState.RUNNING

    def run(self, source_code: str) -> bool:
        """
        Compile and run the given source code.
        Returns True if execution started, False if already running.
        """
        if self.is_running:
            return False

        self._state = RunState.RUNNING
        self._thread = threading.Thread(target=self._run_impl, args=(source_code,), daemon=True)
        self._thread.start()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current run finishes. Returns False on timeout."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _finish(self, result: RunResult):
        self._state = result.state
        self._on_complete(result)

    def _run_impl(self, source_code: str):
        """Internal method that runs in the worker thread."""
        try:
            code = compile_source(source_code)
            output = self._toolchain.run(code)
        except NexaError as e:
            self._finish(RunResult(RunState.ERROR, error_message=e.describe()))
            return
        except RunFailed as e:
            self._finish(RunResult(RunState.ERROR, exit_code=e.exit_status, error_message=str(e)))
            return
        except ToolchainError as e:
            self._finish(RunResult(RunState.ERROR, error_message=str(e)))
            return
        except Exception as e:
            logger.exception("unexpected failure while running program")
            self._finish(RunResult(RunState.ERROR, error_message=f"Internal error: {e}"))
            return

        if output.stdout:
            self._on_output(output.stdout)
        self._finish(RunResult(RunState.FINISHED, exit_code=output.exit_status, output=output.stdout))

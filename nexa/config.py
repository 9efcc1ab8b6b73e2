"""Runtime settings shared by the command line, REPL and editor service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Resolved configuration, normally read from ``NEXA_*`` environment variables."""

    rustc: str = "rustc"
    buffer_path: Path = Path("temp.nexa")
    host: str = "127.0.0.1"
    port: int = 8080
    execute: bool = False
    run_timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        timeout = env.get("NEXA_TIMEOUT")
        return cls(
            rustc=env.get("NEXA_RUSTC", "rustc"),
            buffer_path=Path(env.get("NEXA_BUFFER", "temp.nexa")),
            host=env.get("NEXA_HOST", "127.0.0.1"),
            port=int(env.get("NEXA_PORT", "8080")),
            execute=env.get("NEXA_EXECUTE", "false").lower() in TRUE_VALUES,
            run_timeout=float(timeout) if timeout else None,
        )

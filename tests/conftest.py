"""Shared pytest fixtures."""

from __future__ import annotations

from typing import List, Optional

import pytest

from runtime.rustc import RunOutput, ToolchainError


class FakeToolchain:
    """Stands in for rustc: records the generated code and returns canned output."""

    def __init__(self, stdout: str = "", error: Optional[ToolchainError] = None):
        self.stdout = stdout
        self.error = error
        self.received: List[str] = []

    def run(self, code: str) -> RunOutput:
        self.received.append(code)
        if self.error is not None:
            raise self.error
        return RunOutput(self.stdout, 0)


@pytest.fixture
def fake_toolchain():
    return FakeToolchain(stdout="1\n2\n")


ROUND_TRIP_SOURCE = "var i = 1; while i < 3 { println(i); i = i + 1; }"


@pytest.fixture
def round_trip_source() -> str:
    return ROUND_TRIP_SOURCE


@pytest.fixture
def make_toolchain():
    return FakeToolchain

"""Shared fixtures."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from tea_rank_badge.output import Log


class CapturedLog:
    """A Log whose stdout and stderr channels write into string buffers."""

    def __init__(self, debug: bool = False, quiet: bool = False) -> None:
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.log = Log(
            quiet=quiet,
            debug_enabled=debug,
            console=Console(file=self.out, soft_wrap=True, width=200),
            err_console=Console(file=self.err, soft_wrap=True, width=200),
        )

    @property
    def stdout(self) -> str:
        return self.out.getvalue()

    @property
    def stderr(self) -> str:
        return self.err.getvalue()


@pytest.fixture()
def captured() -> CapturedLog:
    return CapturedLog(debug=True)


@pytest.fixture()
def silent_log() -> Log:
    return Log(quiet=True)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep TEA_* variables from the developer's shell out of tests."""
    for key in ("TEA_API_BASE", "TEA_TIMEOUT_MS", "TEA_RETRIES"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def capture_log():
    """Factory for CapturedLog instances with custom flags."""
    return CapturedLog

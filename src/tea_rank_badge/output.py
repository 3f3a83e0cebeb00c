"""Console logging collaborator.

A :class:`Log` is built once per command from the ``--quiet`` and
``--debug`` flags and handed to every component that reports progress.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text


def _stdout() -> Console:
    return Console(soft_wrap=True)


def _stderr() -> Console:
    return Console(stderr=True, soft_wrap=True)


@dataclass(frozen=True)
class Log:
    """Info, success, warning, error and debug channels.

    ``quiet`` silences everything except errors. ``debug`` enables the
    debug channel.
    """

    quiet: bool = False
    debug_enabled: bool = False
    console: Console = field(default_factory=_stdout)
    err_console: Console = field(default_factory=_stderr)

    def info(self, message: str) -> None:
        if not self.quiet:
            self.console.print(Text.assemble(("ℹ", "blue"), " ", message))

    def success(self, message: str) -> None:
        if not self.quiet:
            self.console.print(Text.assemble(("✓", "green"), " ", message))

    def warn(self, message: str) -> None:
        if not self.quiet:
            self.err_console.print(Text.assemble(("⚠", "yellow"), " ", message))

    def error(self, message: str) -> None:
        self.err_console.print(Text.assemble(("✖", "red"), " ", message))

    def debug(self, message: str, data: Any = None) -> None:
        if not self.debug_enabled:
            return
        self.console.print(Text.assemble(("⚙", "dim"), " ", (message, "dim")))
        if data is not None:
            self.console.print(Text(json.dumps(data, indent=2, default=str), style="dim"))


def configure_logging(debug: bool) -> None:
    """Route stdlib logging (ours and httpx's) through Rich when debugging."""
    if not debug:
        logging.getLogger().setLevel(logging.WARNING)
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=_stderr(), show_path=False)],
        force=True,
    )

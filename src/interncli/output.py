# src/interncli/output.py

"""
The user-facing message sink.

Status and progress text for the person running the tests goes through a
single replaceable function, so callers (and tests) can redirect or silence
it. Diagnostic logging goes through structlog instead.
"""

from collections.abc import Callable
from typing import Any, TypeAlias

from rich.console import Console

LogSink: TypeAlias = Callable[..., None]

# file=None makes rich resolve sys.stdout on every write.
_console = Console(highlight=False)


def console_sink(message: Any = "", *args: Any) -> None:
    """Default sink: prints rich markup to standard output."""
    _console.print(message, *args)


_sink: LogSink = console_sink


def set_logger(sink: LogSink) -> None:
    """Replaces the process-wide sink. Later calls overwrite earlier ones."""
    global _sink
    _sink = sink


def get_logger() -> LogSink:
    return _sink


# 🔼⚙️

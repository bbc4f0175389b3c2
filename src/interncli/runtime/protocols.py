#
# src/interncli/runtime/protocols.py
#
"""
Defines the outcome types and the supervisor protocol for test runs.
"""
from typing import Literal, Protocol, TypeAlias, runtime_checkable

from attrs import define, field

from interncli.config.models import TestRunConfig

FAILED_RUN_MESSAGE = "Tests did not complete successfully"


@define(frozen=True, slots=True)
class RunSuccess:
    """The runner (or the watcher wrapping it) exited with code 0."""

    success: Literal[True] = field(default=True, init=False)
    exit_code: int = field(default=0, init=False)


@define(frozen=True, slots=True)
class RunFailed:
    """
    The run failed to configure, failed to launch, or exited nonzero.

    The exit code is always normalized to 1.
    """

    message: str = field()
    success: Literal[False] = field(default=False, init=False)
    exit_code: int = field(default=1, init=False)


RunOutcome: TypeAlias = RunSuccess | RunFailed


@runtime_checkable
class RunSupervisor(Protocol):
    """
    Protocol for anything that can launch and supervise a test run.
    """

    async def run(self, config: TestRunConfig, argv: list[str] | None = None) -> RunOutcome:
        """
        Launches the runner for `config` and waits for it to finish.

        Args:
            config: The test run options.
            argv: A prebuilt argument vector; built from `config` when omitted.

        Returns:
            Exactly one RunOutcome per call.
        """
        ...

# 🔼⚙️

#
# src/interncli/runtime/supervisor.py
#
"""
Launches Intern (directly, or under nodemon in watch mode) and turns its exit
into a RunOutcome.
"""
import asyncio
import os
import subprocess
import uuid
from pathlib import Path

import structlog
from rich.markup import escape

from interncli.arguments import build_arguments
from interncli.config.models import TestRunConfig
from interncli.exceptions import ConfigurationError, LaunchError, RunFailure
from interncli.output import LogSink, get_logger
from interncli.project import find_project_root, get_project_name
from interncli.runtime.protocols import (
    FAILED_RUN_MESSAGE,
    RunFailed,
    RunOutcome,
    RunSuccess,
    RunSupervisor,
)
from interncli.state import RunState, RunStatus
from interncli.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.supervisor")

RUNNER_ENV_VAR = "INTERNCLI_RUNNER"
WATCHER_ENV_VAR = "INTERNCLI_WATCHER"
DEFAULT_RUNNER = Path("node_modules/.bin/intern")
DEFAULT_WATCHER = Path("node_modules/.bin/nodemon")

# nodemon: quiet, watch TypeScript sources and unit tests, 1s debounce.
WATCH_ARGS = ["-q", "-e", "ts,tsx", "--watch", "src", "--watch", "tests/unit", "--delay", "1"]


class ProcessSupervisor(RunSupervisor):
    """
    Implements the RunSupervisor protocol with asyncio subprocesses.

    Child processes inherit stdin/stdout/stderr, so runner output reaches the
    terminal unmodified. Messages for the user go through `sink`, which falls
    back to the process-wide sink from `interncli.output` when not given.
    """

    def __init__(
        self,
        sink: LogSink | None = None,
        runner_path: Path | str | None = None,
        watcher_path: Path | str | None = None,
        cwd: Path | str | None = None,
    ):
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.runner_path = self._resolve_executable(runner_path, RUNNER_ENV_VAR, DEFAULT_RUNNER)
        self.watcher_path = self._resolve_executable(watcher_path, WATCHER_ENV_VAR, DEFAULT_WATCHER)
        self._sink = sink
        self._log = log.bind(supervisor_id=id(self))

    def _resolve_executable(self, explicit: Path | str | None, env_var: str, default: Path) -> Path:
        path = Path(explicit or os.environ.get(env_var) or default)
        return path if path.is_absolute() else (self.cwd / path).resolve()

    def emit(self, message: str) -> None:
        sink = self._sink or get_logger()
        sink(message)

    def build_command(self, config: TestRunConfig, argv: list[str]) -> list[str]:
        if config.watch:
            return [str(self.watcher_path), *WATCH_ARGS, str(self.runner_path), *argv]
        return [str(self.runner_path), *argv]

    def _show_config(self, argv: list[str]) -> str:
        completed = subprocess.run(
            [str(self.runner_path), "showConfig", *argv],
            capture_output=True,
            text=True,
            cwd=self.cwd,
            check=False,
        )
        return completed.stdout

    async def show_diagnostics(self, argv: list[str]) -> None:
        """Prints the resolved Intern config and arguments. Never raises."""
        self.emit("[bold blue]  Intern config:[/bold blue]")
        try:
            shown = await asyncio.to_thread(self._show_config, argv)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            self._log.warning("showConfig failed", error=str(e), runner=str(self.runner_path))
            shown = f"<unavailable: {e}>"
        self.emit("    [blue]" + escape(shown) + "[/blue]")
        self.emit("[bold blue]  Parsed arguments for intern:[/bold blue]")
        self.emit("    [blue]" + escape("\n    ".join(argv)) + "[/blue]")

    async def _spawn_and_wait(self, command: list[str], state: RunState) -> int:
        run_log = self._log.bind(run_id=state.run_id, executable=command[0])
        try:
            process = await asyncio.create_subprocess_exec(*command, cwd=self.cwd)
        except (OSError, ValueError) as e:
            run_log.error("Failed to launch process", error=str(e), emoji_key="fail")
            raise LaunchError(str(e), executable=command[0], details=e) from e

        state.update_status(RunStatus.RUNNING)
        run_log.info("Process started", pid=process.pid, emoji_key="launch")
        returncode = await process.wait()
        state.returncode = returncode
        run_log.info("Process exited", returncode=returncode)
        return returncode

    async def run(self, config: TestRunConfig, argv: list[str] | None = None) -> RunOutcome:
        state = RunState(run_id=uuid.uuid4().hex[:8])
        run_log = self._log.bind(run_id=state.run_id, watch=config.watch)

        try:
            if argv is None:
                argv = build_arguments(config, cwd=self.cwd)
        except ConfigurationError as e:
            run_log.error("Invalid test configuration", error=str(e))
            return self._fail(state, e.message)
        except OSError as e:
            run_log.error("Could not prepare reporter output", error=str(e), emoji_key="path")
            return self._fail(state, str(e))

        project_name = get_project_name(find_project_root(self.cwd))
        mode = " using watch mode" if config.watch else ""
        self.emit(f"\n[underline]testing \"{escape(project_name)}\"{mode}...[/underline]\n")

        if config.verbose:
            await self.show_diagnostics(argv)

        state.update_status(RunStatus.LAUNCHING)
        command = self.build_command(config, argv)
        run_log.debug("Launching", command=command, emoji_key="watch" if config.watch else "launch")

        try:
            returncode = await self._spawn_and_wait(command, state)
            if returncode != 0:
                raise RunFailure(FAILED_RUN_MESSAGE, returncode=returncode)
        except (LaunchError, RunFailure) as e:
            return self._fail(state, e.message)

        state.update_status(RunStatus.SUCCEEDED)
        self.emit("\n  [green]testing[/green] completed successfully")
        run_log.info("Test run succeeded", emoji_key="success")
        return RunSuccess()

    def _fail(self, state: RunState, message: str) -> RunFailed:
        state.update_status(RunStatus.FAILED, error_msg=message)
        self.emit("\n  [red]testing[/red] failed")
        self._log.warning("Test run failed", run_id=state.run_id, error=message, emoji_key="fail")
        return RunFailed(message)


def run_tests(config: TestRunConfig, **kwargs) -> RunOutcome:
    """Synchronous convenience wrapper around ProcessSupervisor.run()."""
    supervisor = ProcessSupervisor(**kwargs)
    return asyncio.run(supervisor.run(config))


# 🔼⚙️
